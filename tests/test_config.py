import pytest
from pydantic import ValidationError

from taskcal.config import Settings


def test_default_admin_email_rejects_reserved_domain():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_ADMIN_EMAIL="admin@localhost")


def test_cors_origins_split():
    assert Settings(CORS_ORIGINS="http://a.test, http://b.test,").cors_origins == ["http://a.test", "http://b.test"]
