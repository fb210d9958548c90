import re

def sanitize_string(v: str) -> str:
    if not isinstance(v, str):
        return v
    # 1. Strip HTML tags
    v = re.sub(r'<[^>]*>', '', v)
    # 2. Trim whitespace
    return v.strip()


def sanitize_optional(v: str | None) -> str | None:
    """Like ``sanitize_string`` but collapses blank strings to ``None``."""
    v = sanitize_string(v)
    if isinstance(v, str) and not v:
        return None
    return v
