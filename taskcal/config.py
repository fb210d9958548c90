from pydantic import EmailStr
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./taskcal.db"

    # Mount point for all routers, e.g. "/api"
    API_PREFIX: str = ""
    CORS_ORIGINS: str = "*"

    EMAIL_HOST: str | None = None
    EMAIL_PORT: int = 587
    EMAIL_USER: str | None = None
    EMAIL_PASS: str | None = None
    EMAIL_FROM: str | None = None
    EMAIL_MAX_ATTEMPTS: int = 1
    OUTBOX_SWEEP_MINUTES: int = 5

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # Bootstrap admin, created at startup when a password is given
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_EMAIL: EmailStr = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD: str | None = None

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = "taskcal.log"

    class Config:
        env_file = ".env"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
