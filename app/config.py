"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra env vars like MARIADB_* used by docker-compose
    )

    # Application
    PROJECT_NAME: str = "Campus Forum API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)
    API_V1_STR: str = "/api/v1"

    # Security (tokens are issued by the auth service, we only verify them)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8000"]
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./forum.db"
    # Sync URL for Alembic migrations
    DATABASE_URL_SYNC: str = "sqlite:///./forum.db"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Forum limits
    NOTIFICATIONS_LIMIT: int = 30
    ADMIN_REPORTS_LIMIT: int = 100
    REPORT_REASON_MAX_LENGTH: int = 500
    BIO_MAX_LENGTH: int = 300
    # Deeper replies are listed flat under their ancestor at this level
    MAX_THREAD_DEPTH: int = 50

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


class UserRole:
    """User role constants"""

    STUDENT = "student"
    ADMIN = "admin"

    ALL = (STUDENT, ADMIN)


class NotificationType:
    """Notification type constants"""

    COMMENT = "comment"
    REPLY = "reply"
    UPVOTE = "upvote"
    # Present in the schema but not dispatched by any content action yet
    ACCEPTED = "accepted"

    ALL = (COMMENT, REPLY, UPVOTE, ACCEPTED)


class ReportTargetType:
    """Report target type constants"""

    POST = "post"
    COMMENT = "comment"

    ALL = (POST, COMMENT)
