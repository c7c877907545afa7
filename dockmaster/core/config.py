"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
)

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


def _validate_http_url(name: str, v: str) -> str:
    if not v or not v.strip():
        raise ValueError(f"{name} must be set and non-empty")
    s = v.strip().lower()
    if not (s.startswith("http://") or s.startswith("https://")):
        raise ValueError(f"{name} must use http or https (e.g. http://localhost:8081)")
    return v.strip().rstrip("/")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    SERVICE_NAME: str = "docker-service"
    HOST: str = "0.0.0.0"
    PORT: int = 8081
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    # Single allowed browser origin for CORS (the dashboard).
    FRONTEND_URL: str = "http://localhost:3000"

    # Data directory holds the SQLite database unless DATABASE_URL points elsewhere.
    DATA_DIR: Path = Path("./data")
    DATABASE_URL: str | None = None

    # JWT authentication. When JWT_SECRET is unset a random secret is generated at
    # startup and every token is invalidated by a restart.
    JWT_SECRET: SecretStr | None = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24
    JWT_ISSUER: str = "dockmaster"
    BCRYPT_ROUNDS: int = 12

    # Bootstrap admin, created on first start only.
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: SecretStr = SecretStr("admin123")

    # Container runtime CLI and host metrics sources
    DOCKER_BINARY: str = "docker"
    PROC_ROOT: Path = Path("/proc")
    DISK_PATH: Path = Path("/")

    # Remote registry text search used by GET /images/search
    REGISTRY_SEARCH_URL: str = "https://hub.docker.com/v2/search/repositories/"
    REGISTRY_REQUEST_TIMEOUT_SEC: float = 10.0

    # Append-only audit log, capped to the newest entries
    AUDIT_LOG_ENABLED: bool = True
    AUDIT_LOG_MAX_ENTRIES: int = 1000

    SHUTDOWN_TIMEOUT_SEC: int = 30

    # Split-service deployment: upstreams the gateway proxies to
    AUTH_SERVICE_URL: str = "http://auth-service:8081"
    CONTAINER_SERVICE_URL: str = "http://container-service:8082"
    IMAGE_SERVICE_URL: str = "http://image-service:8083"
    VOLUME_SERVICE_URL: str = "http://volume-service:8084"
    NETWORK_SERVICE_URL: str = "http://network-service:8085"
    SYSTEM_SERVICE_URL: str = "http://container-service:8082"
    PROXY_REQUEST_TIMEOUT_SEC: float = 15.0

    @field_validator("SERVICE_NAME", "JWT_ALGORITHM", "JWT_ISSUER", "DOCKER_BINARY")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("value must be set and non-empty")
        return v.strip()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().lower()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(VALID_LOG_LEVELS)}")
        return level

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///data/dockmaster.db)"
            )
        return v.strip()

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr | None) -> SecretStr | None:
        # An empty value means "not configured", same as unset.
        if v is None or not v.get_secret_value().strip():
            return None
        return v

    @field_validator("JWT_EXPIRE_HOURS")
    @classmethod
    def validate_jwt_expire_hours(cls, v: int) -> int:
        if v < 1 or v > 720:
            raise ValueError("JWT_EXPIRE_HOURS must be between 1 and 720 (30 days)")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 16:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 16")
        return v

    @field_validator("ADMIN_USERNAME")
    @classmethod
    def validate_admin_username(cls, v: str) -> str:
        if not v or not v.strip() or len(v.strip()) > 255:
            raise ValueError("ADMIN_USERNAME must be 1-255 characters")
        return v.strip()

    @field_validator("ADMIN_PASSWORD")
    @classmethod
    def validate_admin_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("ADMIN_PASSWORD must be set and non-empty")
        return v

    @field_validator("FRONTEND_URL", "REGISTRY_SEARCH_URL")
    @classmethod
    def validate_public_urls(cls, v: str) -> str:
        return _validate_http_url("URL", v)

    @field_validator(
        "AUTH_SERVICE_URL",
        "CONTAINER_SERVICE_URL",
        "IMAGE_SERVICE_URL",
        "VOLUME_SERVICE_URL",
        "NETWORK_SERVICE_URL",
        "SYSTEM_SERVICE_URL",
    )
    @classmethod
    def validate_service_urls(cls, v: str) -> str:
        return _validate_http_url("service URL", v)

    @field_validator("REGISTRY_REQUEST_TIMEOUT_SEC", "PROXY_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError("request timeouts must be greater than 0 and at most 120")
        return v

    @field_validator("AUDIT_LOG_MAX_ENTRIES")
    @classmethod
    def validate_audit_max_entries(cls, v: int) -> int:
        if v < 1 or v > 100_000:
            raise ValueError("AUDIT_LOG_MAX_ENTRIES must be between 1 and 100000")
        return v

    @field_validator("SHUTDOWN_TIMEOUT_SEC")
    @classmethod
    def validate_shutdown_timeout(cls, v: int) -> int:
        if v < 0 or v > 300:
            raise ValueError("SHUTDOWN_TIMEOUT_SEC must be between 0 and 300")
        return v

    @model_validator(mode="after")
    def default_database_url(self) -> "Settings":
        if self.DATABASE_URL is None:
            self.DATABASE_URL = f"sqlite:///{self.DATA_DIR / 'dockmaster.db'}"
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
