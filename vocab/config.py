from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Document store
    mongodb_uri: str = "mongodb://localhost:27017/vocabulary_db"
    mongodb_default_database: str = "vocabulary_db"

    # Cache
    redis_url: str = "redis://localhost:6379"

    # Health checks
    health_probe_timeout_seconds: float = Field(default=2.0, gt=0)

    # App
    service_name: str = "vocabulary-service"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int | None = None
    log_level: str = "INFO"
    debug: bool = False
    cors_origins: list[str] = ["*"]
