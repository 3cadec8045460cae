from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Landlord Review Service API"
    SERVICE_NAME: str = "review-service"
    VERSION: str = "1.0.0"
    API_PREFIX: str = ""

    # Runtime
    HOST: str = "0.0.0.0"
    PORT: int = 3003
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Database
    # DATABASE_URL is optional; when it is not set the URL is assembled from
    # the POSTGRES_* parts and /test reports the store as not configured.
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "landlord_reviews"
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def database_configured(self) -> bool:
        return bool(self.DATABASE_URL)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def assemble_db_url(self) -> str:
        if self.DATABASE_URL:
            return with_psycopg2_driver(self.DATABASE_URL)
        return f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


def with_psycopg2_driver(url: str) -> str:
    """Pin bare postgres URLs to psycopg2, the driver this service ships with."""
    for scheme in ("postgresql://", "postgres://"):
        if url.startswith(scheme):
            return "postgresql+psycopg2://" + url[len(scheme):]
    return url

settings = Settings()
