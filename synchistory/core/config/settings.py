"""Application settings loaded from the environment."""

from typing import Optional

from pydantic import Field, PostgresDsn, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from synchistory.core.config.enums import Environment


class Settings(BaseSettings):
    """Settings for the sync history service.

    Every value can be overridden with an environment variable of the same
    name. Database settings follow the usual POSTGRES_* convention.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"

    # Job store
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "synchistory"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "synchistory"
    POSTGRES_SSLMODE: str = "prefer"
    SQLALCHEMY_ASYNC_DATABASE_URI: Optional[PostgresDsn] = None
    db_pool_size: int = 10
    db_pool_max_overflow: int = 20

    # Listing
    JOB_LIST_DEFAULT_PAGE_SIZE: int = Field(200, gt=0)
    JOB_LIST_MAX_PAGE_SIZE: int = Field(1000, gt=0)
    STATS_FETCH_CONCURRENCY: int = Field(10, gt=0)

    # Connection context lookups
    CONFIG_API_URL: str = "http://localhost:8001/api"
    CONFIG_API_TIMEOUT_SECONDS: float = Field(10.0, gt=0)

    # Workflow state
    TEMPORAL_ENABLED: bool = False
    TEMPORAL_HOST: str = "localhost"
    TEMPORAL_PORT: int = 7233
    TEMPORAL_NAMESPACE: str = "default"
    CONNECTION_WORKFLOW_ID_TEMPLATE: str = "connection_manager_{connection_id}"

    # Attempt logs
    LOG_STORAGE_ROOT: str = "./local_storage/job-logs"
    ATTEMPT_LOG_TAIL_LINES: int = Field(1000, gt=0)

    PLATFORM_VERSION: str = "0.1.0"

    @model_validator(mode="after")
    def assemble_db_connection(self) -> "Settings":
        """Build the async database URI from the POSTGRES_* parts when not given."""
        if self.SQLALCHEMY_ASYNC_DATABASE_URI is None:
            self.SQLALCHEMY_ASYNC_DATABASE_URI = PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD or None,
                host=self.POSTGRES_HOST,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        return self

    @model_validator(mode="after")
    def check_page_size_bounds(self) -> "Settings":
        """Default page size must fit under the maximum."""
        if self.JOB_LIST_DEFAULT_PAGE_SIZE > self.JOB_LIST_MAX_PAGE_SIZE:
            raise ValueError("JOB_LIST_DEFAULT_PAGE_SIZE exceeds JOB_LIST_MAX_PAGE_SIZE")
        return self

    @property
    def temporal_address(self) -> str:
        """Host:port of the Temporal frontend."""
        return f"{self.TEMPORAL_HOST}:{self.TEMPORAL_PORT}"
