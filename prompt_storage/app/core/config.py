"""
Application configuration settings.
"""
import os
from typing import List, Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# connections = core_count * 2, see HikariCP pool sizing notes
MAX_CONNECTIONS: int = (os.cpu_count() or 2) * 2

STAGES = ("dev", "prod")


class Settings(BaseSettings):
    """Application settings."""

    # Application metadata
    PROJECT_NAME: str = "Simple Prompt Storage API"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Deployment stage selects the database file
    STAGE: str = "dev"
    DATA_DIR: Optional[str] = None
    DATABASE_PATH: Optional[str] = None

    # Connection pool
    POOL_SIZE: int = Field(default=MAX_CONNECTIONS, ge=1)
    POOL_TIMEOUT: float = 30.0
    BUSY_TIMEOUT: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @field_validator("STAGE")
    @classmethod
    def check_stage(cls, v: str) -> str:
        if v not in STAGES:
            raise ValueError(f"Invalid stage: {v}")
        return v

    @model_validator(mode="after")
    def resolve_database_path(self) -> "Settings":
        if self.DATABASE_PATH:
            return self
        if self.STAGE == "prod":
            if not self.DATA_DIR:
                raise ValueError("DATA_DIR must be set when STAGE=prod")
            self.DATABASE_PATH = os.path.join(self.DATA_DIR, "prompts-prod.db")
        else:
            self.DATABASE_PATH = "prompts-dev.db"
        return self

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

# Initialize settings
settings = Settings()
