from typing import List, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Crisis Updates"
    ENVIRONMENT: str = "development"
    API_V1_STR: str = "/api/v1"

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            v = v.strip("[").strip("]").strip('"').strip("'")
            if not v:
                return []
            return [i.strip().strip('"').strip("'") for i in v.split(",")]
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    # Snapshot persistence - off by default, the store is in-memory only
    PERSISTENCE_ENABLED: bool = False
    DATABASE_URL: str = "sqlite+aiosqlite:///./crisis_updates.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file="crisis_config.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
