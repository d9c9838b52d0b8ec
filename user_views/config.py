import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: Optional[str] = Field(None, alias="USER_VIEWS_DATABASE_URL")
    database_pool_size: int = Field(10, alias="USER_VIEWS_DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(10, alias="USER_VIEWS_DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(False, alias="USER_VIEWS_DATABASE_ECHO")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[arg-type]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid user views configuration: {exc}") from exc
