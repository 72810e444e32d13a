"""
Centralized configuration management with validation
"""
import logging
from functools import lru_cache

from fastapi import Request
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Token signing
    jwt_secret_key: str = Field(..., min_length=32)
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 24

    # Database
    database_url: str = "sqlite:///./blog.db"

    # Image host
    imgur_client_id: str = ""
    imgur_api_url: str = "https://api.imgur.com/3"
    media_timeout: int = 30

    # Paging
    default_page_size: int = 10
    max_page_size: int = 100

    # Logging
    log_level: str = "INFO"

    @field_validator('jwt_algorithm')
    @classmethod
    def validate_jwt_algorithm(cls, v):
        valid_algorithms = ['HS256', 'HS384', 'HS512']
        if v.upper() not in valid_algorithms:
            raise ValueError(f'JWT algorithm must be one of {valid_algorithms}')
        return v.upper()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of {valid_levels}')
        return v.upper()

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()


_log_handler = None


def configure_logging(level: str = "INFO"):
    """Install a single stream handler on the root logger."""
    global _log_handler
    root = logging.getLogger()
    if _log_handler is None:
        _log_handler = logging.StreamHandler()
        _log_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(_log_handler)
    root.setLevel(level)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
