from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "change-me"
MIN_JWT_SECRET_LENGTH = 32


class Settings(BaseSettings):
    app_env: str = "dev"
    api_host: str = "0.0.0.0"
    api_port: int = 3001

    database_url: str = "postgresql+psycopg://app:app@db:5432/celltrack"

    # Session tokens
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 24

    # Seeded administrator (scripts/seed.py)
    admin_cell_id: str = "admin"
    admin_password: str = "admin123"
    admin_name: str = "Administrator"

    # Middleware configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    log_format: str = "json"  # json or text
    enable_request_logging: bool = True
    cors_origins: str = ""  # Comma-separated list of allowed origins
    enable_gzip: bool = True

    model_config = {
        "env_file": "../.env",
        "env_file_encoding": "utf-8",
    }

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def validate_jwt_secret(config: Settings) -> None:
    """Refuse to run production with a default or weak token secret.

    Outside production the problem is only logged so local development
    keeps working with the shipped default.
    """
    problem = None
    if config.jwt_secret == DEFAULT_JWT_SECRET:
        problem = "JWT_SECRET is the built-in default"
    elif len(config.jwt_secret) < MIN_JWT_SECRET_LENGTH:
        problem = f"JWT_SECRET is shorter than {MIN_JWT_SECRET_LENGTH} characters"

    if problem is None:
        return

    if config.is_production:
        raise RuntimeError(f"{problem}; set a strong secret before starting")

    logger.warning(f"{problem}; tokens are not safe outside development")


settings = Settings()
