"""Employee Manager: Configuration via pydantic-settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

DEFAULT_SECRET_KEY = "your_jwt_secret_key_change_in_production"


class Settings(BaseSettings):
    # Document store
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "employee_manager"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGO_SOCKET_TIMEOUT_MS: int = 45000
    MONGO_CONNECT_RETRIES: int = 5
    MONGO_CONNECT_RETRY_DELAY_SECONDS: float = 2.0

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGINS: List[str] = ["*"]

    # Security
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_DAYS: int = 7

    # Profile pictures
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE_MB: int = 5

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def uses_default_secret(self) -> bool:
        return self.SECRET_KEY == DEFAULT_SECRET_KEY


@lru_cache
def get_settings() -> Settings:
    return Settings()
