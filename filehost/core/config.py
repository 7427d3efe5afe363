from functools import lru_cache
from typing import List, Optional, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Application
    APP_NAME: str = "FileHost API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    # Server
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 3001
    BACKEND_DOMAIN: str = "localhost"
    BACKEND_PROTOCOL: str = "http"

    # Frontend console
    FRONTEND_DOMAIN: str = "localhost"
    FRONTEND_PROTOCOL: str = "http"
    FRONTEND_PORT: int = 3002

    # Production override
    PRODUCTION_DOMAIN: Optional[str] = None
    PRODUCTION_PROTOCOL: str = "https"

    # JWT
    JWT_SECRET_KEY: str = "fallback-secret-key"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24

    # Passwords
    BCRYPT_ROUNDS: int = 12
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # Database
    DATABASE_PATH: str = "./data/database.sqlite"

    @property
    def DATABASE_URL(self) -> str:
        return f"sqlite+aiosqlite:///{self.DATABASE_PATH}"

    # Redis (metadata cache, disabled when unset)
    REDIS_URL: Optional[str] = None
    CACHE_TTL_SECONDS: int = 3600

    # File Upload
    UPLOAD_DIR: str = "./uploads"
    MAX_FILE_SIZE_BYTES: int = 1024 * 1024 * 1024
    ALLOWED_MIME_TYPES: Union[List[str], str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "text/plain",
    ]
    PUBLIC_CACHE_MAX_AGE: int = 31536000

    @field_validator("ALLOWED_MIME_TYPES", mode="before")
    @classmethod
    def assemble_allowed_mime_types(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and v.startswith("["):
            return json.loads(v)
        elif isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def BACKEND_URL(self) -> str:
        if self.is_production and self.PRODUCTION_DOMAIN:
            return f"{self.PRODUCTION_PROTOCOL}://{self.PRODUCTION_DOMAIN}"
        return f"{self.BACKEND_PROTOCOL}://{self.BACKEND_DOMAIN}:{self.BACKEND_PORT}"

    @property
    def FRONTEND_URL(self) -> str:
        if self.is_production and self.PRODUCTION_DOMAIN:
            return f"{self.PRODUCTION_PROTOCOL}://{self.PRODUCTION_DOMAIN}"
        return f"{self.FRONTEND_PROTOCOL}://{self.FRONTEND_DOMAIN}:{self.FRONTEND_PORT}"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        if not self.is_production:
            return ["*"]
        origins = [self.FRONTEND_URL]
        if self.PRODUCTION_DOMAIN:
            origins.append(f"{self.PRODUCTION_PROTOCOL}://{self.PRODUCTION_DOMAIN}")
            origins.append(f"{self.PRODUCTION_PROTOCOL}://www.{self.PRODUCTION_DOMAIN}")
        return list(dict.fromkeys(origins))

    def public_url(self, file_id: str) -> str:
        """Absolute URL of a file on the public gateway"""
        return f"{self.BACKEND_URL}{self.API_PREFIX}/public/{file_id}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
