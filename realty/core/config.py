# realty/core/config.py

import os
from typing import List

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# 저장소 루트 (realty/core/config.py 기준 두 단계 위)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    Realty CMS 설정. 환경 변수가 저장소 루트의 .env 파일보다 우선합니다.
    변수명은 대소문자를 구분하며, 모르는 변수는 무시합니다.
    """
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True,
    )

    # --- 서비스 ---
    APP_NAME: str = "Realty CMS API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Real-estate content management backend (company profile, team, partners)"
    APP_ENV: str = Field("development", description="development / production / testing")
    DEBUG_MODE: bool = Field(False, description="Echo SQL and log at DEBUG level")
    CORS_ORIGINS: List[str] = Field(["*"], description="Allowed CORS origins")

    # --- PostgreSQL (asyncpg) ---
    DATABASE_URL: SecretStr = Field(..., description="Async SQLAlchemy URL, e.g. postgresql+asyncpg://user:pw@host/db")

    # --- 로그인 토큰 ---
    SECRET_KEY: SecretStr = Field(..., description="HMAC key that signs access tokens")
    ALGORITHM: str = Field("HS256", description="JWT signing algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30, description="Access token lifetime in minutes")

    # --- 원격 이미지 저장소 (Cloudinary) ---
    CLOUDINARY_CLOUD_NAME: str = Field("", description="Cloudinary cloud name")
    CLOUDINARY_API_KEY: str = Field("", description="Cloudinary API key")
    CLOUDINARY_API_SECRET: SecretStr = Field(SecretStr(""), description="Cloudinary API secret")
    ASSET_STORE_TIMEOUT_SECONDS: float = Field(10.0, description="Timeout for a single asset store call")
    ASSET_DELETE_MAX_ATTEMPTS: int = Field(5, description="Retry limit for pending asset deletions")

    # --- 회사 프로필 ---
    DEFAULT_COMPANY_NAME: str = Field("ImanPrime", description="Name given to a lazily created company profile")

    # --- ARQ 워커 (Redis) ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ worker")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ worker")


settings = Settings()
