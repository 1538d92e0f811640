from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./returndesk.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    SECRET_KEY: str = "change-this-secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    RESET_DB: bool = False
    EXPORT_PLACEHOLDER: str = "-"
    RECEIPT_SYSTEM_NAME: str = "Shop Return Management System"
    RECEIPT_POWERED_BY: str = "IT Support Desk"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
