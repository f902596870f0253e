import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATA_DIR: Path = Path("data")
    ADMIN_EMAIL: EmailStr = "admin@apex-athletics.com"
    ADMIN_PASSWORD: str = "ChangeMe123!"
    # passlib hash; when set it wins over ADMIN_PASSWORD
    ADMIN_PASSWORD_HASH: Optional[str] = None
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    SEED_DATA: bool = True
    CORS_ORIGINS: List[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
