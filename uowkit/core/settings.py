from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr, field_validator

IsolationLevel = Literal["READ UNCOMMITTED", "READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE", "AUTOCOMMIT"]

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    APP_NAME: str = "uowkit"
    APP_ENV: Literal["local", "dev", "staging", "prod", "test"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # DB
    DATABASE_URL: SecretStr = SecretStr("sqlite+aiosqlite:///:memory:")
    DB_ECHO: bool = False
    DB_ISOLATION_LEVEL: Optional[IsolationLevel] = None   # None = driver default

    # -------- validators --------
    @field_validator("DATABASE_URL")
    @classmethod
    def _required_secret(cls, v, info):
        if v is None or (hasattr(v, "get_secret_value") and v.get_secret_value().strip() == ""):
            raise ValueError(f"{info.field_name} is required (set it in .env)")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {v!r}")
        return level

    @property
    def DATABASE_URL_STR(self) -> str:
        return self.DATABASE_URL.get_secret_value()

    @property
    def ENGINE_ECHO(self) -> bool:
        return bool(self.DB_ECHO or self.DEBUG)

settings = Settings()
