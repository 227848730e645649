from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./crm.db"
    sql_echo: bool = False

    jwt_secret: str = "change-me"  # 🔐 set JWT_SECRET in production
    jwt_lifetime_seconds: int = 3600
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "crm:auth"

    bcrypt_rounds: int = 10

    log_level: str = "INFO"

    host: str = "127.0.0.1"
    port: int = 3000


@lru_cache
def get_settings() -> Settings:
    return Settings()
