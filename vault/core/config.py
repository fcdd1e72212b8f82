# vault/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore")

    JWT_SECRET: str = Field(...)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "vault"
    DB_PASSWORD: str = ""
    DB_NAME: str = "vault"
    # full async URL, wins over the DB_* parts (e.g. sqlite+aiosqlite:// in tests)
    DATABASE_URL: str | None = None

    APP_NAME: str = "My Vault"
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # --- 2FA ---
    TOTP_VALID_WINDOW: int = 1
    BACKUP_CODE_COUNT: int = 10
    MIN_PASSWORD_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12
    # answer unknown emails like wrong codes on the public recovery endpoints
    HIDE_UNKNOWN_EMAILS: bool = False

    @property
    def async_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4")


settings = Settings()  # type: ignore[call-arg]
