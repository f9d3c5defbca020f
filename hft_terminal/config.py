from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    API_URL: str = "http://localhost:3000"
    REQUEST_TIMEOUT_SEC: float = 10.0


    POLL_INTERVAL_SEC: float = 2.0
    SESSION_DB: str = "data/session.sqlite"
    SESSION_KEY: str = "hft_user"


    # serwer nie weryfikuje hasła, klient wysyła stałe wartości
    AUTH_PASSWORD: str = "password"
    AUTH_EMAIL: str = ""


    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/terminal.log"


    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


    @field_validator("API_URL")
    @classmethod
    def _url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("REQUEST_TIMEOUT_SEC", "POLL_INTERVAL_SEC")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("intervals and timeouts must be > 0")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR")
        return v.upper()


settings = Settings()
