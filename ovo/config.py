from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    STORE_PATH: str = "data/ovo.db"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 9090
    CORS_ORIGINS: list[str] = ["*"]

    # Random bytes per identifier (3 bytes -> 6 hex characters)
    ID_BYTES: int = 3

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def store_url(self) -> str:
        """SQLAlchemy URL of the embedded store file."""
        return f"sqlite+aiosqlite:///{self.STORE_PATH}"


settings = Settings()
