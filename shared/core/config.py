import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    JWT_SECRET: str | None = os.getenv("JWT_SECRET")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST")
    DB_PORT: str | None = os.getenv("DB_PORT")
    ASSET_DB_NAME: str | None = os.getenv("ASSET_DB_NAME")
    # full URL override, e.g. sqlite:///./assets.db for local runs
    ASSET_DATABASE_URL: str | None = os.getenv("ASSET_DATABASE_URL")

    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", 2))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", 2))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Asset hierarchy behaviour
    WARRANTY_LOOKAHEAD_DAYS: int = int(os.getenv("WARRANTY_LOOKAHEAD_DAYS", 30))
    CASCADE_DELETE_CHECKS_DESCENDANTS: bool = os.getenv(
        "CASCADE_DELETE_CHECKS_DESCENDANTS", "True").lower() == "true"

    # Change notifications (posted after commit)
    ASSET_EVENTS_WEBHOOK_URL: str | None = os.getenv("ASSET_EVENTS_WEBHOOK_URL")
    ASSET_EVENTS_TIMEOUT_SECONDS: float = float(
        os.getenv("ASSET_EVENTS_TIMEOUT_SECONDS", 5))

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

ASSET_DATABASE_URL = settings.ASSET_DATABASE_URL or (
    f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{settings.ASSET_DB_NAME}?sslmode=require"
)
