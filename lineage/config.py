import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Settings:
    # -------------------------------------------------------
    # Project
    # -------------------------------------------------------
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Lineage API")
    ENV: str = os.getenv("ENV", "dev")

    # -------------------------------------------------------
    # Database
    # -------------------------------------------------------
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./lineage.db"
    )

    # Hosted Postgres often hands out postgres:// but SQLAlchemy needs postgresql://
    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

    # -------------------------------------------------------
    # Logging
    # -------------------------------------------------------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # "plain" or "json"
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "plain").lower()

    # -------------------------------------------------------
    # CORS
    # -------------------------------------------------------
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    # -------------------------------------------------------
    # Pagination
    # -------------------------------------------------------
    DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", 50))
    MAX_PAGE_LIMIT: int = int(os.getenv("MAX_PAGE_LIMIT", 100))


# Single instance that is imported everywhere
settings = Settings()
