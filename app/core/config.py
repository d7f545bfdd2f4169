from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "IELTS Practice API"
    VERSION: str = "1.0.0"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 2  # 2 days

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: str = "5432"
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None

    DATABASE_URL: str = "sqlite:///./ielts_practice.db"
    TEST_DATABASE_URL: Optional[str] = None
    AUTO_CREATE_TABLES: bool = False

    def __init__(self, **data):
        super().__init__(**data)
        if self.DATABASE_HOST:
            self.DATABASE_URL = (
                f'postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                f'@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}'
            )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    # Analytics windows
    STATISTICS_DEFAULT_DAYS: int = 90
    LEADERBOARD_DEFAULT_DAYS: int = 30
    LEADERBOARD_DEFAULT_LIMIT: int = 10
    RESULTS_PAGE_SIZE: int = 10

    # Rate limiting: (requests, window seconds)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_TEST_TAKING: int = 50
    RATE_LIMIT_TEST_TAKING_WINDOW: int = 60 * 60
    RATE_LIMIT_GENERAL: int = 100
    RATE_LIMIT_GENERAL_WINDOW: int = 15 * 60
    RATE_LIMIT_MAX_KEYS: int = 10000

    class Config:
        env_file = ".env"

settings = Settings()
