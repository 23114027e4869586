"""
SoulyCore Backend - Configuration
"""
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Paths
    BASE_DIR: Path = Path(__file__).parent
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data")
    LOG_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "logs")
    DATABASE_PATH: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "soulycore.db")
    DATABASE_URL: Optional[str] = Field(default=None, description="Full SQLAlchemy URL, overrides DATABASE_PATH")
    
    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    
    # LLM
    GEMINI_API_KEY: str = Field(default="", description="Google Gemini API key")
    LLM_PROVIDER: str = Field(default="gemini")
    LLM_MODEL: str = Field(default="gemini-2.5-flash")
    LLM_VERIFY_SSL: bool = Field(default=True)
    LLM_MAX_RETRIES: int = Field(default=3, description="Retries when the provider rate limits us")
    LLM_RETRY_DELAY: float = Field(default=2.0, description="Initial retry delay in seconds, doubled per attempt")
    
    # Data sources
    CONNECTION_TEST_DELAY: float = Field(default=1.5, description="Simulated round trip for connection tests")
    CONNECTION_TEST_SUCCESS_RATE: float = Field(default=0.8)
    
    # Database
    AUTO_MIGRATE: bool = Field(default=True, description="Run Alembic migrations on API startup")
    
    # API
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def ensure_directories():
    """Ensure all required directories exist."""
    dirs = [
        settings.DATA_DIR,
        settings.LOG_DIR,
    ]
    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)
