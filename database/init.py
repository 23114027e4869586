"""
Database Initialization and Utilities

Schema management helpers around Alembic.
"""
from loguru import logger


def _alembic_config():
    from alembic.config import Config
    from config import settings
    
    return Config(str(settings.BASE_DIR / "alembic.ini"))


def run_migrations() -> None:
    """Upgrade the database to the latest Alembic revision."""
    from alembic import command
    
    command.upgrade(_alembic_config(), "head")
    logger.info("Database migrations completed")
