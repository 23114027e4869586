"""
Centralized logging configuration for the SoulyCore backend.

Usage:
    from utils.logger import logger
    
    logger.info("Contact created")
    logger.error("Failed to fetch brains")
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# Remove default handler
logger.remove()

_configured = False

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def setup_logging(log_dir: Optional[Path] = None, log_level: str = "INFO", app_name: str = "app"):
    """
    Configure console and (optionally) file logging.
    
    Args:
        log_dir: Directory for log files. File logging is skipped when None.
        log_level: Minimum level for the console handler
        app_name: Log file prefix ("api", "seed")
    """
    global _configured
    
    if _configured:
        return
    
    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT)
    
    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        
        # One file per day, old files gzipped
        logger.add(
            log_dir / f"{app_name}_{{time:YYYY-MM-DD}}.log",
            level="INFO",
            format=FILE_FORMAT,
            rotation="00:00",
            retention="30 days",
            compression="gz",
            encoding="utf-8",
        )
        logger.info(f"Logging configured. Log directory: {log_dir}")
    
    _configured = True


def init_logging(app_name: str = "app"):
    """
    Initialize logging from settings. Call once per process.
    
    Args:
        app_name: Log file prefix ("api", "seed")
    """
    from config import settings, ensure_directories
    
    ensure_directories()
    setup_logging(log_dir=settings.LOG_DIR, log_level=settings.LOG_LEVEL, app_name=app_name)


__all__ = ["logger", "setup_logging", "init_logging"]
