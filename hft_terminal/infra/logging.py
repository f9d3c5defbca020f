import sys

from loguru import logger

from hft_terminal.config import settings


def setup_logging(level: str | None = None, log_file: str | None = None):
    level = level or settings.LOG_LEVEL
    logger.remove()
    logger.add(
        log_file or settings.LOG_FILE,
        rotation="10 MB",
        retention="10 days",
        enqueue=True,
        backtrace=True,
        diagnose=False,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {thread.name} | {message}",
    )
    # konsola tylko dla ostrzeżeń, żeby nie zaśmiecać terminala co 2 sekundy
    logger.add(sys.stderr, level="WARNING", format="{level:<8} | {message}")
    return logger
