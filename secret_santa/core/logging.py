import sys
from loguru import logger


def setup_logging(level: str, log_path: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="{time:HH:mm:ss} | {level} | {module}:{function}:{line} | {message}",
    )
    # The file sink keeps bound context (event_id, attempts, validation_errors).
    logger.add(
        log_path,
        level="DEBUG",
        format="{time} | {level} | {module}:{function}:{line} | {message} | {extra}",
        rotation="100 KB",
        compression="zip",
    )
