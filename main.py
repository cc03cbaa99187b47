from __future__ import annotations

from loguru import logger

from secret_santa.core.config import load_settings
from secret_santa.core.logging import setup_logging
from secret_santa.db import init_engine


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_path)

    logger.info("initializing database...")
    engine = init_engine(settings.database_url, create_schema=True)
    logger.info("database ready: {url}", url=engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    main()
