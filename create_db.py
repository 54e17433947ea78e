# create_db.py
import asyncio
import logging
import sys
from typing import Mapping, Optional

from shared.config import Settings
from shared.db import Database
from shared.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def init_models(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings.from_env()
    database = Database(settings)
    try:
        logger.info("Creating tables...")
        await database.init_models()
        logger.info("Tables created.")
    finally:
        await database.dispose()


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    settings = Settings.from_env(environ)
    setup_logging(settings.log_level)
    try:
        asyncio.run(init_models(settings))
    except Exception:
        logger.exception("Error initializing database")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
