"""Application entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from config import Config, load_config
from core import setup_logger
from core.app_initializer import ApplicationInitializer


async def main(config: Config) -> None:
    """Main application entry point."""
    app = ApplicationInitializer(config)
    await app.initialize()
    await app.run()


if __name__ == "__main__":
    settings = load_config()
    logger = setup_logger(
        level=logging.DEBUG if settings.debug else logging.INFO,
        log_file=str(Path(settings.log_folder) / "booth.log"),
        colored=True
    )
    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
