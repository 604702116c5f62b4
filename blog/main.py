import logging
from typing import Optional

import uvicorn

from .app import create_app
from .core.config import BlogSettings, Config

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or Config.LOG_LEVEL).upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
        ]
    )


def blog(settings: BlogSettings) -> None:
    """Validate configuration, build the app and serve it with uvicorn."""
    configure_logging()
    settings.validate()
    Config.validate()

    app = create_app(settings)
    logger.info(f"Serving '{settings.title}' on {Config.HOST}:{Config.port()} ({Config.ENVIRONMENT})")
    uvicorn.run(app, host=Config.HOST, port=Config.port())
