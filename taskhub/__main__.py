import logging

import uvicorn

from .config import settings
from .logging_setup import setup_logging
from .main import create_app

logger = logging.getLogger("taskhub")


def main() -> None:
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    logger.info("API available at http://localhost:%s/api", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
