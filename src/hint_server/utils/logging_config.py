"""
Logging setup for the hint server.

Modules log through logging.getLogger(__name__); the service configures the
root handler once at startup.
"""

import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Pillow logs every plugin probe at DEBUG
QUIET_LOGGERS = ('PIL',)


def setup_service_logging(service_name: str, level: int = logging.INFO) -> logging.Logger:
    """Configure the root handler and return the service's own logger."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
    return logging.getLogger(service_name)


def log_banner(logger: logging.Logger, title: str, *details: str) -> None:
    """Log a boxed title followed by one line per detail."""
    logger.info("=" * 60)
    logger.info(title)
    for detail in details:
        logger.info(f"  {detail}")
    logger.info("=" * 60)
