import logging
import sys

from .constants import LOGGER_NAME

_HANDLER_ATTR = "_restweave_handler"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the package logger.

    A single stream handler is installed the first time this is called;
    later calls only adjust the level.

    Args:
        debug: Log requests and responses at DEBUG level when True.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not getattr(logger, _HANDLER_ATTR, False):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        logger.addHandler(handler)
        setattr(logger, _HANDLER_ATTR, True)

    return logger
