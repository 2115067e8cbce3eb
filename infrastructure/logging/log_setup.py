import sys

from loguru import logger

_CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {message} | {extra}"


def setup_logging(level: str = "INFO", serialize: bool = False) -> None:
    logger.remove()
    if serialize:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)
