"""Logging module for solarlens."""

import logging

# Create a logger for the library
logger = logging.getLogger("solarlens")
logger.setLevel(logging.INFO)  # Default level

# Setup default handler
handler = logging.StreamHandler()
file_fmt = (
    "[solarlens] %(levelname)s %(asctime)s "
    "[%(filename)s:%(funcName)s:%(lineno)d] %(message)s"
)
formatter = logging.Formatter(file_fmt)
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.propagate = False


def set_log_level(level):
    """Set the solarlens logger level from a name ("DEBUG") or a logging constant."""
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"{level} is not a valid logging level.")
        level = numeric
    logger.setLevel(level)
