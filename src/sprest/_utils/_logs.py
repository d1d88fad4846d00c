import logging
import sys

LOGGER_NAME = "sprest"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the ``sprest`` logger.

    Safe to call repeatedly; only one stream handler is ever attached.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not any(getattr(h, "_sprest_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._sprest_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
