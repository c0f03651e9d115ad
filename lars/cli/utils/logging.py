import logging
import sys


logger = logging.getLogger("lars")

_handler = None


class _LevelPrefixFormatter(logging.Formatter):
    """Plain messages for INFO and DEBUG, ``LEVEL: message`` above that."""

    def format(self, record):
        message = super().format(record)
        if record.levelno >= logging.WARNING:
            return f"{record.levelname}: {message}"
        return message


def configure_logging(debug: bool):
    """
    Route the lars logger to the current stdout.

    Called once per command invocation; the handler is reused and pointed
    at whatever ``sys.stdout`` is at that moment.
    """
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(_LevelPrefixFormatter("%(message)s"))
        logger.addHandler(_handler)
    else:
        _handler.setStream(sys.stdout)

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
