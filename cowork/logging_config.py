import logging
import sys

from pythonjsonlogger import jsonlogger

from cowork.config import Settings

QUIET_LOGGERS = ("sqlalchemy.engine", "multipart")


def configure_logging(settings: Settings) -> None:
    """
    Send every cowork log record to stdout as one JSON object.

    Membership, collaborator and timer events pass their ids through ``extra``
    and show up as top-level keys. The uvicorn loggers follow ``LOG_LEVEL``;
    SQL echo and multipart parsing stay at WARNING.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    # configure_logging runs once per app factory call
    root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger", "asctime": "time"},
        )
    )
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
