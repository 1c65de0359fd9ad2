import logging
import os
import sys
from typing import Optional
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler
from rich.console import Console
from pythonjsonlogger import jsonlogger

from config import get_config_section

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def record_fields(record: logging.LogRecord) -> dict:
    """Structured fields attached to ``record`` via ``extra``."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRIBUTES and not k.startswith("_")}


class EventFieldsFormatter(logging.Formatter):
    """Appends ``key=value`` pairs for structured events to the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = {k: v for k, v in record_fields(record).items() if k not in ("event", "service", "component")}
        if not fields:
            return message
        return message + " " + " ".join(f"{k}={v}" for k, v in fields.items())


def _resolve_level() -> int:
    level = os.getenv("MWB_LOG_LEVEL") or get_config_section("logging.level", "INFO")
    return getattr(logging, str(level).upper(), logging.INFO)


def _use_json() -> bool:
    raw = os.getenv("MWB_LOG_JSON")
    if raw is not None:
        return raw.lower() in ("1", "true")
    return bool(get_config_section("logging.json", False))


def get_console_handler(level: int = logging.INFO) -> logging.Handler:
    """Get console handler with Rich formatting, writing to stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_level=True,
        show_path=False,
        show_time=True,
        omit_repeated_times=True
    )
    handler.setFormatter(EventFieldsFormatter("%(message)s"))
    handler.setLevel(level)
    return handler

def get_json_handler(level: int = logging.INFO, service: Optional[str] = None) -> logging.Handler:
    """Get JSON handler writing to stderr; ``extra`` fields become JSON keys."""
    handler = logging.StreamHandler(sys.stderr)
    formatter = jsonlogger.JsonFormatter(
        fmt='%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S%z',
        static_fields={'service': service or 'mwb'}
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler

def get_file_handler(log_dir: str, service_name: str, level: int = logging.INFO) -> logging.Handler:
    """Rotating ``<service_name>.log`` under ``log_dir``, 10MB x 5."""
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(log_dir, f"{service_name}.log"), maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    handler.setFormatter(EventFieldsFormatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
    handler.setLevel(level)
    return handler


class ServiceFields(logging.Filter):
    """Stamps ``service`` and ``component`` onto every record a handler sees."""

    def __init__(self, service: Optional[str], component: Optional[str]):
        super().__init__()
        self.service = service
        self.component = component

    def filter(self, record: logging.LogRecord) -> bool:
        if self.service:
            record.service = self.service
        if self.component:
            record.component = self.component
        return True


class _Muted(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return False


def get_logger(name: str, service: Optional[str] = None, module: Optional[str] = None) -> logging.Logger:
    """
    Configure ``name`` as the root of a service's logger tree.

    Level comes from MWB_LOG_LEVEL, else ``[logging] level``; JSON output from
    MWB_LOG_JSON, else ``[logging] json``; MWB_LOG_DIR adds a rotating file.
    MWB_LOG_MODULES (comma separated) mutes loggers whose ``module`` is not listed.
    Child loggers (``logging.getLogger(__name__)`` below ``name``) propagate here.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = _resolve_level()
    handlers = [get_json_handler(level, service) if _use_json() else get_console_handler(level)]
    log_dir = os.getenv("MWB_LOG_DIR")
    if log_dir:
        handlers.append(get_file_handler(log_dir, service or name.split(".")[0], level))

    stamp = ServiceFields(service, module)
    for handler in handlers:
        handler.addFilter(stamp)
        logger.addHandler(handler)
    logger.setLevel(level)

    enabled_modules = [m.strip() for m in os.getenv("MWB_LOG_MODULES", "").split(",") if m.strip()]
    if enabled_modules and module and module not in enabled_modules:
        logger.addFilter(_Muted())

    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logger
