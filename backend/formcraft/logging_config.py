"""Logging configuration shared by the API and scripts."""

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

from formcraft.config import get_settings

_CONFIGURED = False


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True


def setup_logging(service_name: Optional[str] = None) -> None:
    """Configure root logging once, as JSON lines unless disabled in settings."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = get_settings()
    service = service_name or settings.service_name

    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(
            jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(service)s")
        )
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(service)s] %(name)s: %(message)s")
        )
    handler.addFilter(_ServiceNameFilter(service))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    # Uvicorn installs its own handlers; route them through ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True

    _CONFIGURED = True
