"""Page access logging using Loguru's built-in async features."""

import os
from datetime import datetime, timezone

from loguru import logger

from linkdeck.core.config import settings

access_logger = None
_sink_ids = []


def setup_access_logging():
    """Configure the page access logger with async processing."""
    global access_logger

    os.makedirs(settings.LOG_DIR, exist_ok=True)

    access_logger = logger.bind(event_type="page_access")

    # Only our own sinks are replaced; application sinks stay untouched
    for sink_id in _sink_ids:
        logger.remove(sink_id)
    _sink_ids.clear()

    _sink_ids.append(logger.add(
        f"{settings.LOG_DIR}/access.log",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | IP:{extra[ip]} | {extra[kind]}:{extra[name]} | {message}",
        rotation="10 MB",
        retention="7 days",
        enqueue=True,
        level="INFO",
        backtrace=False,
        diagnose=False,
        filter=lambda record: record["extra"].get("event_type") == "page_access"
    ))

    _sink_ids.append(logger.add(
        f"{settings.LOG_DIR}/access.json",
        serialize=True,
        enqueue=True,
        level="INFO",
        filter=lambda record: record["extra"].get("event_type") == "page_access"
    ))

    return access_logger


def log_page_access(kind: str, name: str, ip_address: str, user_agent: str = ""):
    """
    Log a shortcut or collection page access using Loguru's non-blocking logging.

    Args:
        kind: "shortcut" or "collection"
        name: The name of the accessed entity
        ip_address: The client's IP address
        user_agent: Optional user agent string
    """
    if not settings.ACCESS_LOGGING_ENABLED:
        return
    if access_logger is None:
        setup_access_logging()

    access_logger.bind(
        ip=ip_address,
        kind=kind,
        name=name,
        user_agent=user_agent,
        timestamp=datetime.now(timezone.utc).isoformat()
    ).info(f"Page accessed: {kind} {name}")
