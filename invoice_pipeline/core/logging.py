"""
Loguru setup shared by the API and the Lambda handler.

Structured context is passed as keyword arguments, e.g.
``logger.info("Textract analysis completed", attempt=1, blocks_count=42)``.
With LOG_JSON enabled every record (including the bound extras) is
serialized as one JSON line, which is what CloudWatch Logs expects.
"""

import sys
from loguru import logger
from .config import settings

_TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level> | {extra}"
)


def setup_logging(level: str | None = None, json_logs: bool | None = None):
    """
    Configure the global loguru logger with a single stderr sink.

    Args:
        level: Minimum log level (defaults to LOG_LEVEL)
        json_logs: Serialize records as JSON (defaults to LOG_JSON)

    Returns:
        The configured loguru logger
    """
    level = (level or settings.log_level).upper()
    json_logs = settings.log_json if json_logs is None else json_logs

    logger.remove()
    if json_logs:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_TEXT_FORMAT)

    logger.configure(extra={"app": settings.app_name, "environment": settings.app_env})
    return logger
