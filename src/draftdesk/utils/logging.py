"""Structured logging setup for Draftdesk.

Events are JSON lines in ~/.cache/draftdesk/logs/draftdesk.log, named after
what happened (``draft_accepted``, ``session_save_failed``) with the details
as key/value pairs. Inspect them with::

    tail -f ~/.cache/draftdesk/logs/draftdesk.log | jq .
"""

import os
from pathlib import Path
from typing import Any

import structlog


LOG_LEVEL_ENV = "DRAFTDESK_LOG_LEVEL"
LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def log_file_path() -> Path:
    return Path.home() / ".cache" / "draftdesk" / "logs" / "draftdesk.log"


def configure_logging() -> Path:
    """
    Route structlog output to the Draftdesk log file.

    DRAFTDESK_LOG_LEVEL selects the threshold (default INFO). DEBUG adds LLM
    payloads and one event per content buffer change; WARNING surfaces
    discarded stale suggestions and request retries.

    Returns:
        Path of the log file
    """
    log_file = log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    if level not in LOG_LEVELS:
        level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVELS[level]),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )
    return log_file


def get_logger(name: str) -> Any:
    """Structlog logger for a module; call as ``get_logger(__name__)``."""
    return structlog.get_logger(name)
