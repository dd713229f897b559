"""
Structured Logging
==================

structlog configuration for the asset tracker processes.

Development gets colored console lines with rich tracebacks; production
gets one JSON object per line. Both go through the standard library root
logger so third-party records (uvicorn, httpx) share the same format.
"""

import datetime
import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


REDACTED = "***REDACTED***"

# Substrings of keys whose values never reach the log
_SENSITIVE_KEYS = ("password", "secret", "token", "authorization", "api_key")

# Libraries that log every request or hash at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "passlib", "uvicorn.access")


def _is_sensitive(key: str) -> bool:
    key = key.lower()
    return any(fragment in key for fragment in _SENSITIVE_KEYS)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive(str(k)) else _redact(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _censor_secrets(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace values of sensitive keys, at any nesting depth."""
    return _redact(event_dict)


def _add_timestamp(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = datetime.datetime.now(datetime.UTC).isoformat()
    return event_dict


def _service_context(service_name: str) -> Processor:
    """Processor stamping ``service`` on every entry that lacks one."""

    def add_service(
        logger: logging.Logger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def _renderer(json_logs: bool) -> tuple[Processor, Processor]:
    """Exception handling step and final renderer for the chosen output."""
    if json_logs:
        return structlog.processors.format_exc_info, structlog.processors.JSONRenderer()

    console = structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=10),
    )
    return structlog.dev.set_exc_info, console


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "asset-tracker",
) -> None:
    """
    Configure structlog and the standard library root logger.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_logs: Emit JSON lines instead of console output
        service_name: Value of the ``service`` key on every entry
    """
    level = getattr(logging, log_level.upper())
    exc_step, renderer = _renderer(json_logs)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        _add_timestamp,
        _service_context(service_name),
        _censor_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        exc_step,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> "BoundLogger":
    """
    Get a structured logger.

    Example:
        logger = get_logger(__name__)
        logger.info("warranty_registered", asset_id=42, warranty_id=77)
    """
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key-value pairs to every later entry in this async context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything bound with ``bind_context``."""
    structlog.contextvars.clear_contextvars()
