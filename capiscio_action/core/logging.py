"""Structured logging for capiscio-action.

This module provides structured logging with:
- JSON output for CI runners, pretty output for terminals
- Context processors for common fields (action version, CI run)
- Sensitive data redaction
- Integration with Python's standard logging

Diagnostics are written to stderr. Stdout is reserved for workflow
commands, which the CI runner parses.

Example usage:
    from capiscio_action.core.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("validator_installed", version="2.0.0", path="/opt/capiscio")
"""

import logging
import os
import re
import sys
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from capiscio_action import __version__

if TYPE_CHECKING:
    from capiscio_action.core.settings import ActionSettings

SENSITIVE_KEY_PATTERNS = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "api_key",
        "apikey",
        "auth",
        "authorization",
        "credential",
        "private_key",
    }
)

# GitHub tokens (classic and fine-grained) and bearer credentials
_SECRET_PATTERNS = (
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}\b"),
    re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}\b"),
    re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]{8,}"),
)

# CI environment variables copied onto every event when present
CI_CONTEXT_VARS = {
    "GITHUB_RUN_ID": "run_id",
    "GITHUB_RUN_ATTEMPT": "run_attempt",
    "GITHUB_WORKFLOW": "workflow",
    "GITHUB_REPOSITORY": "repository",
}


# =============================================================================
# Structlog Processors
# =============================================================================


def add_common_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the action version to log events."""
    event_dict.setdefault("action_version", __version__)
    return event_dict


def add_ci_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add CI run identifiers to log events."""
    for env_name, field in CI_CONTEXT_VARS.items():
        value = os.environ.get(env_name)
        if value:
            event_dict.setdefault(field, value)
    return event_dict


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in SENSITIVE_KEY_PATTERNS)


def redact_secrets(text: str) -> str:
    """Replace token-like substrings with a placeholder."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub("[REDACTED]", text)
    return text


def _redact_dict(d: dict[str, Any]) -> dict[str, Any]:
    """Recursively redact sensitive data from a dictionary."""
    result: dict[str, Any] = {}
    for key, value in d.items():
        if _is_sensitive_key(key):
            result[key] = "[REDACTED]"
        elif isinstance(value, str):
            result[key] = redact_secrets(value)
        elif isinstance(value, dict):
            result[key] = _redact_dict(value)
        else:
            result[key] = value
    return result


def redact_sensitive_data(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact values of sensitive keys and token-like strings."""
    return _redact_dict(event_dict)


def sanitize_event(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Escape line breaks in event names to prevent log injection."""
    event = event_dict.get("event", "")
    if isinstance(event, str):
        event_dict["event"] = event.replace("\r", "\\r").replace("\n", "\\n")
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_common_fields,
        add_ci_context,
        redact_sensitive_data,
        sanitize_event,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]


# =============================================================================
# Logging Configuration
# =============================================================================


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for the action.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Use JSON output format. If None, auto-detects:
            True if stderr is not a TTY, False otherwise.
        log_file: Optional file path for log output.
        stream: Console stream, defaults to sys.stderr.
    """
    stream = stream or sys.stderr

    if json_output is None:
        json_output = not stream.isatty()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def configure_logging_from_settings(settings: "ActionSettings") -> None:
    """Configure logging from ActionSettings.

    Args:
        settings: Settings to apply.
    """
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        log_file=settings.log_file,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A structured logger instance.
    """
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Reset logging configuration to defaults.

    This is primarily useful for testing to ensure clean state between tests.
    """
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
