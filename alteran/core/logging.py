"""Structured logging configuration with stdlib bridge.

Configures structlog with:
- JSON output when DEBUG is off, ConsoleRenderer when it is on
- Stdlib bridge so uvicorn, httpx and SQLAlchemy logs share the format
- Correlation ID injection from the asgi-correlation-id context var
- Redaction of credentials (admin password, session token, API keys)
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "admin_password",
        "auth_secret",
        "token",
        "session_token",
        "authorization",
        "api_key",
        "openrouter_api_key",
        "github_token",
    }
)


def add_correlation_id(logger, method, event_dict):
    """Inject correlation_id from asgi-correlation-id context into every log entry."""
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def redact_secrets(logger, method, event_dict):
    for key in event_dict.keys() & SENSITIVE_KEYS:
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def configure_structlog(log_level: str = "INFO", json_logs: bool = True, sql_echo: bool = False) -> None:
    """Configure structlog and route stdlib logging through the same renderer.

    Must run before the first ``structlog.get_logger()`` call is used, since
    loggers are cached on first use.

    Args:
        log_level: Root log level ("DEBUG", "INFO", "WARNING", "ERROR")
        json_logs: JSON lines for production, ConsoleRenderer for local work
        sql_echo: Log every SQL statement SQLAlchemy emits
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    renderer,
                ],
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["default"], "level": log_level},
        "loggers": {
            "uvicorn.access": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
            "aiosqlite": {"level": "WARNING"},
            "sqlalchemy.engine": {"level": "INFO" if sql_echo else "WARNING"},
        },
    })

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
