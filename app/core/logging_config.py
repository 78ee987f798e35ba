from __future__ import annotations

import logging
from logging.config import dictConfig

import structlog

from app.core.config import Settings

NOISY_LOGGERS = ("openai", "httpx", "httpcore")
GENERATION_FIELDS = ("content_kind", "failure_kind")


class GenerationContextFilter(logging.Filter):
    """Give every record the generation fields the formatters reference."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name in GENERATION_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, "-")
        return True


def json_formatter() -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="time"),
            structlog.stdlib.ExtraAdder(allow=GENERATION_FIELDS),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(settings: Settings) -> None:
    formatters: dict[str, dict[str, object]] = {
        "standard": {
            "format": "%(levelname)s %(asctime)s %(name)s [%(content_kind)s/%(failure_kind)s] %(message)s",
        }
    }

    if settings.log_json:
        formatters["standard"] = {"()": json_formatter}

    handlers: dict[str, dict[str, object]] = {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "filters": ["generation_context"],
        }
    }

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "generation_context": {"()": GenerationContextFilter},
            },
            "formatters": formatters,
            "handlers": handlers,
            "root": {
                "level": settings.log_level,
                "handlers": ["default"],
            },
            "loggers": {name: {"level": "WARNING"} for name in NOISY_LOGGERS},
        }
    )

    logging.getLogger("uvicorn.error").setLevel(settings.log_level)
