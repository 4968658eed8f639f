import logging
import logging.config
import sys
from typing import Any

import structlog
from opentelemetry import trace
from structlog.types import EventDict, Processor


def add_opentelemetry_ids(_, __, event_dict: EventDict) -> EventDict:
    """
    Adds trace_id and span_id to the log record if a trace is active.
    """
    current_span = trace.get_current_span()
    if current_span.get_span_context().is_valid:
        event_dict["trace_id"] = trace.format_trace_id(
            current_span.get_span_context().trace_id
        )
        event_dict["span_id"] = trace.format_span_id(
            current_span.get_span_context().span_id
        )
    return event_dict


def service_info_adder(service_name: str, environment: str) -> Processor:
    def add_service_info(_, __, event_dict: EventDict) -> EventDict:
        event_dict["service"] = service_name
        event_dict["env"] = environment
        return event_dict

    return add_service_info


def drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    event_dict.pop("color_message", None)
    return event_dict


def _logger_config(level: str, serve_http: bool) -> dict[str, Any]:
    loggers: dict[str, Any] = {
        "": {"handlers": ["default"], "level": level, "propagate": True},
        # botocore logs every request at DEBUG
        "botocore": {"handlers": [], "level": "WARNING", "propagate": True},
    }
    if serve_http:
        loggers["uvicorn"] = {"handlers": [], "level": level, "propagate": True}
        loggers["uvicorn.access"] = {"handlers": [], "propagate": False}
    return loggers


def setup_structlog(
    json_logs: bool = False,
    log_level: str = "INFO",
    service_name: str = "account-deletion",
    environment: str = "development",
    serve_http: bool = False,
):
    """
    Configure structured logging for the Lambda runtime and the HTTP app.

    ``serve_http`` routes uvicorn's loggers through the structlog handler
    and silences its access log, which the request middleware replaces.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        service_info_adder(service_name, environment),
        add_opentelemetry_ids,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        drop_color_message_key,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": "structlog.stdlib.ProcessorFormatter",
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.JSONRenderer()
                        if json_logs
                        else structlog.dev.ConsoleRenderer(colors=True),
                    ],
                    "foreign_pre_chain": shared_processors,
                },
            },
            "handlers": {
                "default": {
                    "level": log_level.upper(),
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": _logger_config(log_level.upper(), serve_http),
        }
    )

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        structlog.get_logger("uncaught_exception").error(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = handle_exception
