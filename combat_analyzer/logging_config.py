import logging
import sys

import sentry_sdk
import structlog
from asgi_correlation_id.context import correlation_id
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog.contextvars import merge_contextvars

from .config import Settings, get_settings

DEV_ENVIRONMENTS = frozenset({"local", "dev", "test"})
REDACTED_KEYS = frozenset({"password", "password_hash", "token", "authorization"})


def _static_fields(settings: Settings):
    def processor(logger, method_name, event_dict):
        event_dict["service"] = settings.app_name
        event_dict["env"] = settings.app_env
        return event_dict

    return processor


def _add_correlation_id(logger, method_name, event_dict):
    cid = correlation_id.get(None)
    if cid is not None:
        event_dict["correlation_id"] = cid
        sentry_sdk.set_tag("correlation_id", cid)
    return event_dict


def _redact_credentials(logger, method_name, event_dict):
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def _init_sentry(settings: Settings) -> None:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", settings.app_name)


def configure_logging(settings: Settings | None = None) -> None:
    """Route stdlib and structlog output through one pipeline; console in dev, JSON elsewhere."""
    settings = settings or get_settings()
    log_level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if settings.sentry_dsn:
        _init_sentry(settings)

    processors = [
        merge_contextvars,
        _static_fields(settings),
        _add_correlation_id,
        _redact_credentials,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.app_env in DEV_ENVIRONMENTS:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
