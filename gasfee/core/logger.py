# /gasfee/core/logger.py
import logging
import structlog
from structlog.contextvars import bind_contextvars
import sentry_sdk
from prometheus_client import Counter
from gasfee.core.config import settings

# --- Prometheus Metrics ---
GAS_ESTIMATES = Counter("gasfee_estimates_total", "Gas fee estimates served, by outcome", ["outcome"])
GAS_RECOMMENDATIONS = Counter("gasfee_recommendations_total", "Recommended gas price lookups, by outcome", ["outcome"])
PRICE_FEED_FAILURES = Counter("gasfee_price_feed_failures_total", "Price feed lookups that degraded to a zero price")

def configure_logging():
    if settings.SENTRY_DSN:
        sentry_sdk.init(dsn=settings.SENTRY_DSN.get_secret_value(), traces_sample_rate=1.0)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(settings.LOG_LEVEL.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

def get_logger(name: str):
    return structlog.get_logger(name)

def bind_request_context(request_id: str):
    """Tags every log line emitted while serving one estimation request."""
    bind_contextvars(request_id=request_id)

configure_logging()
log = get_logger("GasFee.System")
