"""
Faultline Structured Logging Module
JSON-based structured logging for fault injection decisions
"""

import logging
import os
import sys

import structlog
from pythonjsonlogger import jsonlogger

# ============================================================================
# STRUCTURED LOGGING CONFIGURATION
# ============================================================================

def setup_json_logging(
    log_level: str = "INFO",
    service_name: str = "faultline",
    environment: str = os.getenv("FAULTLINE_ENVIRONMENT", "development")
):
    """
    Setup JSON structured logging for the host service.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Name of the service embedding the fault middleware
        environment: Environment name (development, staging, production)
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_handler = logging.StreamHandler(sys.stdout)
    json_formatter = jsonlogger.JsonFormatter(
        fmt='%(timestamp)s %(levelname)s %(name)s %(message)s',
        timestamp=True
    )
    json_handler.setFormatter(json_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(json_handler)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=environment,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger instance
    """
    return structlog.get_logger(name)


def log_fault_decision(
    logger: structlog.BoundLogger,
    path: str,
    decision: str,
    **extra
):
    """
    Log a fault injection decision with structured data

    Args:
        logger: Structlog logger instance
        path: Request path the decision was made for
        decision: Decision outcome (inject, disabled, blacklisted, ...)
        **extra: Additional context fields
    """
    if decision == "inject":
        logger.info("fault_injected", path=path, decision=decision, **extra)
    else:
        logger.debug("fault_skipped", path=path, decision=decision, **extra)
