"""
Prometheus Metrics for Faultline

Exposes metrics for:
- Fault injection decisions, by outcome
- Effective injection rate of the active engine
"""

from prometheus_client import (
    Counter, Gauge,
    CollectorRegistry, generate_latest,
    CONTENT_TYPE_LATEST
)

# Dedicated registry so embedding services keep their own default registry clean
REGISTRY = CollectorRegistry()

# ============================================================================
# Decision Metrics
# ============================================================================

FAULT_DECISIONS_TOTAL = Counter(
    'faultline_decisions_total',
    'Fault injection decisions taken per request',
    ['outcome'],
    registry=REGISTRY
)

FAULT_INJECT_PERCENT = Gauge(
    'faultline_inject_percent',
    'Effective injection rate of the most recently configured engine (0 when it cannot inject)',
    registry=REGISTRY
)


def record_decision(outcome: str) -> None:
    """Count one evaluated request."""
    FAULT_DECISIONS_TOTAL.labels(outcome=outcome).inc()


def get_decision_count(outcome: str) -> float:
    """Current counter value for an outcome (0.0 if never seen)."""
    value = REGISTRY.get_sample_value(
        'faultline_decisions_total', {'outcome': outcome}
    )
    return value or 0.0


def get_metrics_text() -> bytes:
    """Render all Faultline metrics in Prometheus exposition format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Content type for the exposition format."""
    return CONTENT_TYPE_LATEST
