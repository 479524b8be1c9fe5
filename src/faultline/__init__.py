"""
Faultline - Request Fault Injection

Decides per request whether a pluggable injector should take over the
response, and provides the ASGI middleware that acts on that decision.
"""

from .errors import FaultlineException, FaultConfigError
from .fault import (
    DEFAULT_RAND_SEED,
    Decision,
    Fault,
    effective_percent,
    evaluate,
    should_inject,
)
from .injector import Injector
from .middleware import FaultMiddleware, fault_handler
from .config import (
    FaultSettings,
    build_fault,
    load_fault_settings,
    settings_from_env,
)

__version__ = "1.0.0"

__all__ = [
    # Engine
    "Fault",
    "Decision",
    "DEFAULT_RAND_SEED",
    "effective_percent",
    "evaluate",
    "should_inject",
    # Injection
    "Injector",
    "FaultMiddleware",
    "fault_handler",
    # Settings
    "FaultSettings",
    "build_fault",
    "load_fault_settings",
    "settings_from_env",
    # Exceptions
    "FaultlineException",
    "FaultConfigError",
]
