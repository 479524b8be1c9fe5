"""
Fault Decision Engine

Decides, per request path, whether the configured injector should run:

    enabled -> path blacklist -> path whitelist -> probability draw

The blacklist always wins. The probability draw comes from one private,
seeded random stream shared by every request, so a fixed seed and a fixed
call sequence reproduce exactly the same decisions.
"""

import random
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from faultline.injector import Injector
from faultline.logging_config import get_logger
from faultline.metrics import FAULT_INJECT_PERCENT, record_decision

logger = get_logger(__name__)

DEFAULT_RAND_SEED = 1


class Decision(str, Enum):
    """Outcome of evaluating one request."""
    INJECT = "inject"
    DISABLED = "disabled"              # no engine, no injector, or switched off
    BLACKLISTED = "blacklisted"
    NOT_WHITELISTED = "not_whitelisted"
    NOT_SELECTED = "not_selected"      # lost the probability draw


def effective_percent(percent: float) -> float:
    """
    Map a configured injection percent to the rate actually used.

    Anything outside the closed range [0.0, 1.0] (including NaN) means
    "never inject".

    Args:
        percent: Raw configured percent

    Returns:
        Effective trigger rate in [0.0, 1.0]
    """
    if not 0.0 <= percent <= 1.0:
        return 0.0
    return float(percent)


@dataclass(frozen=True)
class Fault:
    """
    Immutable fault injection engine.

    Attributes:
        injector: Capability invoked when a request is selected. ``None``
            makes the engine a pure pass-through.
        enabled: Master switch.
        inject_percent: Raw injection probability, kept as configured.
        path_blacklist: Paths that are never injected. Any iterable of paths
            (or a single path string) is accepted and stored as a frozenset.
        path_whitelist: If non-empty, the only paths eligible for injection.
            Coerced to a frozenset like ``path_blacklist``.
        rand_seed: Seed for the private random stream.
    """
    injector: Optional[Injector]
    enabled: bool = False
    inject_percent: float = 0.0
    path_blacklist: Iterable[str] = frozenset()
    path_whitelist: Iterable[str] = frozenset()
    rand_seed: int = DEFAULT_RAND_SEED
    _rand: random.Random = field(init=False, repr=False, compare=False)
    _rand_lock: threading.Lock = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "path_blacklist", _as_path_set(self.path_blacklist))
        object.__setattr__(self, "path_whitelist", _as_path_set(self.path_whitelist))
        object.__setattr__(self, "_rand", random.Random(self.rand_seed))
        object.__setattr__(self, "_rand_lock", threading.Lock())

        if self.injector is None:
            logger.warning("fault_injector_missing", enabled=self.enabled)
        if effective_percent(self.inject_percent) != self.inject_percent:
            logger.warning("fault_percent_invalid", inject_percent=self.inject_percent)

        FAULT_INJECT_PERCENT.set(effective_percent(self.inject_percent) if self.active else 0.0)
        logger.info(
            "fault_configured",
            enabled=self.enabled,
            inject_percent=self.inject_percent,
            blacklist_size=len(self.path_blacklist),
            whitelist_size=len(self.path_whitelist),
            rand_seed=self.rand_seed,
        )

    @property
    def active(self) -> bool:
        """True when the engine can inject at all."""
        return self.enabled and self.injector is not None

    def percent_do(self) -> bool:
        """Run the probability draw for one request."""
        rate = effective_percent(self.inject_percent)
        if rate <= 0.0:
            return False
        if rate >= 1.0:
            return True

        with self._rand_lock:
            sample = self._rand.random()
        return sample < rate

    def evaluate(self, path: str) -> Decision:
        """
        Decide what to do with a request for ``path``.

        Args:
            path: Request path

        Returns:
            The decision, carrying the reason when the request is skipped
        """
        if not self.active:
            decision = Decision.DISABLED
        elif path in self.path_blacklist:
            decision = Decision.BLACKLISTED
        elif self.path_whitelist and path not in self.path_whitelist:
            decision = Decision.NOT_WHITELISTED
        elif self.percent_do():
            decision = Decision.INJECT
        else:
            decision = Decision.NOT_SELECTED

        record_decision(decision.value)
        return decision

    def should_inject(self, path: str) -> bool:
        """True if the injector should handle a request for ``path``."""
        return self.evaluate(path) is Decision.INJECT


def evaluate(fault: Optional[Fault], path: str) -> Decision:
    """
    Null-safe decision.

    A missing engine is a valid state and never injects.
    """
    if fault is None:
        record_decision(Decision.DISABLED.value)
        return Decision.DISABLED
    return fault.evaluate(path)


def should_inject(fault: Optional[Fault], path: str) -> bool:
    """Null-safe selector."""
    return evaluate(fault, path) is Decision.INJECT


def _as_path_set(paths: Optional[Iterable[str]]) -> FrozenSet[str]:
    if not paths:
        return frozenset()
    if isinstance(paths, str):
        return frozenset([paths])
    return frozenset(paths)
