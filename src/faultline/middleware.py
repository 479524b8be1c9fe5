"""
Fault Injection Middleware

Pure ASGI middleware: requests that are not selected for injection reach the
wrapped application exactly as if no middleware were installed (no header
rewriting, no body buffering). Selected requests are handed to the
injector's handler, which owns the response.
"""

from typing import Optional

from starlette.types import ASGIApp, Receive, Scope, Send

from faultline.fault import Decision, Fault, evaluate
from faultline.logging_config import get_logger, log_fault_decision

logger = get_logger(__name__)


class FaultMiddleware:
    """ASGI middleware for per-request fault injection."""

    def __init__(self, app: ASGIApp, fault: Optional[Fault] = None):
        """
        Args:
            app: Downstream ASGI application
            fault: Decision engine; ``None`` makes this a pass-through
        """
        self.app = app
        self.fault = fault

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        # Only HTTP requests are candidates; lifespan and websocket go straight through
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        decision = evaluate(self.fault, path)
        if decision is not Decision.INJECT:
            log_fault_decision(logger, path, decision.value)
            await self.app(scope, receive, send)
            return

        log_fault_decision(
            logger, path, decision.value,
            method=scope.get("method"),
            injector=type(self.fault.injector).__name__,
        )
        injected = self.fault.injector.handler(self.app)
        await injected(scope, receive, send)


def fault_handler(app: ASGIApp, fault: Optional[Fault]) -> ASGIApp:
    """
    Wrap ``app`` so that requests selected by ``fault`` go to its injector.

    Args:
        app: Downstream ASGI application
        fault: Decision engine, may be ``None``

    Returns:
        ASGI application with the same calling convention as ``app``
    """
    return FaultMiddleware(app, fault=fault)
