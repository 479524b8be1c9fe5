"""
Injector contract.

An injector is any object with a ``handler`` method that takes the
downstream ASGI application and returns the ASGI application to run in its
place. The returned app fully owns the response: it may answer on its own
(e.g. a 500), or call the downstream app after doing something else first
(e.g. sleep).
"""

from typing import Protocol, runtime_checkable

from starlette.types import ASGIApp


@runtime_checkable
class Injector(Protocol):
    """Pluggable fault producing capability."""

    def handler(self, app: ASGIApp) -> ASGIApp:
        """Return the ASGI app that handles an injected request."""
        ...
