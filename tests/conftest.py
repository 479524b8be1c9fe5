"""Pytest configuration and fixtures for the Faultline test suite."""
import sys
from http import HTTPStatus
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

# Ensure the src/ package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from faultline import FaultMiddleware  # noqa: E402

TEST_HANDLER_CODE = 200
TEST_HANDLER_BODY = "Testing handler"


# ============================================================================
# TEST INJECTORS
# ============================================================================

class ErrorInjector:
    """Answers every injected request with a fixed error status."""

    def __init__(self, status_code: int = 500):
        self.status_code = status_code
        self.calls = 0

    def handler(self, app):
        self.calls += 1
        return PlainTextResponse(HTTPStatus(self.status_code).phrase,
                                 status_code=self.status_code)


class PassThroughInjector:
    """Injector that hands the request straight back to the downstream app."""

    def __init__(self):
        self.calls = 0

    def handler(self, app):
        self.calls += 1
        return app


class HeaderInjector:
    """Runs the downstream app and tags its response."""

    def handler(self, app):
        async def tagged(scope, receive, send):
            async def send_wrapper(message):
                if message["type"] == "http.response.start":
                    message["headers"] = list(message.get("headers", [])) + [
                        (b"x-fault-injected", b"true")
                    ]
                await send(message)
            await app(scope, receive, send_wrapper)
        return tagged


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

def build_app() -> FastAPI:
    """Downstream application used as the wrapped handler."""
    app = FastAPI()

    @app.get("/")
    async def root():
        return PlainTextResponse(TEST_HANDLER_BODY, status_code=TEST_HANDLER_CODE)

    @app.get("/onlyinject")
    async def only_inject():
        return PlainTextResponse(TEST_HANDLER_BODY, status_code=TEST_HANDLER_CODE)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


@pytest.fixture
def make_app():
    """Factory returning the test app, optionally wrapped in FaultMiddleware."""
    def _make(fault=None, wrap=True):
        app = build_app()
        if wrap:
            app.add_middleware(FaultMiddleware, fault=fault)
        return app
    return _make


@pytest.fixture
def error_injector():
    return ErrorInjector()


@pytest.fixture
def pass_injector():
    return PassThroughInjector()
