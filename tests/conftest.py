"""
Shared fixtures for the envelope tests.
"""

from datetime import datetime, timezone

import pytest
from fastapi import FastAPI, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.testclient import TestClient

from kibo.application.envelope.build_envelope import EnvelopeBuilder
from kibo.core.config import EnvelopeSettings
from kibo.interfaces.middleware import install_envelope

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
JSON_HEADERS = {"Content-Type": "application/json"}
ACCEPT_JSON = {"Accept": "application/json"}
SAMPLE_PAYLOAD = {"data": 1, "arr": ["a", "b", "c"]}


@pytest.fixture
def exposing_config() -> EnvelopeSettings:
    return EnvelopeSettings(expose_errors=True)


@pytest.fixture
def hiding_config() -> EnvelopeSettings:
    return EnvelopeSettings(expose_errors=False)


@pytest.fixture
def builder(exposing_config: EnvelopeSettings) -> EnvelopeBuilder:
    return EnvelopeBuilder(exposing_config, clock=lambda: FIXED_NOW)


def build_app(config: EnvelopeSettings) -> FastAPI:
    """A small app exercising every path through the middleware."""
    app = FastAPI()
    install_envelope(app, config)

    @app.get("/garbage/api/{version}/json")
    def json_route(version: str) -> JSONResponse:
        return JSONResponse(SAMPLE_PAYLOAD)

    @app.get("/garbage/api/{version}/cookies")
    def cookies_route(version: str) -> JSONResponse:
        response = JSONResponse(SAMPLE_PAYLOAD, headers={"X-Trace": "abc"})
        response.set_cookie("a", "1")
        response.set_cookie("b", "2")
        return response

    @app.get("/garbage/api/{version}/json-error")
    def json_error_route(version: str) -> JSONResponse:
        return JSONResponse(SAMPLE_PAYLOAD, status_code=500)

    @app.get("/garbage/api/{version}/plain-error")
    def plain_error_route(version: str) -> PlainTextResponse:
        return PlainTextResponse('{"data": 1}', status_code=500)

    @app.get("/garbage/api/{version}/text")
    def text_route(version: str) -> PlainTextResponse:
        return PlainTextResponse("test")

    @app.get("/garbage/api/{version}/boom")
    def boom_route(version: str) -> JSONResponse:
        raise RuntimeError("Test Error")

    @app.get("/garbage/api/{version}/empty")
    def empty_route(version: str) -> Response:
        return Response(content=b"", media_type="application/json")

    return app


@pytest.fixture
def exposing_client(exposing_config: EnvelopeSettings) -> TestClient:
    return TestClient(build_app(exposing_config))


@pytest.fixture
def hiding_client(hiding_config: EnvelopeSettings) -> TestClient:
    return TestClient(build_app(hiding_config))
