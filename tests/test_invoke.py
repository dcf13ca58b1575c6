"""
Tests for the invoker (sync and async).

Uses plain callables and port implementations as the wrapped app.
"""

import asyncio
import json
import logging
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from kibo.application.envelope.invoke import (
    AsyncResponseEnvelopeMiddleware,
    ResponseEnvelopeMiddleware,
)
from kibo.core.config import EnvelopeSettings
from kibo.domain.envelope.entities import RawResponse, RequestContext
from kibo.domain.envelope.ports import AsyncDownstreamApplication, DownstreamApplication

from .conftest import JSON_HEADERS, SAMPLE_PAYLOAD

PATH = "/garbage/api/V1234/test"


def raising_app(context: RequestContext) -> RawResponse:
    raise RuntimeError("Test Error")


def json_app(context: RequestContext) -> RawResponse:
    return RawResponse(200, dict(JSON_HEADERS), (json.dumps(SAMPLE_PAYLOAD),))


def text_app(context: RequestContext) -> RawResponse:
    return RawResponse(200, {"Content-Type": "text/plain"}, ("test",))


class StaticApp(DownstreamApplication):
    def __init__(self, response: RawResponse) -> None:
        self.response = response
        self.calls = 0

    def invoke(self, context: RequestContext) -> RawResponse:
        self.calls += 1
        return self.response


class SlowApp(AsyncDownstreamApplication):
    async def invoke(self, context: RequestContext) -> RawResponse:
        await asyncio.sleep(0)
        return RawResponse(503, dict(JSON_HEADERS), ('{"retry": true}',))


class TestResponseEnvelopeMiddleware:
    """Tests for the synchronous invoker."""

    def test_calls_downstream_exactly_once(self) -> None:
        app = MagicMock(side_effect=json_app)
        wrapped = ResponseEnvelopeMiddleware(app, EnvelopeSettings())
        context = RequestContext(path=PATH)

        wrapped(context)

        app.assert_called_once_with(context)

    def test_accepts_port_implementations(self) -> None:
        app = StaticApp(RawResponse(200, dict(JSON_HEADERS), ("[1]",)))
        response = ResponseEnvelopeMiddleware(app)(RequestContext(path=PATH))
        assert app.calls == 1
        assert json.loads(response.body[0])["body"] == [1]

    def test_passthrough_is_identical(self) -> None:
        """Neither side wants JSON: exactly what the app produced."""
        produced = RawResponse(418, {"Content-Type": "text/plain"}, ("a", "b"))
        response = ResponseEnvelopeMiddleware(StaticApp(produced))(RequestContext(path=PATH))
        assert response is produced

    def test_wraps_json(self) -> None:
        response = ResponseEnvelopeMiddleware(json_app)(RequestContext(path=PATH))
        data = json.loads(response.body[0])
        assert response.status == 200
        assert data["success"] is True
        assert data["body"] == SAMPLE_PAYLOAD

    def test_failure_without_json_negotiation_is_plain_500(self) -> None:
        wrapped = ResponseEnvelopeMiddleware(raising_app, EnvelopeSettings(expose_errors=True))
        response = wrapped(RequestContext(path=PATH))
        assert response.status == 500
        assert response.body == ("Error",)

    def test_failure_with_json_negotiation_is_enveloped(self) -> None:
        """The error triple is wrapped once more when the client wants JSON."""
        wrapped = ResponseEnvelopeMiddleware(raising_app, EnvelopeSettings(expose_errors=True))
        response = wrapped(RequestContext(path=PATH, accept="application/json"))
        data = json.loads(response.body[0])

        assert response.status == 200
        assert data["success"] is False
        assert data["version"] == 1234
        assert data["body"] == {"error": {"message": "Test Error"}}

    def test_failure_message_hidden_by_default(self) -> None:
        wrapped = ResponseEnvelopeMiddleware(raising_app, EnvelopeSettings(expose_errors=False))
        response = wrapped(RequestContext(path=PATH, accept="application/json"))
        data = json.loads(response.body[0])
        assert data["body"] == {"error": {"message": "Error"}}

    def test_unparseable_body_is_reported_with_original_data(self) -> None:
        """A body that cannot be parsed turns into an error carrying the raw chunks."""
        wrapped = ResponseEnvelopeMiddleware(text_app, EnvelopeSettings(expose_errors=True))
        response = wrapped(RequestContext(path=PATH, accept="application/json"))
        data = json.loads(response.body[0])

        assert response.status == 200
        assert data["success"] is False
        assert data["body"]["error"]["data"] == ["test"]
        assert "not valid JSON" in data["body"]["error"]["message"]

    def test_unparseable_server_json_without_client_json(self) -> None:
        """Error body is JSON but the wire status stays 500."""
        app = StaticApp(RawResponse(200, dict(JSON_HEADERS), ("oops",)))
        wrapped = ResponseEnvelopeMiddleware(app, EnvelopeSettings(expose_errors=False))
        response = wrapped(RequestContext(path=PATH))

        assert response.status == 500
        assert json.loads(response.body[0]) == {"error": {"message": "Error"}}

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        wrapped = ResponseEnvelopeMiddleware(raising_app)
        with caplog.at_level(logging.ERROR, logger="kibo.application.envelope.invoke"):
            wrapped(RequestContext(path=PATH))
        assert "RuntimeError" in caplog.text
        assert "Test Error" not in caplog.messages[0]

    def test_config_is_frozen(self) -> None:
        config = EnvelopeSettings(expose_errors=True)
        wrapped = ResponseEnvelopeMiddleware(json_app, config)
        assert wrapped.config is config
        with pytest.raises(ValidationError):
            config.expose_errors = False


class TestAsyncResponseEnvelopeMiddleware:
    """Tests for the async invoker."""

    @pytest.mark.asyncio
    async def test_awaits_coroutine_apps(self) -> None:
        async def app(context: RequestContext) -> RawResponse:
            return json_app(context)

        response = await AsyncResponseEnvelopeMiddleware(app)(RequestContext(path=PATH))
        assert json.loads(response.body[0])["body"] == SAMPLE_PAYLOAD

    @pytest.mark.asyncio
    async def test_accepts_async_ports(self) -> None:
        response = await AsyncResponseEnvelopeMiddleware(SlowApp())(RequestContext(path=PATH))
        data = json.loads(response.body[0])
        assert response.status == 200
        assert data["success"] is False
        assert data["body"] == {"retry": True}

    @pytest.mark.asyncio
    async def test_accepts_sync_callables(self) -> None:
        produced = RawResponse(200, {}, ("x",))
        response = await AsyncResponseEnvelopeMiddleware(StaticApp(produced))(
            RequestContext(path=PATH)
        )
        assert response is produced

    @pytest.mark.asyncio
    async def test_async_failure_is_absorbed(self) -> None:
        async def app(context: RequestContext) -> RawResponse:
            raise RuntimeError("Test Error")

        wrapped = AsyncResponseEnvelopeMiddleware(app, EnvelopeSettings(expose_errors=True))
        response = await wrapped(RequestContext(path=PATH, accept="application/json"))
        data = json.loads(response.body[0])
        assert data["body"]["error"]["message"] == "Test Error"
        assert "data" not in data["body"]["error"]

    @pytest.mark.asyncio
    async def test_cancellation_is_not_absorbed(self) -> None:
        async def app(context: RequestContext) -> RawResponse:
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await AsyncResponseEnvelopeMiddleware(app)(RequestContext(path=PATH))
