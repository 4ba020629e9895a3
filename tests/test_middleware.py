"""HTTP-level tests for the Starlette middleware and the demo app."""

import logging

import pytest
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from resterr import (
    BufferedResponseSink,
    ErrorContext,
    ErrorHandlingMiddleware,
    RESTError,
    SinkError,
    wrap,
)
from resterr.http_server import create_app

from conftest import LOGGER_NAME


@pytest.fixture
def make_client(dispatcher):
    """Client for an app whose only route raises ``error``."""

    def _make(error=None, **middleware_options):
        async def endpoint(request):
            if error is not None:
                raise error
            return PlainTextResponse("fine")

        app = Starlette(routes=[Route("/{path:path}", endpoint)])
        app.add_middleware(ErrorHandlingMiddleware, dispatcher=dispatcher, **middleware_options)
        return TestClient(app)

    return _make


class TestErrorHandlingMiddleware:
    """Test translation of exceptions escaping a route."""

    def test_success_passes_through(self, make_client):
        response = make_client().get("/")

        assert response.status_code == 200
        assert response.text == "fine"

    def test_mapped_error(self, make_client, sentinels):
        client = make_client(wrap("lookup failed", sentinels.not_found))

        response = client.get("/items/9")

        assert response.status_code == 404
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"status-code": 404, "message": "resource missing"}
        assert response.content == b'{"status-code":404,"message":"resource missing"}'

    def test_rest_error(self, make_client):
        response = make_client(RESTError(418, "short and stout")).get("/teapot")

        assert response.status_code == 418
        assert response.json()["message"] == "short and stout"

    def test_unmapped_error(self, make_client):
        response = make_client(RuntimeError("kaboom")).get("/")

        assert response.status_code == 500
        assert response.json() == {"status-code": 500, "message": "something went wrong"}
        assert response.headers["content-length"] == str(len(response.content))

    def test_request_id_is_logged(self, make_client, sentinels, caplog):
        caplog.set_level(logging.INFO, logger=LOGGER_NAME)

        make_client(sentinels.foo).get("/items/1", headers={"X-Request-ID": "abc-123"})

        record = next(r for r in caplog.records if r.name == LOGGER_NAME)
        assert record.request_id == "abc-123"
        assert record.operation == "GET /items/1"

    def test_custom_context_factory(self, make_client, sentinels, caplog):
        caplog.set_level(logging.INFO, logger=LOGGER_NAME)
        client = make_client(
            sentinels.foo,
            context_factory=lambda request: ErrorContext(operation="brew"),
        )

        response = client.get("/")

        assert response.status_code == 418
        record = next(r for r in caplog.records if r.name == LOGGER_NAME)
        assert record.operation == "brew"


class TestDemoApp:
    """Test the demo server's application."""

    @pytest.mark.parametrize(
        "path, status_code",
        [
            ("/items/1", 200),
            ("/items/7", 403),
            ("/items/99", 404),
            ("/teapot", 418),
            ("/boom", 500),
            ("/nowhere", 404),
        ],
    )
    def test_routes(self, path, status_code):
        response = TestClient(create_app()).get(path)

        assert response.status_code == status_code
        assert response.headers["content-type"] == "application/json"

    def test_error_body(self):
        response = TestClient(create_app()).get("/items/7")

        assert response.json() == {"status-code": 403, "message": "access denied"}


class TestBufferedResponseSink:
    """Test the in-memory sink."""

    def test_records_response(self):
        sink = BufferedResponseSink()
        sink.set_header("Content-Type", "text/plain")
        sink.set_header("content-type", "application/json")
        sink.set_status(404)

        assert sink.write(b'{"a": 1}') == 8
        assert sink.headers == {"content-type": "application/json"}
        assert sink.header("CONTENT-TYPE") == "application/json"
        assert sink.json() == {"a": 1}

    def test_closed_sink_raises(self):
        sink = BufferedResponseSink()
        sink.close()

        with pytest.raises(SinkError):
            sink.write(b"late")
        with pytest.raises(SinkError):
            sink.set_status(500)

    def test_to_response(self):
        sink = BufferedResponseSink()
        sink.set_header("Content-Type", "application/json")
        sink.set_header("Content-Length", "999")
        sink.set_status(409)
        sink.write(b"{}")

        response = sink.to_response()

        assert response.status_code == 409
        assert response.body == b"{}"
        assert response.headers["content-type"] == "application/json"
        assert response.headers["content-length"] == "2"

    def test_to_response_without_status(self):
        assert BufferedResponseSink().to_response().status_code == 500
