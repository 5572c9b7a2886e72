"""Tests for the requests-based transport and JSON logging."""

import json
import logging
from unittest.mock import Mock

import pytest
import requests

from twentycrm.clients.logging import JSONFormatter
from twentycrm.clients.transport import TwentyTransport
from twentycrm.utils.errors import ApiError, AuthenticationError


def _response(status_code=200, payload=None, text=None):
    response = Mock()
    response.status_code = status_code
    body = text if text is not None else json.dumps(payload if payload is not None else {})
    response.text = body
    response.content = body.encode()
    if text is not None:
        response.json = Mock(side_effect=ValueError("not json"))
    else:
        response.json = Mock(return_value=payload if payload is not None else {})
    return response


@pytest.fixture
def transport():
    return TwentyTransport("https://crm.example.com/rest/", "tok", timeout=7)


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda seconds: None)


def test_headers_and_url(transport, monkeypatch):
    send = Mock(return_value=_response(payload={"data": {}}))
    monkeypatch.setattr(transport._session, "request", send)

    assert transport.request("GET", "/people", query={"limit": 1}) == {"data": {}}

    send.assert_called_once_with(
        "GET", "https://crm.example.com/rest/people", params={"limit": 1}, json=None, timeout=7
    )
    assert transport._session.headers["Authorization"] == "Bearer tok"
    assert transport.url_for("metadata/objects") == "https://crm.example.com/rest/metadata/objects"


def test_unauthorized(transport, monkeypatch):
    monkeypatch.setattr(transport._session, "request", Mock(return_value=_response(401, {"error": "no"})))
    with pytest.raises(AuthenticationError) as excinfo:
        transport.request("GET", "/people")
    assert excinfo.value.status_code == 401


def test_client_error_is_not_retried(transport, monkeypatch):
    send = Mock(return_value=_response(404, {"error": "missing"}))
    monkeypatch.setattr(transport._session, "request", send)
    with pytest.raises(ApiError) as excinfo:
        transport.request("GET", "/people/x")
    assert excinfo.value.status_code == 404
    assert send.call_count == 1


def test_server_error_is_retried(transport, monkeypatch):
    send = Mock(side_effect=[_response(502, {}), _response(200, {"data": {"ok": True}})])
    monkeypatch.setattr(transport._session, "request", send)
    assert transport.request("GET", "/people") == {"data": {"ok": True}}
    assert send.call_count == 2


def test_connection_error_becomes_api_error(transport, monkeypatch):
    send = Mock(side_effect=requests.ConnectionError("refused"))
    monkeypatch.setattr(transport._session, "request", send)
    with pytest.raises(ApiError) as excinfo:
        transport.request("GET", "/people")
    assert excinfo.value.status_code == 0
    assert send.call_count == 3


def test_undecodable_body(transport, monkeypatch):
    monkeypatch.setattr(transport._session, "request", Mock(return_value=_response(200, text="<html>")))
    with pytest.raises(ApiError) as excinfo:
        transport.request("GET", "/people")
    assert excinfo.value.status_code == 0


def test_json_formatter_includes_extra():
    record = logging.LogRecord("twentycrm", logging.INFO, __file__, 1, "Metadata discovered", None, None)
    record.object_count = 3
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "Metadata discovered"
    assert payload["object_count"] == 3
    assert payload["level"] == "INFO"
