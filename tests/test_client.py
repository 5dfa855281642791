import logging

import httpx
import pytest
import respx
from gedcomx_client.client import GedcomxClient
from httpx import Response


@respx.mock
def test_create_request_and_send():
    route = respx.get("https://mock-gx.com/platform/collections").mock(
        return_value=Response(200, json={"collections": []})
    )

    with GedcomxClient(base_url="https://mock-gx.com/") as client:
        request = client.create_request(
            "get", "/platform/collections", headers={"Accept": "application/json"}
        )
        response = client.send(request)

    assert request.method == "GET"
    assert response.status_code == 200
    assert route.calls[0].request.headers["Accept"] == "application/json"


def test_user_agent_and_timeout_are_passed_to_httpx():
    client = GedcomxClient(user_agent="gx-test/1.0", timeout_seconds=2.5)
    assert client.http.headers["User-Agent"] == "gx-test/1.0"
    assert client.http.timeout.read == 2.5
    client.close()


@respx.mock
def test_error_status_is_returned_not_raised():
    respx.delete("https://mock-gx.com/things/1").mock(return_value=Response(500))

    client = GedcomxClient()
    response = client.send(client.create_request("DELETE", "https://mock-gx.com/things/1"))

    assert response.status_code == 500


@respx.mock
def test_transport_errors_are_not_wrapped():
    respx.get("https://mock-gx.com/things").mock(side_effect=httpx.ConnectTimeout("boom"))

    client = GedcomxClient(timeout_seconds=0.1)
    with pytest.raises(httpx.ConnectTimeout):
        client.send(client.create_request("GET", "https://mock-gx.com/things"))


@respx.mock
def test_send_logs_request_without_secrets(caplog):
    respx.get("https://mock-gx.com/things").mock(return_value=Response(204))

    client = GedcomxClient()
    request = client.create_request(
        "GET", "https://mock-gx.com/things", headers={"Authorization": "Bearer s3cret"}
    )
    with caplog.at_level(logging.DEBUG, logger="gedcomx_client.client"):
        client.send(request)

    record = next(r for r in caplog.records if r.getMessage() == "op.request")
    assert record.method == "GET"
    assert record.status == 204
    assert record.duration_ms >= 0
    assert "s3cret" not in caplog.text


def test_injected_http_client_is_not_closed():
    http = httpx.Client()
    with GedcomxClient(http=http):
        pass
    assert http.is_closed is False
    http.close()


def test_from_env_requires_base_url(monkeypatch):
    monkeypatch.setattr("gedcomx_client.client.load_dotenv", lambda: None)
    monkeypatch.delenv("GEDCOMX_BASE_URL", raising=False)
    with pytest.raises(ValueError):
        GedcomxClient.from_env()

    monkeypatch.setenv("GEDCOMX_BASE_URL", "https://mock-gx.com/")
    monkeypatch.setenv("GEDCOMX_TIMEOUT_SECONDS", "4")
    client = GedcomxClient.from_env()
    assert client.base_url == "https://mock-gx.com"
    assert client.timeout_seconds == 4.0
