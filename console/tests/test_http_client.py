"""
ApiClient: request shaping and failure classification.
"""

import threading

import pytest
import requests

from roster_core.errors import ApiError, RateLimited, TransportError
from roster_core.http_client import ApiClient, create_session, reset_session

from conftest import BASE_URL, make_response


def test_get_sends_json_headers_and_bearer(client, http):
    http.request.return_value = make_response(200, [{"id": 1}])

    assert client.get("/students") == [{"id": 1}]

    method, url = http.request.call_args.args
    kwargs = http.request.call_args.kwargs
    assert (method, url) == ("GET", f"{BASE_URL}/students")
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["headers"]["Authorization"] == "Bearer tok-123"
    assert "json" not in kwargs


def test_no_authorization_header_without_token(http):
    client = ApiClient(BASE_URL, token_provider=lambda: None, session=http)
    client.get("/courses")
    assert "Authorization" not in http.request.call_args.kwargs["headers"]


def test_body_is_serialized_even_when_empty_list(client, http):
    http.request.return_value = make_response(200)
    client.post("/students/7/courses", [])
    assert http.request.call_args.kwargs["json"] == []


def test_query_params_passed_through(client, http):
    client.get("/students/search", params={"query": "ada lovelace"})
    assert http.request.call_args.kwargs["params"] == {"query": "ada lovelace"}


def test_204_returns_none(client, http):
    http.request.return_value = make_response(204, reason="No Content")
    assert client.delete("/students/1") is None


def test_empty_200_body_returns_none(client, http):
    http.request.return_value = make_response(200)
    assert client.post("/students/1/courses", ["CS101"]) is None


def test_429_raises_rate_limited_with_status_in_message(client, http, advisories):
    http.request.return_value = make_response(429, reason="Too Many Requests")

    with pytest.raises(RateLimited) as exc_info:
        client.get("/students")

    assert "429" in str(exc_info.value)
    assert exc_info.value.status_code == 429
    assert advisories == ["rate-limit"]


def test_rate_limited_is_an_api_error():
    assert issubclass(RateLimited, ApiError)


def test_five_concurrent_429s_produce_one_advisory(client, http, advisories):
    http.request.return_value = make_response(429, reason="Too Many Requests")
    errors = []

    def call():
        try:
            client.get("/students")
        except RateLimited as e:
            errors.append(e)

    threads = [threading.Thread(target=call) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(errors) == 5
    assert advisories == ["rate-limit"]


def test_advisory_fires_again_after_cooldown(client, http, advisories, clock):
    http.request.return_value = make_response(429, reason="Too Many Requests")
    for _ in range(3):
        with pytest.raises(RateLimited):
            client.get("/courses")
    clock.advance(29)
    with pytest.raises(RateLimited):
        client.get("/courses")
    assert len(advisories) == 1

    clock.advance(2)
    with pytest.raises(RateLimited):
        client.get("/courses")
    assert len(advisories) == 2


def test_server_message_used_for_api_error(client, http):
    http.request.return_value = make_response(400, {"message": "Email already exists"}, reason="Bad Request")
    with pytest.raises(ApiError) as exc_info:
        client.post("/students", {"email": "a@b.co"})
    assert str(exc_info.value) == "Email already exists"
    assert exc_info.value.status_code == 400


def test_generic_message_when_body_not_json(client, http):
    http.request.return_value = make_response(503, raw="<html>down</html>", reason="Service Unavailable")
    with pytest.raises(ApiError, match=r"^API Error: 503 Service Unavailable$"):
        client.get("/courses")


def test_non_429_error_does_not_trigger_advisory(client, http, advisories):
    http.request.return_value = make_response(500, {}, reason="Internal Server Error")
    with pytest.raises(ApiError):
        client.get("/courses")
    assert advisories == []


def test_network_failure_is_transport_error(client, http):
    http.request.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(TransportError) as exc_info:
        client.get("/students")
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_unparseable_success_body_is_transport_error(client, http):
    http.request.return_value = make_response(200, raw="not json")
    with pytest.raises(TransportError):
        client.get("/students")


def test_health_endpoints(client, http):
    http.request.return_value = make_response(200, {"status": "UP"})
    assert client.health() == {"status": "UP"}
    assert http.request.call_args.args[1] == f"{BASE_URL}/health"
    client.health_details()
    assert http.request.call_args.args[1] == f"{BASE_URL}/health/details"


def test_create_session_does_not_retry():
    session = create_session()
    adapter = session.get_adapter("https://api.test/")
    assert adapter.max_retries.total == 0


def test_reset_replaces_session_and_closes_old_one(client, http):
    client.reset()
    http.close.assert_called_once()
    assert isinstance(client.http, requests.Session)
    assert client.http is not http


def test_reset_survives_close_failure(http):
    http.close.side_effect = OSError("already closed")
    fresh = reset_session(http)
    assert isinstance(fresh, requests.Session)
