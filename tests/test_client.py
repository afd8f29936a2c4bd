import pytest
import requests

from meeting_engine import client as client_module
from meeting_engine.client import SchedulingClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.content = b"" if payload is None else b"{}"

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")


class RecordedCalls(list):
    """(method, url, kwargs) per request, plus canned responses by (method, url)"""

    def __init__(self):
        super().__init__()
        self.responses = {}


@pytest.fixture
def calls(monkeypatch):
    recorded = RecordedCalls()

    def fake(method):
        def send(url, **kwargs):
            recorded.append((method, url, kwargs))
            return recorded.responses.get((method, url), FakeResponse(404))
        return send

    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(client_module.requests, method, fake(method))
    return recorded


def test_create_user_posts_name_and_email(calls):
    calls.responses[("post", "http://svc/api/users")] = FakeResponse(201, {
        "status": 201, "response": {"id": "u1", "name": "Alice", "email": "alice@example.com"},
    })

    user = SchedulingClient("http://svc/").create_user("Alice", "alice@example.com")

    assert user["id"] == "u1"
    method, url, kwargs = calls[0]
    assert (method, url) == ("post", "http://svc/api/users")
    assert kwargs["json"] == {"name": "Alice", "email": "alice@example.com"}


def test_set_availability_sends_epoch_pairs(calls):
    calls.responses[("post", "http://svc/api/users/u1/slots")] = FakeResponse(201, {
        "status": 201, "response": [{"start_time": 10, "end_time": 20}],
    })

    result = SchedulingClient("http://svc").set_availability("u1", [(10, 20)])

    assert result == {"slots": [{"start_time": 10, "end_time": 20}]}
    assert calls[0][2]["json"] == [{"start_time": 10, "end_time": 20}]


def test_get_user(calls):
    calls.responses[("get", "http://svc/api/users/u1")] = FakeResponse(200, {
        "status": 200, "response": {"id": "u1", "name": "Alice", "email": "alice@example.com"},
    })

    user = SchedulingClient("http://svc").get_user("u1")

    assert user == {"id": "u1", "name": "Alice", "email": "alice@example.com"}
    assert calls[0][:2] == ("get", "http://svc/api/users/u1")


def test_get_user_not_found_is_reported(calls):
    assert "error" in SchedulingClient("http://svc").get_user("missing")


def test_get_availability(calls):
    calls.responses[("get", "http://svc/api/users/u1/slots")] = FakeResponse(200, {
        "status": 200, "response": [{"start_time": 10, "end_time": 20}],
    })

    result = SchedulingClient("http://svc").get_availability("u1")

    assert result == {"slots": [{"start_time": 10, "end_time": 20}]}
    assert calls[0][:2] == ("get", "http://svc/api/users/u1/slots")


def test_create_event_sends_slots_in_order(calls):
    calls.responses[("post", "http://svc/api/events")] = FakeResponse(201, {"status": 201, "response": {"id": "e1"}})

    SchedulingClient("http://svc").create_event("Planning", 1, "u1", [(30, 40), (10, 20)])

    assert calls[0][2]["json"]["slots"] == [
        {"start_time": 30, "end_time": 40},
        {"start_time": 10, "end_time": 20},
    ]


def test_update_event_puts_full_body(calls):
    calls.responses[("put", "http://svc/api/events/e1")] = FakeResponse(200, {"status": 200, "response": {"id": "e1"}})

    event = SchedulingClient("http://svc").update_event("e1", "Retro", 2, "u1", [(50, 60)])

    assert event == {"id": "e1"}
    method, url, kwargs = calls[0]
    assert (method, url) == ("put", "http://svc/api/events/e1")
    assert kwargs["json"] == {
        "title": "Retro",
        "duration_hours": 2,
        "organizer_id": "u1",
        "slots": [{"start_time": 50, "end_time": 60}],
    }


def test_update_event_not_found_is_reported(calls):
    assert "error" in SchedulingClient("http://svc").update_event("missing", "Retro", 2, "u1", [])


def test_get_possible_slot_returns_payload(calls):
    payload = {"slot": {"start_time": 10, "end_time": 20}, "users": [], "not_working_users": []}
    calls.responses[("get", "http://svc/api/events/e1/possible-slot")] = FakeResponse(200, {
        "status": 200, "response": payload,
    })

    assert SchedulingClient("http://svc").get_possible_slot("e1") == payload


def test_get_possible_slot_returns_none_on_404(calls):
    assert SchedulingClient("http://svc").get_possible_slot("missing") is None


def test_request_errors_are_reported(calls):
    calls.responses[("get", "http://svc/api/events/e1")] = FakeResponse(500, {"status": 500, "response": "boom"})

    result = SchedulingClient("http://svc").get_event("e1")

    assert "error" in result


def test_delete_event(calls):
    calls.responses[("delete", "http://svc/api/events/e1")] = FakeResponse(204)

    assert SchedulingClient("http://svc").delete_event("e1") == {"status": "deleted"}


def test_backend_unavailable(monkeypatch):
    def refuse(url, **kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(client_module.requests, "get", refuse)

    assert SchedulingClient("http://svc").is_backend_available() is False
