import pytest
import structlog

from sprintpilot.platform.logging import bind_request_context, bind_sprint_context


@pytest.fixture(autouse=True)
def clean_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


def test_bind_request_context_uses_given_id():
    request_id = bind_request_context("req-1", method="GET", path="/api/v1/sprint/")

    assert request_id == "req-1"
    assert structlog.contextvars.get_contextvars() == {
        "request_id": "req-1",
        "method": "GET",
        "path": "/api/v1/sprint/",
    }


def test_bind_request_context_generates_id_and_resets():
    structlog.contextvars.bind_contextvars(sprint_id="sprint-old")

    request_id = bind_request_context()

    assert len(request_id) == 12
    assert structlog.contextvars.get_contextvars() == {"request_id": request_id}


def test_sprint_context_is_added_to_request_context():
    bind_request_context("req-2")
    bind_sprint_context("sprint-abc")

    assert structlog.contextvars.get_contextvars() == {"request_id": "req-2", "sprint_id": "sprint-abc"}


def test_bound_context_is_merged_into_events():
    bind_request_context("req-3")
    bind_sprint_context("sprint-abc")

    event = structlog.contextvars.merge_contextvars(None, "info", {"event": "Added team member"})

    assert event == {"request_id": "req-3", "sprint_id": "sprint-abc", "event": "Added team member"}
