"""Tests for the Google Calendar tools."""

import json
import threading
from unittest.mock import MagicMock

import pytest

from friday_assistant.config import Settings
from friday_assistant.exceptions import ToolExecutionError
from friday_assistant.tools.calendar import (
    CancelEventTool,
    CreateEventTool,
    GetEventsTool,
    calendar_service_factory,
    get_calendar_tools,
)


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def factory(service):
    return MagicMock(return_value=service)


def test_get_events_maps_fields(service, factory):
    service.events.return_value.list.return_value.execute.return_value = {
        "items": [{
            "id": "ev1",
            "summary": "Standup",
            "status": "confirmed",
            "organizer": {"email": "boss@example.com"},
            "start": {"dateTime": "2024-05-01T09:00:00+02:00"},
            "end": {"dateTime": "2024-05-01T09:15:00+02:00"},
            "attendees": [{"email": "me@example.com"}],
            "hangoutLink": "https://meet.google.com/abc",
            "eventType": "default",
            "description": "not forwarded",
        }]
    }

    result = json.loads(GetEventsTool(factory, "work").execute(
        q="Standup", timeMin="2024-05-01T00:00:00Z", timeMax="2024-05-02T00:00:00Z",
    ))

    assert result == [{
        "id": "ev1",
        "summary": "Standup",
        "status": "confirmed",
        "organiser": {"email": "boss@example.com"},
        "start": {"dateTime": "2024-05-01T09:00:00+02:00"},
        "end": {"dateTime": "2024-05-01T09:15:00+02:00"},
        "attendees": [{"email": "me@example.com"}],
        "meetingLink": "https://meet.google.com/abc",
        "eventType": "default",
    }]
    service.events.return_value.list.assert_called_once_with(
        calendarId="work", q="Standup", timeMin="2024-05-01T00:00:00Z", timeMax="2024-05-02T00:00:00Z",
    )


def test_service_is_built_once(service, factory):
    service.events.return_value.list.return_value.execute.return_value = {}
    tool = GetEventsTool(factory)
    tool.execute(q="a", timeMin="x", timeMax="y")
    tool.execute(q="b", timeMin="x", timeMax="y")
    factory.assert_called_once()


def test_threads_do_not_share_a_service():
    factory = MagicMock(side_effect=lambda: MagicMock())
    tool = GetEventsTool(factory)
    barrier = threading.Barrier(2, timeout=2)
    seen = []

    def use_service():
        barrier.wait()
        seen.append(tool.service)

    threads = [threading.Thread(target=use_service) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(seen) == 2
    assert seen[0] is not seen[1]
    assert factory.call_count == 2


def test_get_events_failure_text(factory, service):
    service.events.return_value.list.return_value.execute.side_effect = OSError("timed out")
    with pytest.raises(ToolExecutionError) as exc_info:
        GetEventsTool(factory).execute(q="a", timeMin="x", timeMax="y")
    assert str(exc_info.value.cause) == "Failed to connect to the calendar."


def test_create_event_requests_meet_link(service, factory):
    start = {"dateTime": "2024-05-01T10:00:00", "timeZone": "Europe/Berlin"}
    end = {"dateTime": "2024-05-01T11:00:00", "timeZone": "Europe/Berlin"}
    attendees = [{"email": "ada@example.com", "displayName": "Ada"}]

    result = CreateEventTool(factory).execute(summary="Sync", start=start, end=end, attendees=attendees)

    assert result == "The meeting has been created."
    kwargs = service.events.return_value.insert.call_args.kwargs
    assert kwargs["calendarId"] == "primary"
    assert kwargs["sendUpdates"] == "all"
    assert kwargs["conferenceDataVersion"] == 1
    body = kwargs["body"]
    assert body["summary"] == "Sync"
    assert body["attendees"] == attendees
    create_request = body["conferenceData"]["createRequest"]
    assert create_request["conferenceSolutionKey"] == {"type": "hangoutsMeet"}
    assert create_request["requestId"]


def test_create_event_failure_text(service, factory):
    service.events.return_value.insert.return_value.execute.side_effect = RuntimeError("403")
    with pytest.raises(ToolExecutionError) as exc_info:
        CreateEventTool(factory).execute(summary="s", start={}, end={}, attendees=[])
    assert str(exc_info.value.cause) == "Couldn't create a meeting."


def test_cancel_event(service, factory):
    assert CancelEventTool(factory).execute(eventId="ev1") == "The event has been cancelled."
    service.events.return_value.delete.assert_called_once_with(calendarId="primary", eventId="ev1")


def test_cancel_event_failure_text(service, factory):
    service.events.return_value.delete.return_value.execute.side_effect = RuntimeError("404")
    with pytest.raises(ToolExecutionError) as exc_info:
        CancelEventTool(factory).execute(eventId="missing")
    assert str(exc_info.value.cause) == "Failed to cancel the event."


def test_unconfigured_credentials_fail_lazily():
    tools = get_calendar_tools(Settings(_env_file=None))
    get_events = next(t for t in tools if t.name == "get-events")
    with pytest.raises(ToolExecutionError) as exc_info:
        get_events.execute(q="a", timeMin="x", timeMax="y")
    assert str(exc_info.value.cause) == "Failed to connect to the calendar."


def test_factory_requires_tokens():
    with pytest.raises(RuntimeError):
        calendar_service_factory(Settings(_env_file=None))()
