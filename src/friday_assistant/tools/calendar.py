"""Google Calendar tools.

The Calendar service is built lazily from OAuth credentials held in the
settings, so the assistant starts even when Google is not configured; the
tools then report the failure text the model is told to expect.
"""

import json
import threading
import uuid
from typing import Any, Callable

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from ..config import Settings
from ..exceptions import ToolExecutionError
from ..logging import get_logger
from .base import BaseTool

logger = get_logger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]

ServiceFactory = Callable[[], Any]


def calendar_service_factory(settings: Settings) -> ServiceFactory:
    """Return a callable building the Calendar v3 service from the settings."""

    def factory() -> Any:
        if not (settings.google_access_token or settings.google_refresh_token):
            raise RuntimeError("Google Calendar credentials are not configured")
        creds = Credentials(
            settings.google_access_token,
            refresh_token=settings.google_refresh_token,
            token_uri=TOKEN_URI,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            scopes=CALENDAR_SCOPES,
        )
        return build("calendar", "v3", credentials=creds, cache_discovery=False)

    return factory


class CalendarTool(BaseTool):
    """Base for tools talking to one calendar.

    The Calendar service sits on an ``httplib2.Http`` connection, which must
    not be shared between threads, so every thread builds its own service.
    """

    TIMEOUT = 30.0

    def __init__(self, service_factory: ServiceFactory, calendar_id: str = "primary"):
        self._service_factory = service_factory
        self._local = threading.local()
        self.calendar_id = calendar_id

    @property
    def service(self) -> Any:
        service = getattr(self._local, "service", None)
        if service is None:
            service = self._local.service = self._service_factory()
        return service


class GetEventsTool(CalendarTool):
    @property
    def name(self) -> str:
        return "get-events"

    @property
    def description(self) -> str:
        return "Call to get the calendar events."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "q": {
                    "type": "string",
                    "description": (
                        "The query to be used to get events from google calendar. It can be one of "
                        "these values: summary, description, location, attendees display name, "
                        "attendees email, organiser's name, organiser's email"
                    ),
                },
                "timeMin": {"type": "string", "description": "The from datetime to get events."},
                "timeMax": {"type": "string", "description": "The to datetime to get events."},
            },
            "required": ["q", "timeMin", "timeMax"],
        }

    def execute(self, q: str, timeMin: str, timeMax: str) -> str:
        try:
            response = (
                self.service.events()
                .list(calendarId=self.calendar_id, q=q, timeMin=timeMin, timeMax=timeMax)
                .execute()
            )
        except Exception as e:
            logger.warning(f"calendar list failed: {e}")
            raise ToolExecutionError(self.name, "Failed to connect to the calendar.") from e

        events = [
            {
                "id": event.get("id"),
                "summary": event.get("summary"),
                "status": event.get("status"),
                "organiser": event.get("organizer"),
                "start": event.get("start"),
                "end": event.get("end"),
                "attendees": event.get("attendees"),
                "meetingLink": event.get("hangoutLink"),
                "eventType": event.get("eventType"),
            }
            for event in response.get("items", [])
        ]
        return json.dumps(events)


def _event_time_schema(label: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "dateTime": {"type": "string", "description": f"The date time of {label} of the event."},
            "timeZone": {"type": "string", "description": "Current IANA timezone string."},
        },
        "required": ["dateTime", "timeZone"],
    }


class CreateEventTool(CalendarTool):
    """Create an event with a Google Meet link and invite the attendees."""

    @property
    def name(self) -> str:
        return "create-event"

    @property
    def description(self) -> str:
        return "Call to create the calendar events."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "summary": {"type": "string", "description": "The title of the event"},
                "start": _event_time_schema("start"),
                "end": _event_time_schema("end"),
                "attendees": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "email": {"type": "string", "description": "The email of the attendee"},
                            "displayName": {"type": "string", "description": "The name of the attendee."},
                        },
                        "required": ["email", "displayName"],
                    },
                },
            },
            "required": ["summary", "start", "end", "attendees"],
        }

    def execute(
        self,
        summary: str,
        start: dict[str, str],
        end: dict[str, str],
        attendees: list[dict[str, str]],
    ) -> str:
        body = {
            "summary": summary,
            "start": start,
            "end": end,
            "attendees": attendees,
            "conferenceData": {
                "createRequest": {
                    "requestId": str(uuid.uuid4()),
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                },
            },
        }
        try:
            self.service.events().insert(
                calendarId=self.calendar_id,
                body=body,
                sendUpdates="all",
                conferenceDataVersion=1,
            ).execute()
        except Exception as e:
            logger.warning(f"calendar insert failed: {e}")
            raise ToolExecutionError(self.name, "Couldn't create a meeting.") from e
        return "The meeting has been created."


class CancelEventTool(CalendarTool):
    @property
    def name(self) -> str:
        return "cancel-event"

    @property
    def description(self) -> str:
        return "Call to cancel/delete a calendar event by event ID."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "eventId": {"type": "string", "description": "The ID of the event to cancel."},
            },
            "required": ["eventId"],
        }

    def execute(self, eventId: str) -> str:
        try:
            self.service.events().delete(calendarId=self.calendar_id, eventId=eventId).execute()
        except Exception as e:
            logger.warning(f"calendar delete failed: {e}")
            raise ToolExecutionError(self.name, "Failed to cancel the event.") from e
        return "The event has been cancelled."


def get_calendar_tools(settings: Settings, service_factory: ServiceFactory | None = None) -> list[BaseTool]:
    factory = service_factory or calendar_service_factory(settings)
    return [
        CreateEventTool(factory, settings.calendar_id),
        GetEventsTool(factory, settings.calendar_id),
        CancelEventTool(factory, settings.calendar_id),
    ]
