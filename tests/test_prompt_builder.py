"""Tests for prompt construction."""

from datetime import datetime, timezone

from friday_assistant.core.prompt_builder import PromptBuilder
from friday_assistant.prompts import SYSTEM_PROMPT
from friday_assistant.types import MessageRole, ToolErrorKind, ToolResult


def test_renders_local_time_and_zone():
    builder = PromptBuilder("now={current_datetime} tz={timezone}", timezone="Europe/Berlin")
    moment = datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)

    assert builder.format_system_prompt(moment) == "now=2024-01-15T09:30:00 tz=Europe/Berlin"


def test_unknown_zone_falls_back_to_utc():
    builder = PromptBuilder("{timezone}", timezone="Mars/Olympus_Mons")
    assert builder.timezone == "UTC"


def test_default_prompt_renders():
    message = PromptBuilder(SYSTEM_PROMPT, timezone="Asia/Tokyo").build_system_message()
    assert message.role == MessageRole.SYSTEM
    assert "F.R.I.D.A.Y." in message.content
    assert message.content.endswith("Current timezone string: Asia/Tokyo")


def test_tool_result_message():
    result = ToolResult(
        tool_call_id="c9",
        name="get-events",
        content="Failed to connect to the calendar.",
        error=ToolErrorKind.EXECUTION_FAILURE,
    )
    message = PromptBuilder("").build_tool_result(result)

    assert message.role == MessageRole.TOOL
    assert message.tool_call_id == "c9"
    assert message.name == "get-events"
    assert message.content == "Failed to connect to the calendar."
