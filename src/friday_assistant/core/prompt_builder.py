"""Prompt construction and formatting utilities.

This module handles the creation of the messages a turn adds to the
conversation: the per-turn system message, the user message and tool
results.
"""

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..logging import get_logger
from ..types import MessageRole, ToolResult, UnifiedMessage

logger = get_logger(__name__)


def resolve_zone(timezone: str) -> ZoneInfo:
    """ZoneInfo for an IANA name, falling back to UTC for unknown names."""
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"unknown timezone '{timezone}', using UTC")
        return ZoneInfo("UTC")


class PromptBuilder:
    """Constructs and formats prompts for the assistant.

    The system prompt template receives ``{current_datetime}`` and
    ``{timezone}``; it is rendered afresh for every turn so the model can
    resolve relative dates.
    """

    def __init__(self, base_prompt: str, timezone: str = "UTC"):
        """Initialize the prompt builder.

        Args:
            base_prompt: The system prompt template.
            timezone: IANA timezone name announced to the model.
        """
        self.base_prompt = base_prompt
        self.zone = resolve_zone(timezone)
        self.timezone = self.zone.key

    def format_system_prompt(self, now: datetime | None = None) -> str:
        """Render the template with the current local date-time.

        Args:
            now: Moment to announce; defaults to the current time.

        Returns:
            Formatted system prompt string.
        """
        now = (now or datetime.now(self.zone)).astimezone(self.zone)
        return self.base_prompt.format(
            current_datetime=now.strftime("%Y-%m-%dT%H:%M:%S"),
            timezone=self.timezone,
        )

    def build_system_message(self, now: datetime | None = None) -> UnifiedMessage:
        return UnifiedMessage(role=MessageRole.SYSTEM, content=self.format_system_prompt(now))

    def build_user_message(self, content: str) -> UnifiedMessage:
        return UnifiedMessage(role=MessageRole.USER, content=content)

    def build_tool_result(self, result: ToolResult) -> UnifiedMessage:
        """Create the tool message answering one tool call."""
        return UnifiedMessage(
            role=MessageRole.TOOL,
            content=result.content,
            tool_call_id=result.tool_call_id,
            name=result.name,
        )
