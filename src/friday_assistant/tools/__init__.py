"""Tool implementations for the assistant.

All tools inherit from BaseTool and implement the execute method. They are
registered once at startup by ``build_registry`` and the registry is frozen
before the first turn runs.
"""

from ..config import Settings
from .base import BaseTool
from .calendar import CancelEventTool, CreateEventTool, GetEventsTool, ServiceFactory, get_calendar_tools
from .contacts import GetContactsTool
from .filesystem import (
    ListDirectoryTool,
    ReadFileTool,
    SearchFilesTool,
    WriteFileTool,
    configure_allowed_paths,
)
from .git import configure_git_workdir, get_git_tools
from .registry import ToolRegistry
from .search import TavilySearchTool
from .security import PathValidator, SecureCommandRunner
from .system import RunShellCommandTool, configure_command_runner
from .web import HttpRequestTool, NewsTool, OpenUrlTool, WeatherTool

__all__ = [
    "BaseTool",
    "CancelEventTool",
    "CreateEventTool",
    "GetContactsTool",
    "GetEventsTool",
    "HttpRequestTool",
    "ListDirectoryTool",
    "NewsTool",
    "OpenUrlTool",
    "PathValidator",
    "ReadFileTool",
    "RunShellCommandTool",
    "SearchFilesTool",
    "SecureCommandRunner",
    "TavilySearchTool",
    "ToolRegistry",
    "WeatherTool",
    "WriteFileTool",
    "build_registry",
    "get_default_tools",
]


def get_default_tools(
    settings: Settings,
    calendar_service_factory: ServiceFactory | None = None,
) -> list[BaseTool]:
    """Get the default set of tools for the assistant.

    Also points the shared path validator, command runner and git working
    directory at the configured locations.
    """
    configure_allowed_paths(settings.resolve_allowed_paths())
    configure_command_runner(timeout=settings.shell_timeout, cwd=settings.git_workdir)
    configure_git_workdir(settings.git_workdir)

    return [
        *get_calendar_tools(settings, calendar_service_factory),
        GetContactsTool(settings.contacts_file),
        TavilySearchTool(settings.tavily_api_key),
        ReadFileTool(),
        WriteFileTool(),
        ListDirectoryTool(),
        SearchFilesTool(),
        RunShellCommandTool(),
        HttpRequestTool(),
        WeatherTool(),
        NewsTool(settings.news_api_key),
        OpenUrlTool(),
        *get_git_tools(),
    ]


def build_registry(
    settings: Settings,
    calendar_service_factory: ServiceFactory | None = None,
) -> ToolRegistry:
    """Register the default tools and freeze the registry."""
    return ToolRegistry.from_tools(get_default_tools(settings, calendar_service_factory)).freeze()
