"""Custom exception hierarchy for the assistant.

This module defines all custom exceptions used throughout the assistant,
organized into logical categories: client errors, tool errors, security
errors and session errors.
"""


class AgentError(Exception):
    """Base exception for all assistant errors."""


# =============================================================================
# Client Errors - Issues with LLM API interactions
# =============================================================================

class ClientError(AgentError):
    """Base class for LLM client errors."""


class AuthenticationError(ClientError):
    """API key is invalid or missing."""


class RateLimitError(ClientError):
    """Rate limit exceeded."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None):
        self.retry_after = retry_after
        if retry_after:
            message = f"{message}. Retry after: {retry_after}s"
        super().__init__(message)


class ProviderUnavailableError(ClientError):
    """Provider API is temporarily unavailable."""


class InvalidResponseError(ClientError):
    """Response from provider could not be parsed."""


class ModelUnavailableError(ClientError):
    """The decision step could not get an answer from the model.

    Raised by the decision step for any provider failure. It is not
    recoverable inside a turn and propagates to whoever started the turn.
    """

    def __init__(self, message: str, provider: str | None = None):
        self.provider = provider
        super().__init__(message)


# =============================================================================
# Tool Errors - Issues with tool registration and execution
# =============================================================================

class ToolError(AgentError):
    """Base class for tool errors."""


class ToolNotFoundError(ToolError):
    """Requested tool does not exist."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' not found")


class DuplicateToolNameError(ToolError):
    """A tool with the same name is already registered."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' is already registered")


class RegistryFrozenError(ToolError):
    """Registration attempted after the registry was frozen."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Cannot register '{tool_name}': tool registry is frozen")


class ToolExecutionError(ToolError):
    """Tool execution failed.

    ``str(cause)`` is the text handed to the model, so tools raise this with
    a message written for it (e.g. "Failed to connect to the calendar.").
    """

    def __init__(self, tool_name: str, cause: Exception | str):
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool '{tool_name}' execution failed: {cause}")


class ToolValidationError(ToolError):
    """Tool arguments failed schema validation."""

    def __init__(self, tool_name: str, errors: list[str]):
        self.tool_name = tool_name
        self.errors = errors
        super().__init__(f"Tool '{tool_name}' validation failed: {'; '.join(errors)}")


class ToolTimeoutError(ToolError):
    """Tool execution timed out."""

    def __init__(self, tool_name: str, timeout: float):
        self.tool_name = tool_name
        self.timeout = timeout
        super().__init__(f"Tool '{tool_name}' timed out after {timeout:g}s")


# =============================================================================
# Security Errors - Security-related issues
# =============================================================================

class SecurityError(AgentError):
    """Base class for security-related errors."""


class PathTraversalError(SecurityError):
    """Path outside the allowed roots."""

    def __init__(self, attempted_path: str, allowed_base: str):
        self.attempted_path = attempted_path
        self.allowed_base = allowed_base
        super().__init__(
            f"Path traversal blocked: '{attempted_path}' is outside allowed directory '{allowed_base}'"
        )


class DisallowedCommandError(SecurityError):
    """Attempted to run a disallowed command."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Command disallowed: '{command}'. Reason: {reason}")


# =============================================================================
# Session Errors
# =============================================================================

class SessionError(AgentError):
    """Base class for session store errors."""


class SessionNotFoundError(SessionError):
    """No session exists with the given id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")
