"""Shell command tool with security restrictions.

Uses SecureCommandRunner to block dangerous commands and shell injection.
"""

from typing import Any

from ..exceptions import DisallowedCommandError, ToolExecutionError
from .base import BaseTool
from .security import SecureCommandRunner

# shared command runner instance with default security settings
_command_runner: SecureCommandRunner | None = None


def get_command_runner() -> SecureCommandRunner:
    """Get or create the shared command runner."""
    global _command_runner
    if _command_runner is None:
        _command_runner = SecureCommandRunner()
    return _command_runner


def configure_command_runner(
    timeout: float = 10.0,
    allow_delete: bool = False,
    additional_blocked: set[str] | None = None,
    additional_allowed: set[str] | None = None,
    cwd: str | None = None,
) -> SecureCommandRunner:
    """Replace the shared runner with one using the given settings."""
    global _command_runner
    _command_runner = SecureCommandRunner(
        timeout=timeout,
        allow_delete=allow_delete,
        additional_blocked=additional_blocked,
        additional_allowed=additional_allowed,
        cwd=cwd,
    )
    return _command_runner


def format_command_output(stdout: str, stderr: str, return_code: int) -> str:
    output = stdout
    if stderr:
        output += f"\nStderr:\n{stderr}"
    if return_code != 0:
        output += f"\n(Exit code: {return_code})"
    return output if output.strip() else "(No output)"


class RunShellCommandTool(BaseTool):
    """Run a command on the local system.

    Commands run without a shell; operators such as ;, &&, | and redirects
    are rejected, as are destructive commands (rm, sudo, mkfs, ...). The
    child process is killed when it exceeds the runner timeout.
    """

    @property
    def TIMEOUT(self) -> float:  # type: ignore[override]
        # leave the subprocess timeout room to fire and kill the child first
        return get_command_runner().timeout + 5

    @property
    def name(self) -> str:
        return "run-shell-command"

    @property
    def description(self) -> str:
        return (
            "Run a shell command on the local system. Dangerous commands are blocked "
            "and shell operators (;, &&, |, redirects) are not supported."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command": {"type": "string", "description": "Shell command to execute."},
            },
            "required": ["command"],
        }

    def execute(self, command: str) -> str:
        try:
            stdout, stderr, return_code = get_command_runner().execute(command)
        except DisallowedCommandError as e:
            raise ToolExecutionError(self.name, f"Security error: {e}") from e
        return format_command_output(stdout, stderr, return_code)
