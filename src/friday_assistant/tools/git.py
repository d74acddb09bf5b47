"""Version-control tools.

Each tool runs one fixed ``git`` invocation through the shared command
runner, in the configured git working directory.
"""

from typing import Any

from ..exceptions import ToolExecutionError
from .base import BaseTool
from .system import format_command_output, get_command_runner

# working directory for git commands, None means the process cwd
_git_workdir: str | None = None


def configure_git_workdir(path: str | None) -> None:
    global _git_workdir
    _git_workdir = path


class GitTool(BaseTool):
    """Base for git tools: subclasses set the metadata and build argv."""

    TOOL_NAME = ""
    TOOL_DESCRIPTION = ""
    TIMEOUT_FACTOR = 1.0
    EMPTY_OUTPUT = "(No output)"

    @property
    def TIMEOUT(self) -> float:  # type: ignore[override]
        return get_command_runner().timeout * self.TIMEOUT_FACTOR + 5

    @property
    def name(self) -> str:
        return self.TOOL_NAME

    @property
    def description(self) -> str:
        return self.TOOL_DESCRIPTION

    @property
    def parameters(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}, "additionalProperties": False}

    def build_args(self, **kwargs) -> list[str]:
        raise NotImplementedError

    def execute(self, **kwargs) -> str:
        runner = get_command_runner()
        stdout, stderr, return_code = runner.run(
            ["git", *self.build_args(**kwargs)],
            cwd=_git_workdir,
            timeout=runner.timeout * self.TIMEOUT_FACTOR,
        )
        if return_code != 0:
            raise ToolExecutionError(self.name, f"Error: {stderr.strip() or stdout.strip()}")
        output = format_command_output(stdout, stderr, return_code)
        return self.EMPTY_OUTPUT if output == "(No output)" else output


def _reject_option(tool_name: str, value: str, label: str) -> str:
    # values are passed as argv; a leading dash would be read as a flag
    if not value or value.startswith("-"):
        raise ToolExecutionError(tool_name, f"Invalid {label}: {value!r}")
    return value


class GitStatusTool(GitTool):
    TOOL_NAME = "git-status"
    TOOL_DESCRIPTION = "Show the current git status."

    def build_args(self) -> list[str]:
        return ["status"]


class GitAddTool(GitTool):
    TOOL_NAME = "git-add"
    TOOL_DESCRIPTION = "Stage all changes for commit."
    EMPTY_OUTPUT = "All changes staged."

    def build_args(self) -> list[str]:
        return ["add", "."]


class GitCommitTool(GitTool):
    TOOL_NAME = "git-commit"
    TOOL_DESCRIPTION = "Commit all tracked changes, with a default message unless one is given."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "message": {"type": "string", "description": "Commit message."},
            },
        }

    def build_args(self, message: str = "Auto commit") -> list[str]:
        return ["commit", "-am", message]


class GitPushTool(GitTool):
    TOOL_NAME = "git-push"
    TOOL_DESCRIPTION = "Push committed changes to the remote repository."

    def build_args(self) -> list[str]:
        return ["push"]


class GitPullTool(GitTool):
    TOOL_NAME = "git-pull"
    TOOL_DESCRIPTION = "Pull the latest changes from the remote repository."

    def build_args(self) -> list[str]:
        return ["pull"]


class GitCloneTool(GitTool):
    TOOL_NAME = "git-clone"
    TOOL_DESCRIPTION = "Clone a git repository from a given URL."
    TIMEOUT_FACTOR = 2.0

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "repoUrl": {"type": "string", "description": "Repository URL to clone."},
            },
            "required": ["repoUrl"],
        }

    def build_args(self, repoUrl: str) -> list[str]:
        return ["clone", _reject_option(self.name, repoUrl, "repository URL")]


class GitLogTool(GitTool):
    TOOL_NAME = "git-log"
    TOOL_DESCRIPTION = "Show the last 10 git commit logs (oneline)."

    def build_args(self) -> list[str]:
        return ["log", "--oneline", "-n", "10"]


class GitBranchTool(GitTool):
    TOOL_NAME = "git-branch"
    TOOL_DESCRIPTION = "List all local git branches."

    def build_args(self) -> list[str]:
        return ["branch"]


class GitCheckoutTool(GitTool):
    TOOL_NAME = "git-checkout"
    TOOL_DESCRIPTION = "Switch to a different git branch."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "branch": {"type": "string", "description": "Branch name to checkout."},
            },
            "required": ["branch"],
        }

    def build_args(self, branch: str) -> list[str]:
        return ["checkout", _reject_option(self.name, branch, "branch name")]


def get_git_tools() -> list[BaseTool]:
    return [
        GitStatusTool(),
        GitAddTool(),
        GitCommitTool(),
        GitPushTool(),
        GitPullTool(),
        GitCloneTool(),
        GitLogTool(),
        GitBranchTool(),
        GitCheckoutTool(),
    ]
