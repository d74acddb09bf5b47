"""Filesystem tools with path validation.

All filesystem operations are validated against allowed root directories.
Results for listings are JSON arrays so the model gets a stable shape.
"""

import fnmatch
import json
import os
from typing import Any

from ..exceptions import PathTraversalError, ToolExecutionError
from .base import BaseTool
from .security import PathValidator

# shared path validator instance, replaced by configure_allowed_paths()
_path_validator: PathValidator | None = None


def get_path_validator() -> PathValidator:
    """Get or create the shared path validator."""
    global _path_validator
    if _path_validator is None:
        _path_validator = PathValidator()
    return _path_validator


def configure_allowed_paths(paths: list[str]) -> None:
    """Configure the allowed roots for filesystem operations."""
    global _path_validator
    _path_validator = PathValidator(paths)


def _validated(tool_name: str, path: str):
    try:
        return get_path_validator().validate(path)
    except PathTraversalError as e:
        raise ToolExecutionError(tool_name, f"Security error: {e}") from e


class ReadFileTool(BaseTool):
    """Read file contents with path validation."""

    @property
    def name(self) -> str:
        return "read-file"

    @property
    def description(self) -> str:
        return "Read the contents of a local file."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "filePath": {"type": "string", "description": "Absolute path to the file."},
            },
            "required": ["filePath"],
        }

    def execute(self, filePath: str) -> str:
        path = _validated(self.name, filePath)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ToolExecutionError(self.name, f"Error reading file: not found: {filePath}")
        except IsADirectoryError:
            raise ToolExecutionError(self.name, f"Error reading file: is a directory: {filePath}")
        except PermissionError:
            raise ToolExecutionError(self.name, f"Error reading file: permission denied: {filePath}")
        except UnicodeDecodeError:
            raise ToolExecutionError(self.name, f"Error reading file: not a text file: {filePath}")


class WriteFileTool(BaseTool):
    """Write content to a file with path validation."""

    @property
    def name(self) -> str:
        return "write-file"

    @property
    def description(self) -> str:
        return "Write content to a local file. Creates the file if it doesn't exist, overwrites if it does."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "filePath": {"type": "string", "description": "Absolute path to the file."},
                "content": {"type": "string", "description": "Content to write."},
            },
            "required": ["filePath", "content"],
        }

    def execute(self, filePath: str, content: str) -> str:
        path = _validated(self.name, filePath)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except PermissionError:
            raise ToolExecutionError(self.name, f"Error writing file: permission denied: {filePath}")
        except IsADirectoryError:
            raise ToolExecutionError(self.name, f"Error writing file: is a directory: {filePath}")
        return "File written successfully."


class ListDirectoryTool(BaseTool):
    """List entries of a directory as a JSON array."""

    @property
    def name(self) -> str:
        return "list-directory"

    @property
    def description(self) -> str:
        return "List files and folders in a directory."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "dirPath": {"type": "string", "description": "Absolute path to the directory."},
            },
            "required": ["dirPath"],
        }

    def execute(self, dirPath: str) -> str:
        path = _validated(self.name, dirPath)
        try:
            return json.dumps(sorted(os.listdir(path)))
        except FileNotFoundError:
            raise ToolExecutionError(self.name, f"Error listing directory: not found: {dirPath}")
        except NotADirectoryError:
            raise ToolExecutionError(self.name, f"Error listing directory: not a directory: {dirPath}")
        except PermissionError:
            raise ToolExecutionError(self.name, f"Error listing directory: permission denied: {dirPath}")


class SearchFilesTool(BaseTool):
    """Find directory entries whose name contains or glob-matches a pattern."""

    @property
    def name(self) -> str:
        return "search-files"

    @property
    def description(self) -> str:
        return (
            "Search for files in a directory by pattern. Matches names containing "
            "the pattern, or shell-style globs such as '*.py'."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "dirPath": {"type": "string", "description": "Absolute path to the directory."},
                "pattern": {"type": "string", "description": "Pattern to search for."},
            },
            "required": ["dirPath", "pattern"],
        }

    def execute(self, dirPath: str, pattern: str) -> str:
        path = _validated(self.name, dirPath)
        try:
            entries = sorted(os.listdir(path))
        except (FileNotFoundError, NotADirectoryError):
            raise ToolExecutionError(self.name, f"Error searching files: not a directory: {dirPath}")
        except PermissionError:
            raise ToolExecutionError(self.name, f"Error searching files: permission denied: {dirPath}")

        matched = [e for e in entries if pattern in e or fnmatch.fnmatch(e, pattern)]
        return json.dumps(matched)
