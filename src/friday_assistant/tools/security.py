"""Security utilities for tool execution.

This module provides security primitives for file and command operations:
- PathValidator: keeps filesystem tools inside the allowed roots
- SecureCommandRunner: runs commands without a shell, with a blocklist
  and a hard timeout that kills the child process
"""

import os
import shlex
import subprocess
from pathlib import Path

from ..exceptions import DisallowedCommandError, PathTraversalError, ToolTimeoutError
from ..logging import get_logger

logger = get_logger(__name__)


class PathValidator:
    """Validates file paths against a set of allowed root directories.

    Example:
        validator = PathValidator(["/home/user", "/tmp"])
        validator.validate("/tmp/notes.txt")  # OK
        validator.validate("/etc/passwd")  # Raises PathTraversalError
    """

    def __init__(self, allowed_roots: list[str] | None = None):
        """Initialize with allowed root directories.

        Args:
            allowed_roots: List of allowed root directories.
                          Defaults to current working directory.
        """
        if allowed_roots:
            self.allowed_roots = [Path(root).resolve() for root in allowed_roots]
        else:
            self.allowed_roots = [Path.cwd().resolve()]

    def validate(self, path: str) -> Path:
        """Resolve a path and check it is inside an allowed root.

        Raises:
            PathTraversalError: If path escapes allowed roots
        """
        resolved = Path(path).expanduser().resolve()

        for root in self.allowed_roots:
            if resolved == root or root in resolved.parents:
                return resolved

        raise PathTraversalError(
            attempted_path=str(resolved),
            allowed_base=", ".join(str(r) for r in self.allowed_roots),
        )

    def add_allowed_root(self, root: str) -> None:
        self.allowed_roots.append(Path(root).resolve())

    def is_valid(self, path: str) -> bool:
        try:
            self.validate(path)
            return True
        except PathTraversalError:
            return False


class SecureCommandRunner:
    """Command execution with a blocklist and injection checks.

    - Blocks dangerous commands (rm, sudo, etc.)
    - Rejects shell operators (;, &&, |, redirects, substitution)
    - Runs commands without shell=True
    - Kills the child process when the timeout expires

    Example:
        runner = SecureCommandRunner(timeout=10)
        stdout, stderr, code = runner.execute("ls -la")
        # runner.execute("rm -rf /")  # Raises DisallowedCommandError
    """

    DEFAULT_BLOCKED_COMMANDS = {
        # deletion
        "rm", "rmdir", "del", "shred",
        # disk operations
        "mkfs", "dd", "fdisk", "parted", "mount", "umount",
        # permission/ownership changes
        "chmod", "chown", "chgrp",
        # privilege escalation
        "sudo", "su", "doas", "pkexec",
        # system control
        "shutdown", "reboot", "init", "systemctl",
    }

    INJECTION_PATTERNS = [
        ";", "&&", "||", "|", "`", "$(", ">", "<", "\n", "\r",
    ]

    def __init__(
        self,
        timeout: float = 10.0,
        allow_delete: bool = False,
        additional_blocked: set[str] | None = None,
        additional_allowed: set[str] | None = None,
        cwd: str | None = None,
    ):
        """Initialize the runner.

        Args:
            timeout: Maximum execution time in seconds
            allow_delete: If True, allows rm/rmdir
            additional_blocked: Extra commands to block
            additional_allowed: Commands to explicitly allow (overrides blocked)
            cwd: Working directory for spawned commands
        """
        self.timeout = timeout
        self.cwd = cwd
        self.blocked = self.DEFAULT_BLOCKED_COMMANDS.copy()

        if additional_blocked:
            self.blocked.update(additional_blocked)
        if allow_delete:
            self.blocked.discard("rm")
            self.blocked.discard("rmdir")
        if additional_allowed:
            self.blocked -= additional_allowed

    def _check_injection(self, command: str) -> None:
        for pattern in self.INJECTION_PATTERNS:
            if pattern in command:
                raise DisallowedCommandError(
                    command=command,
                    reason=f"Contains disallowed pattern: '{pattern}'",
                )

    def _parse_command(self, command: str) -> list[str]:
        try:
            return shlex.split(command)
        except ValueError as e:
            raise DisallowedCommandError(command=command, reason=f"Failed to parse command: {e}")

    def _check_base_command(self, parts: list[str]) -> None:
        if not parts:
            raise DisallowedCommandError(command="", reason="Empty command")

        base_cmd = os.path.basename(parts[0])
        if base_cmd in self.blocked:
            raise DisallowedCommandError(
                command=parts[0],
                reason=f"Command '{base_cmd}' is blocked for security reasons",
            )

    def execute(self, command: str) -> tuple[str, str, int]:
        """Check and run a command line.

        Returns:
            Tuple of (stdout, stderr, return_code)

        Raises:
            DisallowedCommandError: If command is blocked or contains injection
            ToolTimeoutError: If the command outlived the timeout (it is killed)
        """
        self._check_injection(command)
        parts = self._parse_command(command)
        self._check_base_command(parts)
        return self.run(parts)

    def run(
        self,
        parts: list[str],
        cwd: str | None = None,
        timeout: float | None = None,
    ) -> tuple[str, str, int]:
        """Run an already-split argument vector without a shell.

        Callers building argv themselves (git tools) skip the string checks
        but still get the timeout.
        """
        limit = timeout or self.timeout
        logger.debug(f"running {parts!r} (timeout={limit}s)")
        try:
            # subprocess.run kills the child when the timeout expires
            result = subprocess.run(
                parts,
                capture_output=True,
                text=True,
                timeout=limit,
                cwd=cwd or self.cwd,
            )
            return result.stdout, result.stderr, result.returncode
        except subprocess.TimeoutExpired:
            logger.warning(f"command {parts[0]!r} killed after {limit}s")
            raise ToolTimeoutError(parts[0], limit) from None
        except FileNotFoundError:
            return "", f"Command not found: {parts[0]}", 127
        except PermissionError:
            return "", f"Permission denied: {parts[0]}", 126

    def is_command_allowed(self, command: str) -> bool:
        try:
            self._check_injection(command)
            self._check_base_command(self._parse_command(command))
            return True
        except DisallowedCommandError:
            return False
