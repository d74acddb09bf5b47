"""Tests for the path validator and the command runner."""

import pytest

from friday_assistant.exceptions import DisallowedCommandError, PathTraversalError, ToolTimeoutError
from friday_assistant.tools.security import PathValidator, SecureCommandRunner


class TestPathValidator:

    def test_allows_paths_inside_root(self, tmp_path):
        validator = PathValidator([str(tmp_path)])
        assert validator.validate(str(tmp_path / "a" / "b.txt")) == (tmp_path / "a" / "b.txt").resolve()
        assert validator.validate(str(tmp_path)) == tmp_path.resolve()

    def test_blocks_traversal(self, tmp_path):
        validator = PathValidator([str(tmp_path / "root")])
        with pytest.raises(PathTraversalError):
            validator.validate(str(tmp_path / "root" / ".." / "secret"))

    def test_blocks_sibling_with_common_prefix(self, tmp_path):
        validator = PathValidator([str(tmp_path / "data")])
        assert not validator.is_valid(str(tmp_path / "data-backup" / "x"))

    def test_multiple_roots(self, tmp_path):
        validator = PathValidator([str(tmp_path / "one")])
        validator.add_allowed_root(str(tmp_path / "two"))
        assert validator.is_valid(str(tmp_path / "two" / "file"))

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert PathValidator().is_valid("notes.txt")


class TestSecureCommandRunner:

    def test_runs_allowed_command(self):
        stdout, stderr, code = SecureCommandRunner().execute("echo hi")
        assert (stdout.strip(), code) == ("hi", 0)

    @pytest.mark.parametrize("command", [
        "echo a && echo b",
        "echo $(whoami)",
        "echo `id`",
        "ls > out.txt",
        "ls || true",
    ])
    def test_rejects_shell_operators(self, command):
        with pytest.raises(DisallowedCommandError):
            SecureCommandRunner().execute(command)

    @pytest.mark.parametrize("command", ["rm -rf /", "/bin/rm x", "sudo ls", "shutdown now", "dd if=/dev/zero"])
    def test_rejects_blocked_commands(self, command):
        assert not SecureCommandRunner().is_command_allowed(command)

    def test_empty_command(self):
        with pytest.raises(DisallowedCommandError):
            SecureCommandRunner().execute("   ")

    def test_allow_delete(self):
        runner = SecureCommandRunner(allow_delete=True)
        assert runner.is_command_allowed("rm notes.txt")
        assert not runner.is_command_allowed("sudo rm notes.txt")

    def test_additional_lists(self):
        runner = SecureCommandRunner(additional_blocked={"curl"}, additional_allowed={"chmod"})
        assert not runner.is_command_allowed("curl example.com")
        assert runner.is_command_allowed("chmod 600 key")

    def test_unknown_command(self):
        stdout, stderr, code = SecureCommandRunner().execute("definitely-not-a-command-xyz")
        assert code == 127
        assert "Command not found" in stderr

    def test_timeout_kills_command(self):
        with pytest.raises(ToolTimeoutError) as exc_info:
            SecureCommandRunner(timeout=0.3).execute("sleep 5")
        assert exc_info.value.timeout == 0.3

    def test_runs_in_configured_directory(self, tmp_path):
        (tmp_path / "marker.txt").write_text("")
        stdout, _, _ = SecureCommandRunner(cwd=str(tmp_path)).execute("ls")
        assert "marker.txt" in stdout
