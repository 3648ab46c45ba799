"""Tests for external command execution."""

import os

import pytest

from sbops.executor import CommandExecutor, CommandResult, format_command, get_executor


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success_requires_zero_exit(self):
        assert CommandResult(stdout="", stderr="", return_code=0).success
        assert not CommandResult(stdout="", stderr="", return_code=2).success

    def test_timed_out_is_never_success(self):
        result = CommandResult(stdout="", stderr="", return_code=0, timed_out=True)
        assert not result.success

    def test_output_prefers_stdout(self):
        assert CommandResult(stdout="out", stderr="err", return_code=0).output == "out"
        assert CommandResult(stdout="", stderr="err", return_code=0).output == "err"


class TestCommandExecutor:
    """Tests for CommandExecutor against real processes."""

    @pytest.mark.asyncio
    async def test_run_simple_command(self):
        """Should capture stdout of a successful command."""
        executor = CommandExecutor()
        result = await executor.run(["echo", "hello"])

        assert result.success
        assert result.stdout == "hello"

    @pytest.mark.asyncio
    async def test_run_failing_command(self):
        """Should report the child's exit code."""
        executor = CommandExecutor()
        result = await executor.run(["sh", "-c", "exit 3"])

        assert not result.success
        assert result.return_code == 3

    @pytest.mark.asyncio
    async def test_run_with_timeout(self):
        """Should kill the child and flag the timeout."""
        executor = CommandExecutor()
        result = await executor.run(["sleep", "10"], timeout=1)

        assert result.timed_out
        assert not result.success

    @pytest.mark.asyncio
    async def test_missing_executable_is_a_failed_result(self):
        """A command that cannot start should not raise."""
        executor = CommandExecutor()
        result = await executor.run(["definitely-not-a-real-tool-sbops"])

        assert result.return_code == -1
        assert not result.success
        assert result.stderr

    @pytest.mark.asyncio
    async def test_run_in_cwd_with_env(self, temp_dir):
        executor = CommandExecutor()
        env = dict(os.environ, SBOPS_TEST_VALUE="42")
        result = await executor.run(["sh", "-c", "pwd; echo $SBOPS_TEST_VALUE"], cwd=temp_dir, env=env)

        lines = result.stdout.splitlines()
        assert os.path.realpath(lines[0]) == os.path.realpath(temp_dir)
        assert lines[1] == "42"

    @pytest.mark.asyncio
    async def test_stream_does_not_capture(self):
        executor = CommandExecutor()
        result = await executor.run(["true"], stream=True)

        assert result.success
        assert result.stdout == ""

    def test_which_uses_given_path(self, temp_dir):
        tool = temp_dir / "mytool"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        executor = CommandExecutor()
        assert executor.which("mytool", {"PATH": str(temp_dir)}) == str(tool)
        assert executor.which("mytool", {"PATH": "/nonexistent"}) is None


def test_format_command_quotes_arguments():
    assert format_command(["sb", "run", "-c", "my config.yaml"]) == "sb run -c 'my config.yaml'"


def test_get_executor_is_cached():
    assert get_executor() is get_executor()
