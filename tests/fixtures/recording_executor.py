"""
Recording stand-in for CommandExecutor.

Records every delegated command and answers with canned results, so tests
can assert on exactly what would have been run.
"""
from typing import Callable

from sbops.executor import CommandExecutor, CommandResult

DEFAULT_TOOLS = {"python3", "sb", "make", "sudo", "nvcc", "git", "cmake"}

Matcher = Callable[[list[str]], bool]


def starts_with(*prefix: str) -> Matcher:
    """Match commands whose argv begins with prefix."""
    return lambda cmd: cmd[: len(prefix)] == list(prefix)


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", return_code=0)


class RecordingExecutor(CommandExecutor):
    """CommandExecutor double that records calls and returns canned results."""

    def __init__(self, tools: set[str] | None = None):
        super().__init__(timeout=None)
        self.tools = set(DEFAULT_TOOLS if tools is None else tools)
        self.calls: list[dict] = []
        self._responses: list[tuple[Matcher, CommandResult]] = []

    def respond(self, match: Matcher, result: CommandResult, first: bool = False) -> None:
        """Register a result for matching commands; earlier registrations win."""
        if first:
            self._responses.insert(0, (match, result))
        else:
            self._responses.append((match, result))

    def fail(self, match: Matcher, return_code: int = 1, stderr: str = "", first: bool = False) -> None:
        self.respond(match, CommandResult(stdout="", stderr=stderr, return_code=return_code), first=first)

    async def run(self, command, cwd=None, env=None, timeout=None, stream=False):
        self.calls.append({"command": list(command), "cwd": cwd, "env": env, "stream": stream})
        for match, result in self._responses:
            if match(list(command)):
                return result
        return ok()

    def which(self, name, env=None):
        return f"/usr/bin/{name}" if name in self.tools else None

    @property
    def commands(self) -> list[list[str]]:
        return [call["command"] for call in self.calls]

    def called(self, *prefix: str) -> bool:
        return any(cmd[: len(prefix)] == list(prefix) for cmd in self.commands)
