"""External command execution."""

import asyncio
import os
import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path

from .logging_config import get_logger

logger = get_logger("sbops.executor")


@dataclass
class CommandResult:
    """Result of executing an external command."""

    stdout: str
    stderr: str
    return_code: int
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.return_code == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Get combined output, preferring stdout."""
        return self.stdout if self.stdout else self.stderr


def format_command(command: list[str]) -> str:
    """Render an argv list as a copy-pasteable shell line."""
    return " ".join(shlex.quote(part) for part in command)


class CommandExecutor:
    """Execute external commands asynchronously with optional timeout."""

    def __init__(self, timeout: int | None = None):
        """Initialize executor with default timeout (None blocks until exit)."""
        self.timeout = timeout

    async def run(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        stream: bool = False,
    ) -> CommandResult:
        """
        Execute a command.

        Args:
            command: argv list; the first element is resolved on the PATH of env
            cwd: Working directory for the child
            env: Full environment for the child (defaults to os.environ)
            timeout: Override default timeout (seconds)
            stream: Let the child write straight to the terminal instead of
                capturing its output

        Returns:
            CommandResult with stdout, stderr, return code
        """
        timeout = timeout if timeout is not None else self.timeout
        pipe = None if stream else asyncio.subprocess.PIPE
        logger.debug(f"Exec: {format_command(command)} (cwd={cwd})")

        program = self.which(command[0], env) or command[0]

        try:
            process = await asyncio.create_subprocess_exec(
                program,
                *command[1:],
                cwd=str(cwd) if cwd else None,
                env=env,
                stdout=pipe,
                stderr=pipe,
            )
        except OSError as e:
            logger.warning(f"Failed to start {command[0]}: {e}")
            return CommandResult(stdout="", stderr=str(e), return_code=-1)

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.warning(f"Command timed out after {timeout} seconds: {format_command(command)}")
            return CommandResult(
                stdout="",
                stderr=f"Command timed out after {timeout} seconds",
                return_code=-1,
                timed_out=True,
            )

        result = CommandResult(
            stdout=(stdout or b"").decode("utf-8", errors="replace").strip(),
            stderr=(stderr or b"").decode("utf-8", errors="replace").strip(),
            return_code=process.returncode if process.returncode is not None else -1,
        )
        logger.debug(f"Exit {result.return_code}: {command[0]}")
        return result

    def which(self, name: str, env: dict[str, str] | None = None) -> str | None:
        """Locate an executable on the PATH of the given environment."""
        path = (env or os.environ).get("PATH")
        return shutil.which(name, path=path)


# Global executor instance
_executor: CommandExecutor | None = None


def get_executor(timeout: int | None = None) -> CommandExecutor:
    """Get or create global command executor."""
    global _executor
    if _executor is None:
        _executor = CommandExecutor(timeout=timeout)
    return _executor
