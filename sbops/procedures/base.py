"""Base procedure class and result schema."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..console import print_info, print_warn
from ..exceptions import CommandFailedError, PrerequisiteError
from ..executor import CommandExecutor, CommandResult, format_command, get_executor
from ..logging_config import get_logger
from ..venv import VirtualEnv


class ProcedureResult(BaseModel):
    """Outcome of a procedure that finished without a fatal error."""

    success: bool = Field(description="Whether the procedure completed")
    procedure: str = Field(description="Name of the procedure")
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Procedure-specific result data",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-fatal problems reported along the way",
    )


class BaseProcedure(ABC):
    """Base class for operator procedures.

    A procedure validates its environment, delegates to external commands and
    reports status. Fatal problems raise an ``OpsError`` subclass; everything
    else is collected as a warning.
    """

    # Override in subclass
    name: str = "base_procedure"
    description: str = "Base procedure"

    def __init__(
        self,
        settings: Settings | None = None,
        executor: CommandExecutor | None = None,
    ):
        self.settings = settings or get_settings()
        self.executor = executor or get_executor(self.settings.command_timeout)
        self.venv = VirtualEnv(self.settings.venv_dir)
        self.logger = get_logger(f"sbops.procedures.{self.name}")
        self.warnings: list[str] = []

    @abstractmethod
    async def run(self, **kwargs: Any) -> ProcedureResult:
        """
        Execute the procedure.

        Args:
            **kwargs: Procedure-specific parameters

        Returns:
            ProcedureResult with collected data and warnings
        """
        pass

    def info(self, message: str = "") -> None:
        print_info(message)
        if message:
            self.logger.info(message)

    def warn(self, message: str) -> None:
        """Report and remember a non-fatal problem."""
        print_warn(message)
        self.logger.warning(message)
        self.warnings.append(message)

    def fail(self, message: str) -> PrerequisiteError:
        """Build a prerequisite error; callers ``raise self.fail(...)``."""
        self.logger.error(message)
        return PrerequisiteError(message)

    def require_venv(self) -> dict[str, str]:
        """Return the activated environment, raising if the venv is absent."""
        if not self.venv.exists:
            raise self.fail(f"Virtual environment not found at {self.venv.path}")
        return self.venv.activated_env()

    def require_tool(self, tool: str, message: str, env: dict[str, str] | None = None) -> str:
        path = self.executor.which(tool, env)
        if not path:
            raise self.fail(message)
        return path

    async def delegate(
        self,
        command: list[str],
        error: str,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """Run a long external command on the terminal; nonzero exit is fatal."""
        result = await self.executor.run(command, cwd=cwd, env=env, stream=True)
        if not result.success:
            self.logger.error(f"{format_command(command)} exited {result.return_code}: {result.stderr}")
            raise CommandFailedError(error, command=command, return_code=result.return_code)
        return result

    def _success(self, data: dict[str, Any] | None = None) -> ProcedureResult:
        """Create a successful result."""
        return ProcedureResult(
            success=True,
            procedure=self.name,
            data=data or {},
            warnings=list(self.warnings),
        )
