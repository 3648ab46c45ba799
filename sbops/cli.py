"""CLI interface for SuperBench operator tooling."""

import asyncio
import traceback
from pathlib import Path
from typing import Optional

import click
import typer

from .config import get_settings
from .console import print_error
from .exceptions import OpsError
from .executor import get_executor
from .logging_config import get_logger, setup_logging
from .procedures import (
    BaseProcedure,
    BuildProcedure,
    InstallProcedure,
    ProcedureResult,
    RunProcedure,
    SysInfoProcedure,
)
from .procedures import run as run_defaults
from .procedures import sysinfo as sysinfo_defaults

logger = get_logger("sbops.cli")

app = typer.Typer(
    name="sbops",
    help="SuperBench operator tooling: install, build, collect system info and run benchmarks.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

RUN_EPILOG = (
    "Examples: 'sbops run' uses the defaults; "
    "'sbops run -i superbench/superbench:v0.12.0-cuda13.0' deploys a custom Docker image; "
    "'sbops run --skip-deploy' runs locally without Docker."
)


def _build(procedure_cls: type[BaseProcedure]) -> BaseProcedure:
    settings = get_settings()
    return procedure_cls(settings=settings, executor=get_executor(settings.command_timeout))


def _execute(procedure: BaseProcedure, **kwargs) -> ProcedureResult:
    """Run a procedure to completion; operator errors become exit code 1."""
    try:
        result = asyncio.run(procedure.run(**kwargs))
    except OpsError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    logger.debug(f"{procedure.name} finished with {len(result.warnings)} warning(s)")
    return result


@app.callback()
def configure(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging on stderr."),
):
    """SuperBench operator tooling."""
    # Subcommand help is parsed after this callback and must not open log files.
    if ctx.resilient_parsing or any(arg in ctx.help_option_names for arg in ctx.args):
        return
    settings = get_settings()
    level = "DEBUG" if debug or settings.debug else "INFO"
    setup_logging(level=level, log_to_file=settings.log_to_file, log_dir=settings.log_dir)


@app.command()
def install():
    """Create the virtual environment and install SuperBench."""
    _execute(_build(InstallProcedure))


@app.command()
def build():
    """Build SuperBench micro-benchmark binaries (requires CUDA toolkit)."""
    _execute(_build(BuildProcedure))


@app.command()
def sysinfo(
    output_dir: Path = typer.Option(
        sysinfo_defaults.DEFAULT_OUTPUT_DIR,
        "-o",
        "--output-dir",
        help="Output directory.",
    ),
    inventory: Path = typer.Option(
        sysinfo_defaults.DEFAULT_INVENTORY,
        "-f",
        "--inventory",
        help="Ansible inventory file.",
    ),
):
    """Collect system information for benchmark configuration."""
    _execute(_build(SysInfoProcedure), output_dir=output_dir, inventory=inventory)


@app.command(epilog=RUN_EPILOG)
def run(
    inventory: Path = typer.Option(
        run_defaults.DEFAULT_INVENTORY,
        "-f",
        "--inventory",
        help="Ansible inventory file.",
    ),
    config: Path = typer.Option(
        run_defaults.DEFAULT_CONFIG,
        "-c",
        "--config",
        help="Benchmark config file.",
    ),
    output_dir: Path = typer.Option(
        run_defaults.DEFAULT_OUTPUT_DIR,
        "-o",
        "--output-dir",
        help="Output directory.",
    ),
    image: Optional[str] = typer.Option(
        None,
        "-i",
        "--image",
        help="Docker image to use (e.g., superbench/superbench:v0.12.0-cuda13.0).",
    ),
    skip_deploy: bool = typer.Option(
        False,
        "--skip-deploy",
        help="Skip deployment step (for local/no-docker runs).",
    ),
):
    """Run SuperBench benchmarks: deploy, then run."""
    try:
        _execute(
            _build(RunProcedure),
            inventory=inventory,
            config=config,
            output_dir=output_dir,
            image=image,
            skip_deploy=skip_deploy,
        )
    except (typer.Exit, KeyboardInterrupt):
        raise
    except Exception as e:
        # Anything unanticipated is fatal; report where it happened.
        frame = traceback.extract_tb(e.__traceback__)[-1]
        logger.exception(f"Unhandled error during run: {e}")
        print_error(f"Run failed at {Path(frame.filename).name}:{frame.lineno}: {e}")
        raise typer.Exit(code=1)


def main(argv: list[str] | None = None) -> int:
    """Entry point. Usage errors exit 1 with a single error line."""
    try:
        rv = app(args=argv, prog_name="sbops", standalone_mode=False)
    except click.UsageError as e:
        print_error(e.format_message())
        return 1
    except click.Abort:
        print_error("Aborted")
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
