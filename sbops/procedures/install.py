"""Environment bootstrap: virtual environment, SuperBench install, convenience files."""

import os
import re
import shutil
from typing import Any

from ..inventory import write_local_inventory
from .base import BaseProcedure, ProcedureResult

_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


def parse_version(text: str) -> tuple[int, ...] | None:
    """Pull the first dotted version out of ``--version`` output."""
    match = _VERSION_RE.search(text or "")
    if not match:
        return None
    return tuple(int(part) for part in match.groups() if part is not None)


def version_string(version: tuple[int, ...] | None) -> str:
    return ".".join(str(p) for p in version) if version else "unknown"


class InstallProcedure(BaseProcedure):
    """Bootstrap the control node for SuperBench."""

    name = "install"
    description = "Create the virtual environment and install SuperBench"

    async def run(self, **kwargs: Any) -> ProcedureResult:
        root = self.settings.project_root
        python = self.settings.python_command

        self.info("SuperBench Installation")
        self.info(f"Project root: {root}")

        python_version = await self._check_python(python)
        pip_version = await self._check_pip(python)

        created_venv = await self._ensure_venv(python)
        env = self._activate()

        self.info("Updating pip, setuptools, and wheel...")
        await self.delegate(
            [python, "-m", "pip", "install", "--upgrade", "pip", "setuptools", "wheel"],
            "Failed to update pip, setuptools, and wheel",
            env=env,
        )

        if not self.settings.requirements_path.is_file():
            raise self.fail(f"Requirements file not found: {self.settings.requirements_path}")
        self.info("Installing dependencies from requirements.txt...")
        await self.delegate(
            [python, "-m", "pip", "install", "-r", str(self.settings.requirements_path)],
            "Failed to install dependencies from requirements.txt",
            env=env,
        )

        self.info("Installing SuperBench from source...")
        await self.delegate(
            [python, "-m", "pip", "install", "."],
            "Failed to install SuperBench",
            cwd=root,
            env=env,
        )

        self.info("Running postinstall steps...")
        await self.delegate(["make", "postinstall"], "Postinstall step failed", cwd=root, env=env)

        cli_ok = await self._verify_cli(env)
        inventory_created = self._write_inventory()
        config_created = self._write_sample_config()

        self._print_next_steps()

        return self._success({
            "python_version": version_string(python_version),
            "pip_version": version_string(pip_version),
            "venv": str(self.venv.path),
            "venv_created": created_venv,
            "cli_available": cli_ok,
            "inventory_created": inventory_created,
            "sample_config_created": config_created,
        })

    async def _check_python(self, python: str) -> tuple[int, ...]:
        self.info("Checking Python version...")
        result = await self.executor.run([python, "--version"])
        version = parse_version(result.output) if result.success else None
        self.info(f"Python version: {version_string(version)}")

        minimum = self.settings.python_version_tuple
        if version is None or version < minimum:
            raise self.fail(f"Python {self.settings.min_python_version} or later is required")
        return version

    async def _check_pip(self, python: str) -> tuple[int, ...] | None:
        self.info("Checking pip version...")
        result = await self.executor.run([python, "-m", "pip", "--version"])
        version = parse_version(result.output) if result.success else None
        self.info(f"Pip version: {version_string(version)}")

        if version is None or version < self.settings.pip_version_tuple:
            self.warn(f"Pip version {self.settings.min_pip_version} or later is recommended")
        return version

    async def _ensure_venv(self, python: str) -> bool:
        if self.venv.exists:
            self.logger.info(f"Reusing virtual environment at {self.venv.path}")
            return False

        self.info("Creating virtual environment...")
        await self.delegate(
            [python, "-m", "venv", str(self.venv.path)],
            f"Failed to create virtual environment at {self.venv.path}",
        )
        self.info(f"Virtual environment created at: {self.venv.path}")
        self.info(f"To activate it, run: source {self.venv.activate_script}")
        return True

    def _activate(self) -> dict[str, str]:
        if not self.venv.is_activatable:
            self.warn(f"Activation script not found in {self.venv.bin_dir}, using the base interpreter")
            return dict(os.environ)
        self.info("Activating virtual environment...")
        return self.venv.activated_env()

    async def _verify_cli(self, env: dict[str, str]) -> bool:
        self.info("Verifying SuperBench installation...")
        sb = self.settings.sb_command
        if self.executor.which(sb, env):
            result = await self.executor.run([sb, "--version"], env=env)
            if result.success:
                if result.output:
                    self.info(result.output)
                self.info("SuperBench CLI verification successful")
                return True
        self.warn("SuperBench CLI not found in PATH, you may need to activate the virtual environment")
        return False

    def _write_inventory(self) -> bool:
        path = self.settings.local_inventory_path
        self.settings.misc_dir.mkdir(parents=True, exist_ok=True)
        if write_local_inventory(path):
            self.info(f"Created: {path}")
            return True
        self.info(f"Local inventory file already exists: {path}")
        return False

    def _write_sample_config(self) -> bool:
        target = self.settings.sample_config_path
        if target.exists():
            self.info(f"Sample config already exists: {target}")
            return False

        source = self.settings.default_config_path
        if not source.is_file():
            self.warn("Default config file not found, skipping sample config creation")
            return False

        self.info("Creating sample benchmark configuration...")
        shutil.copyfile(source, target)
        self.info(f"Created sample config: {target}")
        return True

    def _print_next_steps(self) -> None:
        activate = self.venv.activate_script
        inventory = self.settings.local_inventory_path.relative_to(self.settings.project_root)
        steps = [
            "",
            "SuperBench installation complete!",
            "",
            "Next steps:",
            "1. To activate the virtual environment, run:",
            f"   source {activate}",
            "",
            "2. (Optional) To build micro-benchmark binaries, run:",
            "   sbops build",
            "   This builds CUDA binaries for cutlass_profiler, bandwidthTest, etc.",
            "   Requires CUDA toolkit and cmake. Takes 30-60 minutes.",
            "",
            "3. To verify the installation, run:",
            f"   {self.settings.sb_command} --help",
            "",
            "4. To deploy SuperBench to managed nodes, run:",
            f"   {self.settings.sb_command} deploy -f ./{inventory}",
            "",
            "5. To run benchmarks, run:",
            "   sbops run",
            "",
        ]
        for line in steps:
            self.info(line)
