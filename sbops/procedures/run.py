"""Deploy-then-run orchestration through the SuperBench CLI."""

from pathlib import Path

from ..inventory import parse_inventory
from .base import BaseProcedure, ProcedureResult

DEFAULT_INVENTORY = Path("./scripts/misc/local.ini")
DEFAULT_CONFIG = Path("./scripts/misc/resnet.yaml")
DEFAULT_OUTPUT_DIR = Path("./results")

# Benchmarks in the default configs import these; a missing one only warns.
REQUIRED_PACKAGES = ["torch", "tensorflow", "onnx", "transformers"]


def has_json_results(output_dir: Path) -> bool:
    """True if any ``*.json`` file exists anywhere under output_dir."""
    if not output_dir.is_dir():
        return False
    return any(p.is_file() for p in output_dir.rglob("*.json"))


class RunProcedure(BaseProcedure):
    """Deploy SuperBench to the inventory's nodes and run the benchmarks."""

    name = "run"
    description = "Run SuperBench benchmarks"

    async def run(
        self,
        inventory: Path = DEFAULT_INVENTORY,
        config: Path = DEFAULT_CONFIG,
        output_dir: Path = DEFAULT_OUTPUT_DIR,
        image: str | None = None,
        skip_deploy: bool = False,
    ) -> ProcedureResult:
        env = self.require_venv()

        if not inventory.is_file():
            raise self.fail(f"Inventory file not found: {inventory}")
        if not config.is_file():
            raise self.fail(f"Config file not found: {config}")

        hosts = parse_inventory(inventory)
        self.info("SuperBench Run")
        self.info(f"Inventory: {inventory} ({len(hosts)} host(s))")
        self.info(f"Config: {config}")
        self.info(f"Output directory: {output_dir}")
        if skip_deploy:
            self.info("Deploy: SKIPPED (--skip-deploy)")
        self.info()

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise self.fail(f"Failed to create output directory: {output_dir} ({e})") from e

        sb = self.settings.sb_command
        self.require_tool(sb, f"SuperBench CLI ({sb}) not found. Is the virtual environment activated?", env)

        missing = await self.check_packages(env)

        if not skip_deploy:
            self.info("Step 1: Deploying SuperBench environment...")
            deploy = [sb, "deploy", "-f", str(inventory)]
            if image:
                self.info(f"Using Docker image: {image}")
                deploy += ["-i", image]
            await self.delegate(deploy, "Deployment failed. Check the output above for details.", env=env)
            self.info("Deployment completed")
            self.info()
        else:
            self.warn("Skipping deployment step (using --no-docker)")
            self.info()

        self.info("Step 2: Running benchmarks...")
        command = [sb, "run", "-f", str(inventory), "-c", str(config), "--output-dir", str(output_dir)]
        if skip_deploy:
            command.append("--no-docker")
        await self.delegate(command, "Benchmark run failed. Check the output above for details.", env=env)

        results_found = has_json_results(output_dir)
        if not results_found:
            self.warn(f"No benchmark results found in {output_dir}")

        self.info("Benchmarks completed")
        self.info()
        self.info("Run completed successfully!")
        self.info(f"Results available in: {output_dir}")

        return self._success({
            "hosts": [h.name for h in hosts],
            "deployed": not skip_deploy,
            "image": image,
            "missing_packages": missing,
            "results_found": results_found,
            "output_dir": str(output_dir),
        })

    async def check_packages(self, env: dict[str, str]) -> list[str]:
        """Return packages the environment's interpreter cannot import."""
        self.info("Checking for required dependencies...")
        python = str(self.venv.python) if self.venv.python.exists() else self.settings.python_command
        missing = []
        for package in REQUIRED_PACKAGES:
            result = await self.executor.run([python, "-c", f"import {package}"], env=env)
            if not result.success:
                missing.append(package)

        if missing:
            names = " ".join(missing)
            self.warn(f"Missing Python packages: {names}")
            self.info(f"Some benchmarks may fail. Consider installing: pip install {names}")
        self.info()
        return missing
