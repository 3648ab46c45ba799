"""System information collection through the SuperBench CLI."""

from pathlib import Path

from ..inventory import is_local_inventory
from .base import BaseProcedure, ProcedureResult

DEFAULT_OUTPUT_DIR = Path("./sysinfo")
DEFAULT_INVENTORY = Path("host.ini")


class SysInfoProcedure(BaseProcedure):
    """Collect system information from the local node or the inventory's nodes."""

    name = "sysinfo"
    description = "Collect system information for benchmark configuration"

    async def run(
        self,
        output_dir: Path = DEFAULT_OUTPUT_DIR,
        inventory: Path = DEFAULT_INVENTORY,
    ) -> ProcedureResult:
        env = self.require_venv()
        sb = self.settings.sb_command

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise self.fail(f"Failed to create output directory: {output_dir} ({e})") from e

        if is_local_inventory(inventory):
            self.info("Collecting system information from local node")
            await self.delegate(
                [sb, "node", "info", "--output-dir", str(output_dir)],
                "Failed to collect local system information",
                env=env,
            )
            location = str(output_dir / "sys-info.json")
            mode = "local"
        else:
            if not inventory.is_file():
                raise self.fail(f"Inventory file not found: {inventory}")

            self.info(f"Collecting system information from remote nodes using inventory: {inventory}")
            await self.delegate(
                [
                    sb, "run", "--get-info",
                    "-f", str(inventory),
                    "--output-dir", str(output_dir),
                    "-C", "superbench.enable=none",
                ],
                "Failed to collect system information from remote nodes",
                env=env,
            )
            location = f"{output_dir / 'nodes'}/"
            mode = "remote"

        self.info(f"System information collected in: {location}")
        return self._success({"mode": mode, "location": location})
