"""Micro-benchmark binary build via the third-party Makefile."""

import os
import re
from pathlib import Path
from typing import Any

from ..console import print_check, print_section
from ..exceptions import CommandFailedError
from .base import BaseProcedure, ProcedureResult

# Fixed set; the targets currently do not vary with the detected CUDA version.
BUILD_TARGETS = ["common", "cuda_cutlass", "cuda_bandwidthTest", "cuda_nccl_tests"]

EXPECTED_BINARIES = [
    "cutlass_profiler",
    "bandwidthTest",
    "all_gather_perf_mpi",
    "all_reduce_perf_mpi",
]

_CUDA_RELEASE_RE = re.compile(r"release\s+(\d+\.\d+)")


def available_cpus() -> int | None:
    """CPUs this process may run on, as counted by ``nproc``."""
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0))
    return os.cpu_count()


def parallel_jobs(cpu_count: int | None, reserved: int = 2) -> int:
    """Processor count minus a reserved margin, never below one (as ``nproc --ignore``)."""
    return max(1, (cpu_count or 1) - reserved)


def parse_cuda_version(nvcc_output: str) -> str | None:
    match = _CUDA_RELEASE_RE.search(nvcc_output or "")
    return match.group(1) if match else None


class BuildProcedure(BaseProcedure):
    """Build and install the native micro-benchmarks."""

    name = "build"
    description = "Build SuperBench micro-benchmark binaries"

    async def run(self, **kwargs: Any) -> ProcedureResult:
        root = self.settings.project_root
        third_party = self.settings.third_party_dir

        print_section("SuperBench Micro-benchmark Build")
        self.info(f"Project root: {root}")
        self.info(f"Third-party source dir: {third_party}")

        if not third_party.is_dir():
            raise self.fail(f"Third-party directory not found: {third_party}")

        cuda_version = await self._check_toolchain()

        print_section("Determining Build Targets")
        targets = list(BUILD_TARGETS)
        self.info(f"Build targets for CUDA {cuda_version}: {' '.join(targets)}")

        jobs = parallel_jobs(available_cpus(), self.settings.reserved_cpus)
        self.info(f"Using {jobs} parallel jobs for build")

        print_section("Building Micro-benchmarks")
        self.info("This may take 30-60 minutes. Progress will be shown below...")
        self.info()

        await self.delegate(
            ["make", *targets, f"-j{jobs}"],
            "Build failed. Please check the error messages above.",
            cwd=third_party,
        )
        privileged = await self._install(targets, jobs, third_party)
        print_section("Build Completed Successfully")

        found = self._verify_binaries()
        self._print_summary()

        return self._success({
            "cuda_version": cuda_version,
            "targets": targets,
            "jobs": jobs,
            "privileged_install": privileged,
            "binaries_found": [str(p) for p in found],
            "binaries_expected": len(EXPECTED_BINARIES),
        })

    async def _check_toolchain(self) -> str:
        self.info("Checking CUDA installation...")
        self.require_tool("nvcc", "CUDA compiler (nvcc) not found. Please install CUDA toolkit.")
        result = await self.executor.run(["nvcc", "--version"])
        cuda_version = parse_cuda_version(result.output) or "unknown"
        self.info(f"CUDA version detected: {cuda_version}")

        self.info("Checking git installation...")
        self.require_tool("git", "git not found. Please install git.")

        self.info("Checking cmake installation...")
        self.require_tool("cmake", "cmake not found. Please install cmake.")
        return cuda_version

    async def _install(self, targets: list[str], jobs: int, cwd: Path) -> bool:
        """Install as the current user, falling back to sudo. Returns True if sudo was needed."""
        command = ["make", *targets, "install", f"-j{jobs}"]
        result = await self.executor.run(command, cwd=cwd, stream=True)
        if result.success:
            return False

        self.logger.info(f"Unprivileged install exited {result.return_code}, retrying with sudo")
        self.info("Installation as current user failed, retrying with sudo...")
        result = await self.executor.run(["sudo", *command], cwd=cwd, stream=True)
        if not result.success:
            raise CommandFailedError(
                "Installation step failed with sudo. Check permissions.",
                command=["sudo", *command],
                return_code=result.return_code,
            )
        return True

    def _verify_binaries(self) -> list[Path]:
        self.info("Verifying built binaries...")
        bin_dir = self.settings.install_prefix / "bin"
        found = []
        for name in EXPECTED_BINARIES:
            path = bin_dir / name
            if path.is_file():
                found.append(path)
                print_check(True, str(path))
            else:
                print_check(False, str(path))
                self.warnings.append(f"Not found: {path}")
        self.info()
        self.info(f"Built {len(found)}/{len(EXPECTED_BINARIES)} expected binaries")
        return found

    def _print_summary(self) -> None:
        prefix = self.settings.install_prefix
        inventory = self.settings.local_inventory_path.relative_to(self.settings.project_root)
        print_section("Build Summary")
        self.info(f"Binaries installed to: {prefix / 'bin'}/")
        self.info(f"Libraries installed to: {prefix / 'lib'}/")
        self.info()
        self.info("You can now run SuperBench benchmarks with:")
        self.info(f"  cd {self.settings.project_root}")
        self.info(f"  source {self.venv.activate_script}")
        self.info(f"  sbops run -f {inventory} --skip-deploy")
        self.info()
