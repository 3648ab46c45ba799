"""
Shared pytest fixtures for sbops tests.

Procedures are exercised against a throwaway project tree and a recording
executor, so no test ever starts pip, make, sudo or the SuperBench CLI.
"""
import os
import sys
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

# Ensure project root is in path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sbops.config import Settings, get_settings
from tests.fixtures.recording_executor import RecordingExecutor


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project(temp_dir: Path) -> Path:
    """A SuperBench checkout without a virtual environment."""
    root = temp_dir / "superbench"
    root.mkdir()
    (root / "requirements.txt").write_text("pyyaml\n")
    return root


@pytest.fixture
def venv_project(project: Path) -> Path:
    """A SuperBench checkout with an activatable virtual environment."""
    bin_dir = project / "venv" / "bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "activate").write_text("# activate\n")
    (bin_dir / "python").write_text("")
    return project


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def settings(project: Path, temp_dir: Path) -> Settings:
    """Settings rooted at the temporary project."""
    return Settings(project_root=project, install_prefix=temp_dir / "usr_local")


@pytest.fixture
def env_settings(venv_project: Path, temp_dir: Path) -> Generator[Settings, None, None]:
    """
    Settings resolved through the environment, as the CLI sees them.

    Clears the get_settings cache before and after so other tests are not
    affected.
    """
    overrides = {
        "SBOPS_PROJECT_ROOT": str(venv_project),
        "SBOPS_INSTALL_PREFIX": str(temp_dir / "usr_local"),
    }
    with patch.dict(os.environ, overrides):
        get_settings.cache_clear()
        yield get_settings()
    get_settings.cache_clear()


# =============================================================================
# Executor Fixtures
# =============================================================================

@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def cli_executor(executor: RecordingExecutor) -> Generator[RecordingExecutor, None, None]:
    """Route the CLI's executor lookups to the recording executor."""
    with patch("sbops.cli.get_executor", return_value=executor):
        yield executor


# =============================================================================
# Sample Files
# =============================================================================

@pytest.fixture
def local_inventory(temp_dir: Path) -> Path:
    path = temp_dir / "local.ini"
    path.write_text("[all]\nlocalhost ansible_connection=local\n")
    return path


@pytest.fixture
def remote_inventory(temp_dir: Path) -> Path:
    path = temp_dir / "host.ini"
    path.write_text(
        "[all]\n"
        "node-0 ansible_host=10.0.0.10 ansible_user=sb\n"
        "node-1 ansible_host=10.0.0.11 ansible_user=sb\n"
    )
    return path


@pytest.fixture
def benchmark_config(temp_dir: Path) -> Path:
    path = temp_dir / "resnet.yaml"
    path.write_text("version: v0.12\nsuperbench:\n  enable: null\n")
    return path
