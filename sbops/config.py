"""Configuration management for SuperBench operator tooling."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SBOPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Project layout
    project_root: Path = Field(default_factory=Path.cwd)
    venv_name: str = "venv"

    # Interpreter requirements
    python_command: str = "python3"
    min_python_version: str = "3.7"
    min_pip_version: str = "18.0"

    # SuperBench CLI
    sb_command: str = "sb"

    # Native build
    install_prefix: Path = Path("/usr/local")
    reserved_cpus: int = 2

    # Delegated commands block until they return unless a timeout is set
    command_timeout: int | None = None

    # Logging
    debug: bool = False
    log_to_file: bool = False
    log_dir: Path = Path("logs")

    @property
    def venv_dir(self) -> Path:
        """Isolated dependency environment directory."""
        return self.project_root / self.venv_name

    @property
    def third_party_dir(self) -> Path:
        """Makefile-driven third-party source tree."""
        return self.project_root / "third_party"

    @property
    def misc_dir(self) -> Path:
        """Directory holding the convenience inventory and sample config."""
        return self.project_root / "scripts" / "misc"

    @property
    def local_inventory_path(self) -> Path:
        return self.misc_dir / "local.ini"

    @property
    def sample_config_path(self) -> Path:
        return self.misc_dir / "resnet.yaml"

    @property
    def default_config_path(self) -> Path:
        """Default benchmark config shipped with SuperBench."""
        return self.project_root / "superbench" / "config" / "default.yaml"

    @property
    def requirements_path(self) -> Path:
        return self.project_root / "requirements.txt"

    @property
    def python_version_tuple(self) -> tuple[int, ...]:
        """Parse min_python_version into a comparable tuple."""
        return tuple(int(p) for p in self.min_python_version.split("."))

    @property
    def pip_version_tuple(self) -> tuple[int, ...]:
        """Parse min_pip_version into a comparable tuple."""
        return tuple(int(p) for p in self.min_pip_version.split("."))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
