"""Isolated dependency environment helpers."""

import os
from pathlib import Path


class VirtualEnv:
    """A virtual environment rooted at a fixed directory.

    Activation here means computing the environment a shell would have after
    sourcing ``bin/activate``; it is passed to child processes rather than
    applied to this process.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def exists(self) -> bool:
        return self.path.is_dir()

    @property
    def bin_dir(self) -> Path:
        return self.path / ("Scripts" if os.name == "nt" else "bin")

    @property
    def python(self) -> Path:
        return self.bin_dir / ("python.exe" if os.name == "nt" else "python")

    @property
    def activate_script(self) -> Path:
        return self.bin_dir / "activate"

    @property
    def is_activatable(self) -> bool:
        return self.activate_script.is_file()

    def activated_env(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """Return a copy of base (default os.environ) with this venv activated."""
        env = dict(os.environ if base is None else base)
        env["VIRTUAL_ENV"] = str(self.path)
        env["PATH"] = os.pathsep.join(
            p for p in (str(self.bin_dir), env.get("PATH", "")) if p
        )
        env.pop("PYTHONHOME", None)
        return env

    def __repr__(self) -> str:
        return f"VirtualEnv({str(self.path)!r})"
