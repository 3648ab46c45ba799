"""
Unit tests for sbops configuration.
"""
import os
from pathlib import Path
from unittest.mock import patch

from sbops.config import Settings, get_settings


class TestSettings:
    """Tests for the Settings class."""

    def test_default_settings(self):
        """Settings should match the shell tooling's defaults."""
        get_settings.cache_clear()
        settings = get_settings()

        assert settings.sb_command == "sb"
        assert settings.python_command == "python3"
        assert settings.reserved_cpus == 2
        assert settings.command_timeout is None

        get_settings.cache_clear()

    def test_derived_paths(self, temp_dir):
        settings = Settings(project_root=temp_dir)

        assert settings.venv_dir == temp_dir / "venv"
        assert settings.third_party_dir == temp_dir / "third_party"
        assert settings.local_inventory_path == temp_dir / "scripts" / "misc" / "local.ini"
        assert settings.sample_config_path == temp_dir / "scripts" / "misc" / "resnet.yaml"
        assert settings.default_config_path == temp_dir / "superbench" / "config" / "default.yaml"
        assert settings.requirements_path == temp_dir / "requirements.txt"

    def test_version_tuples(self):
        settings = Settings(min_python_version="3.7", min_pip_version="18.0")

        assert settings.python_version_tuple == (3, 7)
        assert settings.pip_version_tuple == (18, 0)

    def test_get_settings_cached(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()

        assert get_settings() is get_settings()

        get_settings.cache_clear()


class TestSettingsEnvironmentVariables:
    """Tests for settings loaded from environment variables."""

    def test_project_root_from_env(self, temp_dir):
        with patch.dict(os.environ, {"SBOPS_PROJECT_ROOT": str(temp_dir)}):
            get_settings.cache_clear()
            settings = get_settings()
            assert settings.project_root == Path(temp_dir)

        get_settings.cache_clear()

    def test_command_timeout_from_env(self):
        with patch.dict(os.environ, {"SBOPS_COMMAND_TIMEOUT": "3600"}):
            get_settings.cache_clear()
            assert get_settings().command_timeout == 3600

        get_settings.cache_clear()
