"""
Tests for Settings, binary validation and log directory lookup.
"""

import json
from unittest.mock import MagicMock, patch

from tofuwrap.config import DEFAULT_SETTINGS, Settings
from tofuwrap.utils.logger import get_log_dir
from tofuwrap.utils.validators import validate_tofu_installed


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:
    def test_defaults_without_file(self, tmp_path):
        settings = Settings(config_dir=tmp_path)
        assert settings.get("tofu_path") == "tofu"
        assert settings.get("working_directory") == "."
        assert settings.get("auto_approve") is False
        assert settings.get("variables") == {}

    def test_loaded_file_merges_over_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({
            "tofu_path": "/opt/tofu/bin/tofu",
            "variables": {"owner": "platform"},
        }))
        settings = Settings(config_dir=tmp_path)
        assert settings.get("tofu_path") == "/opt/tofu/bin/tofu"
        assert settings.get("variables.owner") == "platform"
        assert settings.get("log_level") == "INFO"

    def test_invalid_json_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text("{not json")
        settings = Settings(config_dir=tmp_path)
        assert settings.get("tofu_path") == "tofu"

    def test_non_object_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text("[1, 2]")
        assert Settings(config_dir=tmp_path).get("tofu_path") == "tofu"

    def test_defaults_are_not_shared(self, tmp_path):
        settings = Settings(config_dir=tmp_path)
        settings.set("variables.region", "us-east-1")
        assert DEFAULT_SETTINGS["variables"] == {}

    def test_get_missing_key(self, tmp_path):
        settings = Settings(config_dir=tmp_path)
        assert settings.get("nope.nested", "fallback") == "fallback"

    def test_set_and_save(self, tmp_path):
        config_dir = tmp_path / "tofuwrap"
        settings = Settings(config_dir=config_dir)
        settings.set("timeout", 600)
        settings.save()

        reloaded = Settings(config_dir=config_dir)
        assert reloaded.get("timeout") == 600

    def test_default_config_dir_uses_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setattr("tofuwrap.config.settings.os.name", "posix")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert Settings._get_config_dir() == tmp_path / "tofuwrap"


# ---------------------------------------------------------------------------
# validate_tofu_installed
# ---------------------------------------------------------------------------

class TestValidateTofuInstalled:
    @patch("tofuwrap.utils.validators.shutil.which", return_value=None)
    def test_not_on_path(self, mock_which):
        assert validate_tofu_installed("tofu") == (False, None)

    @patch("tofuwrap.utils.validators.subprocess.run")
    @patch("tofuwrap.utils.validators.shutil.which", return_value="/usr/bin/tofu")
    def test_returns_version_line(self, mock_which, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="OpenTofu v1.8.3\non linux_amd64\n")
        assert validate_tofu_installed("tofu") == (True, "OpenTofu v1.8.3")
        assert mock_run.call_args[0][0] == ["tofu", "version"]

    @patch("tofuwrap.utils.validators.subprocess.run")
    @patch("tofuwrap.utils.validators.shutil.which", return_value="/usr/bin/tofu")
    def test_version_failure(self, mock_which, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="")
        assert validate_tofu_installed("tofu") == (False, None)

    @patch("tofuwrap.utils.validators.subprocess.run", side_effect=OSError("exec format error"))
    @patch("tofuwrap.utils.validators.shutil.which", return_value="/usr/bin/tofu")
    def test_os_error(self, mock_which, mock_run):
        assert validate_tofu_installed("tofu") == (False, None)


class TestLogDir:
    def test_log_dir_uses_xdg_cache(self, tmp_path, monkeypatch):
        monkeypatch.setattr("tofuwrap.utils.logger.os.name", "posix")
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
        assert get_log_dir() == tmp_path / "tofuwrap" / "logs"
