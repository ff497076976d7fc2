"""Settings resolution: defaults, YAML file, environment, explicit overrides."""

from unittest.mock import patch

import pytest

from txnadmin.config import load_settings

_CLEAN_ENV = {
    "TXNADMIN_CONFIG": "",
    "TXNADMIN_WEB_SERVICE_URL": "",
    "TXNADMIN_AUTH_TOKEN": "",
    "TXNADMIN_TIMEOUT": "",
    "TXNADMIN_LOG_LEVEL": "",
}


@pytest.fixture(autouse=True)
def isolated_env(tmp_path):
    with patch.dict("os.environ", _CLEAN_ENV, clear=False), patch(
        "txnadmin.config.DEFAULT_CONFIG_FILE", tmp_path / "absent.yaml"
    ):
        yield


class TestSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.web_service_url == "http://localhost:8080"
        assert settings.auth_token is None
        assert settings.timeout_seconds == 30.0
        assert settings.log_level == "WARNING"

    def test_yaml_file(self, tmp_path):
        config_file = tmp_path / "client.yaml"
        config_file.write_text("""
web_service_url: https://broker.internal:8443/
auth_token: file-token
timeout_seconds: 5
""")
        settings = load_settings(config_file)
        assert settings.web_service_url == "https://broker.internal:8443"
        assert settings.auth_token == "file-token"
        assert settings.timeout_seconds == 5.0

    def test_config_path_from_environment(self, tmp_path):
        config_file = tmp_path / "env.yaml"
        config_file.write_text("auth_token: via-env-path\n")
        with patch.dict("os.environ", {"TXNADMIN_CONFIG": str(config_file)}):
            assert load_settings().auth_token == "via-env-path"

    def test_environment_beats_file_and_overrides_beat_environment(self, tmp_path):
        config_file = tmp_path / "client.yaml"
        config_file.write_text("web_service_url: http://from-file:8080\nlog_level: info\n")
        with patch.dict("os.environ", {"TXNADMIN_WEB_SERVICE_URL": "http://from-env:8080"}):
            settings = load_settings(config_file)
            assert settings.web_service_url == "http://from-env:8080"
            assert settings.log_level == "INFO"

            settings = load_settings(config_file, web_service_url="http://from-cli:8080", auth_token=None)
            assert settings.web_service_url == "http://from-cli:8080"

    def test_corrupt_yaml(self, tmp_path):
        config_file = tmp_path / "client.yaml"
        config_file.write_text("this is not valid yaml: [[[")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(config_file)

    def test_schema_violation(self, tmp_path):
        config_file = tmp_path / "client.yaml"
        config_file.write_text("timeout_seconds: -1\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(config_file)

    def test_relative_url_rejected(self):
        with pytest.raises(ValueError, match="absolute http"):
            load_settings(web_service_url="broker:8080")

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")
