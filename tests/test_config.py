"""Tests for YAML configuration loading and token resolution."""

import logging

import pytest

from relfetch import config as config_module
from relfetch import log_utils
from relfetch.config import (
    apply_logging_config,
    get_config_file_path,
    get_effective_github_token,
    load_config,
)
from relfetch.constants import DEFAULT_CONFIG
from relfetch.exceptions import ConfigFileError, ConfigValidationError

pytestmark = pytest.mark.unit


class TestLoadConfig:
    def test_defaults_without_file(self):
        assert not get_config_file_path().exists()
        assert load_config() == DEFAULT_CONFIG

    def test_default_location_is_used(self):
        path = get_config_file_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("REQUEST_TIMEOUT: 12\n", encoding="utf-8")

        assert load_config()["REQUEST_TIMEOUT"] == 12

    def test_explicit_file_overrides_defaults(self, config_file):
        config_file.write_text(
            "REPO_API_URL: https://api.github.com/repos/owner/repo\n"
            "GITHUB_TOKEN: secret\n",
            encoding="utf-8",
        )

        config = load_config(config_file)

        assert config["REPO_API_URL"] == "https://api.github.com/repos/owner/repo"
        assert config["GITHUB_TOKEN"] == "secret"
        assert config["REQUEST_TIMEOUT"] == DEFAULT_CONFIG["REQUEST_TIMEOUT"]

    def test_empty_file_gives_defaults(self, config_file):
        config_file.write_text("", encoding="utf-8")

        assert load_config(config_file) == DEFAULT_CONFIG

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigFileError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, config_file):
        config_file.write_text("key: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigFileError):
            load_config(config_file)

    def test_non_mapping_document(self, config_file):
        config_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigFileError):
            load_config(config_file)

    @pytest.mark.parametrize(
        "content,field",
        [
            ("REPO_API_URL: ftp://example.com\n", "REPO_API_URL"),
            ("REQUEST_TIMEOUT: 0\n", "REQUEST_TIMEOUT"),
            ("REQUEST_TIMEOUT: true\n", "REQUEST_TIMEOUT"),
            ("REQUEST_TIMEOUT: soon\n", "REQUEST_TIMEOUT"),
            ("GITHUB_TOKEN: 123\n", "GITHUB_TOKEN"),
        ],
    )
    def test_invalid_values(self, config_file, content, field):
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(config_file)
        assert exc_info.value.field == field

    def test_defaults_are_not_mutated(self, config_file):
        config_file.write_text("REQUEST_TIMEOUT: 3\n", encoding="utf-8")

        load_config(config_file)

        assert config_module.DEFAULT_CONFIG["REQUEST_TIMEOUT"] == 30


class TestGetEffectiveGithubToken:
    def test_config_token_wins(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env")
        assert get_effective_github_token({"GITHUB_TOKEN": " cfg "}) == "cfg"

    def test_env_token_fallback(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env")
        assert get_effective_github_token({"GITHUB_TOKEN": None}) == "env"

    def test_env_token_disallowed(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env")
        assert get_effective_github_token({"ALLOW_ENV_TOKEN": False}) is None

    def test_no_token(self):
        assert get_effective_github_token({}) is None


class TestApplyLoggingConfig:
    def setup_method(self):
        log_utils._initialize_logger()
        log_utils._file_handler = None

    def teardown_method(self):
        self.setup_method()

    def test_sets_level(self):
        apply_logging_config({"LOG_LEVEL": "WARNING"})

        assert log_utils.logger.level == logging.WARNING
        assert log_utils._file_handler is None

    def test_enables_file_logging(self, tmp_path):
        apply_logging_config({"LOG_LEVEL": "DEBUG", "LOG_DIR": str(tmp_path)})

        assert (tmp_path / "relfetch.log").exists()
        assert log_utils._file_handler.level == logging.DEBUG
