"""Unit tests for configuration models and loading."""

import os
import stat

import pytest

from draftdesk.config import ConfigManager
from draftdesk.models.config import Config, EditorConfig, LLMConfig


VALID_CONFIG = """
llm:
  endpoint: https://api.openai.com/v1
  api_key: sk-test-key
  model: gpt-4o-mini

editor:
  default_platforms: [flowz, wordpress, flowz]
  title_suggestion_count: 5
  language: en
"""


def write_config(tmp_path, text, mode=stat.S_IRUSR | stat.S_IWUSR):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(text)
    os.chmod(config_file, mode)
    return config_file


class TestLLMConfig:
    """Test LLM configuration model."""

    def test_valid_llm_config(self):
        config = LLMConfig(endpoint="https://api.openai.com/v1", api_key="sk-test", model="gpt-4o-mini")

        assert str(config.endpoint) == "https://api.openai.com/v1"
        assert config.num_ctx == 32768

    def test_invalid_endpoint(self):
        with pytest.raises(Exception):  # Pydantic ValidationError
            LLMConfig(endpoint="not-a-url", api_key="sk-test", model="m")

    def test_num_ctx_minimum(self):
        with pytest.raises(Exception):  # Pydantic ValidationError
            LLMConfig(endpoint="http://localhost:11434/v1", api_key="x", model="m", num_ctx=512)

    def test_llm_config_immutable(self):
        config = LLMConfig(endpoint="https://api.openai.com/v1", api_key="sk-test", model="m")

        with pytest.raises(Exception):  # Pydantic ValidationError
            config.model = "other"


class TestEditorConfig:
    """Test editor configuration model."""

    def test_defaults(self):
        config = EditorConfig()

        assert config.default_platforms == ["flowz"]
        assert config.title_suggestion_count == 3
        assert config.language == "fr"

    def test_dedupes_platforms(self):
        config = EditorConfig(default_platforms=["wordpress", "flowz", "wordpress"])

        assert config.default_platforms == ["wordpress", "flowz"]

    def test_requires_a_platform(self):
        with pytest.raises(Exception):  # Pydantic ValidationError
            EditorConfig(default_platforms=[])

    def test_title_count_range(self):
        with pytest.raises(Exception):  # Pydantic ValidationError
            EditorConfig(title_suggestion_count=0)
        with pytest.raises(Exception):  # Pydantic ValidationError
            EditorConfig(title_suggestion_count=11)

    def test_unknown_language(self):
        with pytest.raises(Exception):  # Pydantic ValidationError
            EditorConfig(language="it")


class TestConfig:
    """Test root configuration model."""

    def test_config_load_valid_yaml(self, tmp_path):
        config = Config.load(write_config(tmp_path, VALID_CONFIG))

        assert config.llm.model == "gpt-4o-mini"
        assert config.editor.default_platforms == ["flowz", "wordpress"]
        assert config.editor.title_suggestion_count == 5
        assert config.editor.language == "en"

    def test_config_load_with_defaults(self, tmp_path):
        """Test the editor section is optional."""
        config_file = write_config(tmp_path, """
llm:
  endpoint: http://localhost:11434/v1
  api_key: ollama
  model: llama3
""")

        config = Config.load(config_file)

        assert config.editor == EditorConfig()

    def test_config_load_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(tmp_path / "nonexistent.yaml")

    def test_config_load_wrong_permissions(self, tmp_path):
        """Test loading fails when the file is group/world readable."""
        config_file = write_config(
            tmp_path, VALID_CONFIG,
            mode=stat.S_IRUSR | stat.S_IWUSR | stat.S_IRGRP | stat.S_IROTH,
        )

        with pytest.raises(PermissionError, match="overly permissive permissions"):
            Config.load(config_file)

    def test_config_load_empty_file(self, tmp_path):
        with pytest.raises(ValueError, match="empty or not a mapping"):
            Config.load(write_config(tmp_path, ""))

    def test_config_immutable(self, tmp_path):
        config = Config.load(write_config(tmp_path, VALID_CONFIG))

        with pytest.raises(Exception):  # Pydantic ValidationError
            config.editor = EditorConfig()


class TestConfigManager:
    """Test ConfigManager loading and error mapping."""

    def test_load_from_path(self, tmp_path):
        manager = ConfigManager.load_from_path(write_config(tmp_path, VALID_CONFIG))

        assert manager.llm.api_key == "sk-test-key"
        assert manager.editor.language == "en"

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager.load_from_path(tmp_path / "missing.yaml")

    def test_permission_error_propagates(self, tmp_path):
        config_file = write_config(tmp_path, VALID_CONFIG, mode=0o644)

        with pytest.raises(PermissionError):
            ConfigManager.load_from_path(config_file)

    def test_validation_error_becomes_value_error(self, tmp_path):
        config_file = write_config(tmp_path, """
llm:
  endpoint: not-a-url
  api_key: x
  model: m
""")

        with pytest.raises(ValueError, match="Configuration validation failed"):
            ConfigManager.load_from_path(config_file)

    def test_default_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.delenv("DRAFTDESK_CONFIG", raising=False)

        assert ConfigManager.default_path() == tmp_path / ".config" / "draftdesk" / "config.yaml"

    def test_default_path_env_override(self, monkeypatch, tmp_path):
        config_file = write_config(tmp_path, VALID_CONFIG)
        monkeypatch.setenv("DRAFTDESK_CONFIG", str(config_file))

        manager = ConfigManager.load_default()

        assert manager.path == config_file
        assert manager.llm.model == "gpt-4o-mini"
