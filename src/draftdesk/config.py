"""Locate, load and hand out Draftdesk configuration sections."""

import os
from functools import cached_property
from pathlib import Path
from typing import Optional

from draftdesk.models.config import Config, EditorConfig, LLMConfig
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)

CONFIG_PATH_ENV = "DRAFTDESK_CONFIG"


class ConfigManager:
    """
    Holds the loaded Config and exposes its sections.

    Only ``suggest`` needs the LLM section; ``seo`` never touches it, so
    sections are resolved on first access.

    Example:
        >>> manager = ConfigManager.load_default()
        >>> manager.editor.language
        'fr'
    """

    def __init__(self, config: Config, path: Optional[Path] = None):
        self._config = config
        self.path = path

    @classmethod
    def default_path(cls) -> Path:
        """$DRAFTDESK_CONFIG if set, else ~/.config/draftdesk/config.yaml."""
        override = os.environ.get(CONFIG_PATH_ENV)
        if override:
            return Path(override).expanduser()
        return Path.home() / ".config" / "draftdesk" / "config.yaml"

    @classmethod
    def load_default(cls) -> "ConfigManager":
        return cls.load_from_path(cls.default_path())

    @classmethod
    def load_from_path(cls, path: Path) -> "ConfigManager":
        """
        Read and validate a config file.

        Raises:
            FileNotFoundError: No file at ``path`` (message includes an example)
            PermissionError: File readable by group or others
            ValueError: YAML or schema validation failed
        """
        logger.info("config_loading", path=str(path))
        try:
            config = Config.load(path)
        except (FileNotFoundError, PermissionError) as e:
            logger.error("config_unavailable", path=str(path), error_type=type(e).__name__)
            raise
        except Exception as e:
            logger.error("config_validation_error", path=str(path), error=str(e))
            raise ValueError(f"Configuration validation failed: {e}") from e

        logger.info("config_loaded", path=str(path), language=config.editor.language)
        return cls(config, path)

    @cached_property
    def llm(self) -> LLMConfig:
        return self._config.llm

    @cached_property
    def editor(self) -> EditorConfig:
        return self._config.editor
