"""Configuration models for Draftdesk."""

import os
import stat
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, HttpUrl, field_validator

from draftdesk.models.article import PublishPlatform


EXAMPLE_CONFIG = """\
llm:
  endpoint: https://api.openai.com/v1
  api_key: YOUR_API_KEY_HERE
  model: gpt-4o-mini

editor:
  default_platforms: [flowz]
  title_suggestion_count: 3
  language: fr
"""


def _check_private(path: Path) -> None:
    """The file holds an API key: refuse anything but owner-only access."""
    mode = os.stat(path).st_mode
    if mode & (stat.S_IRWXG | stat.S_IRWXO):
        raise PermissionError(
            f"Config file has overly permissive permissions: {oct(mode)}\n"
            f"Run: chmod 600 {path}"
        )


class LLMConfig(BaseModel):
    """Chat endpoint used for article suggestions."""

    endpoint: HttpUrl = Field(..., description="OpenAI-compatible base URL (Ollama works too)")
    api_key: str = Field(..., description="Bearer token sent with every request")
    model: str = Field(..., description="Model name, e.g. 'gpt-4o-mini' or 'llama3'")
    num_ctx: int = Field(
        default=32768,
        ge=1024,
        description="Ollama context window; ignored by other providers"
    )

    model_config = {"frozen": True}


class EditorConfig(BaseModel):
    """Defaults applied when an edit session opens."""

    default_platforms: list[PublishPlatform] = Field(
        default_factory=lambda: ["flowz"],
        min_length=1,
        description="Platforms preselected for new articles"
    )

    title_suggestion_count: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many title candidates to ask the model for"
    )

    language: Literal["fr", "en", "es", "de"] = Field(
        default="fr",
        description="Language of generated suggestions"
    )

    @field_validator("default_platforms")
    @classmethod
    def dedupe_platforms(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))

    model_config = {"frozen": True}


class Config(BaseModel):
    """Contents of config.yaml."""

    llm: LLMConfig
    editor: EditorConfig = Field(default_factory=EditorConfig)

    @classmethod
    def load(cls, path: Path) -> "Config":
        """
        Parse and validate a YAML config file.

        Raises:
            FileNotFoundError: If the file does not exist
            PermissionError: If group or others can access the file
            ValueError: If the file is empty, not a mapping, or fails validation
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Create it (mode 600) with content like:\n\n{EXAMPLE_CONFIG}"
            )

        _check_private(path)

        with open(path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file is empty or not a mapping: {path}")

        return cls.model_validate(data)

    model_config = {"frozen": True}
