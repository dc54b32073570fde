"""Plugin Forge configuration.

Typed configuration for the forge pipeline.  All settings use Pydantic v2
models so they are validated at construction time and can be read from
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class OllamaConfig(BaseModel):
    """Configuration for the local Ollama server that writes the plugin code."""

    url: str = Field(default="http://localhost:11434")
    code_model: str = Field(default="qwen2.5-coder:32b")
    timeout: int = Field(default=120, ge=10, description="Per-request timeout in seconds")


class Config(BaseModel):
    """Global Plugin Forge configuration.

    Created once by the CLI entry point (or by tests) and passed to
    ``ForgePipeline``.
    """

    output_dir: Path = Field(default=Path("./output"))
    group_prefix: str = Field(
        default="com.example",
        description="Package prefix suggested to the model for new plugins",
    )
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PLUGIN_FORGE_OUTPUT_DIR, PLUGIN_FORGE_GROUP_PREFIX,
            PLUGIN_FORGE_OLLAMA_URL, PLUGIN_FORGE_OLLAMA_MODEL,
            PLUGIN_FORGE_OLLAMA_TIMEOUT.
        """
        ollama_kwargs: dict[str, Any] = {}
        if os.environ.get("PLUGIN_FORGE_OLLAMA_URL"):
            ollama_kwargs["url"] = os.environ["PLUGIN_FORGE_OLLAMA_URL"]
        if os.environ.get("PLUGIN_FORGE_OLLAMA_MODEL"):
            ollama_kwargs["code_model"] = os.environ["PLUGIN_FORGE_OLLAMA_MODEL"]
        if os.environ.get("PLUGIN_FORGE_OLLAMA_TIMEOUT"):
            ollama_kwargs["timeout"] = int(os.environ["PLUGIN_FORGE_OLLAMA_TIMEOUT"])

        return cls(
            output_dir=Path(os.environ.get("PLUGIN_FORGE_OUTPUT_DIR", "./output")),
            group_prefix=os.environ.get("PLUGIN_FORGE_GROUP_PREFIX", "com.example"),
            ollama=OllamaConfig(**ollama_kwargs),
        )

