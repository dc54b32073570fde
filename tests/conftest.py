"""Shared pytest fixtures for the Plugin Forge test suite.

Provides reusable fixtures for:
- A sample request / artifact pair (the LightningWand plugin)
- Raw model responses in the wire format the requestor parses
- A fake ``ArtifactGenerator`` that never touches the network
- A mocked ``httpx.AsyncClient`` for Ollama client tests
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from plugin_forge.config import Config, OllamaConfig
from plugin_forge.errors import GenerationError
from plugin_forge.models import GeneratedArtifact, PluginRequest


# ---------------------------------------------------------------------------
# Sample plugin
# ---------------------------------------------------------------------------

LIGHTNING_SOURCE = textwrap.dedent("""\
    package com.example.lightningwand;

    import org.bukkit.block.Block;
    import org.bukkit.event.EventHandler;
    import org.bukkit.event.Listener;
    import org.bukkit.event.block.Action;
    import org.bukkit.event.player.PlayerInteractEvent;
    import org.bukkit.plugin.java.JavaPlugin;

    public class LightningWand extends JavaPlugin implements Listener {

        @Override
        public void onEnable() {
            getServer().getPluginManager().registerEvents(this, this);
            getLogger().info("LightningWand enabled");
        }

        @EventHandler
        public void onInteract(PlayerInteractEvent event) {
            if (event.getAction() != Action.RIGHT_CLICK_BLOCK) {
                return;
            }
            Block block = event.getClickedBlock();
            if (block != null) {
                block.getWorld().strikeLightning(block.getLocation());
            }
        }
    }
""")

LIGHTNING_MANIFEST = textwrap.dedent("""\
    name: LightningWand
    version: 1.0.0
    main: com.example.lightningwand.LightningWand
    api-version: '1.21'
    description: Strikes lightning wherever a player right-clicks a block.
""")


@pytest.fixture
def lightning_request() -> PluginRequest:
    return PluginRequest.create(
        "LightningWand",
        "1.0.0",
        "A plugin that strikes lightning wherever a player right-clicks a block.",
    )


@pytest.fixture
def lightning_artifact() -> GeneratedArtifact:
    return GeneratedArtifact(
        source_text=LIGHTNING_SOURCE,
        manifest_text=LIGHTNING_MANIFEST,
        class_name="LightningWand",
        package_name="com.example.lightningwand",
    )


@pytest.fixture
def lightning_payload() -> dict[str, Any]:
    """The decoded JSON object a well-behaved model returns."""
    return {
        "java": LIGHTNING_SOURCE,
        "yml": LIGHTNING_MANIFEST,
        "className": "LightningWand",
        "packageName": "com.example.lightningwand",
    }


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def forge_config(tmp_path: Path) -> Config:
    """Config writing into a temporary output directory."""
    return Config(
        output_dir=tmp_path / "output",
        ollama=OllamaConfig(url="http://ollama.test:11434", timeout=30),
    )


# ---------------------------------------------------------------------------
# Fake generator
# ---------------------------------------------------------------------------


class FakeGenerator:
    """In-memory ``ArtifactGenerator`` that records every request it sees."""

    def __init__(
        self,
        artifact: GeneratedArtifact | None = None,
        error: Exception | None = None,
    ) -> None:
        self.artifact = artifact
        self.error = error
        self.calls: list[PluginRequest] = []

    async def generate(self, request: PluginRequest) -> GeneratedArtifact:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        if self.artifact is None:
            raise GenerationError("FakeGenerator has no artifact configured")
        return self.artifact


@pytest.fixture
def fake_generator(lightning_artifact: GeneratedArtifact) -> FakeGenerator:
    return FakeGenerator(artifact=lightning_artifact)


# ---------------------------------------------------------------------------
# Mock Ollama HTTP
# ---------------------------------------------------------------------------


def make_ollama_generate_response(text: str, model: str = "qwen2.5-coder:32b") -> dict[str, Any]:
    """Build a realistic Ollama /api/generate response body."""
    return {
        "model": model,
        "created_at": "2026-01-15T10:30:00.000Z",
        "response": text,
        "done": True,
        "total_duration": 1234567890,
        "eval_count": 512,
    }


def make_mock_http_client(body: dict[str, Any], status_code: int = 200) -> AsyncMock:
    """An ``httpx.AsyncClient`` stand-in whose ``post``/``get`` return *body*."""
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.json.return_value = body
    mock_response.raise_for_status = MagicMock()

    mock_client = AsyncMock()
    mock_client.post = AsyncMock(return_value=mock_response)
    mock_client.get = AsyncMock(return_value=mock_response)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def ollama_json_reply(lightning_payload: dict[str, Any]) -> AsyncMock:
    """Mock HTTP client replying with the LightningWand payload as JSON text."""
    return make_mock_http_client(
        make_ollama_generate_response(json.dumps(lightning_payload))
    )
