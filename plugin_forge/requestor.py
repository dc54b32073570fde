"""Content requestor: turns a ``PluginRequest`` into a ``GeneratedArtifact``.

The generation service is reached through the :class:`ArtifactGenerator`
protocol so the deterministic scaffolding code can be exercised without a
network.  :class:`OllamaArtifactGenerator` is the production implementation.

The requestor owns identifier validity: a response whose class or package
name fails the predicates in :mod:`plugin_forge.identifiers` is rejected
with :class:`GenerationError` and never exposed to the caller.
"""

from __future__ import annotations

import json
import re
import textwrap
from typing import Any, Protocol

import yaml
from pydantic import ValidationError

from .errors import GenerationError
from .identifiers import suggest_class_name, suggest_package_name
from .models import GeneratedArtifact, PluginRequest
from .ollama_client import OllamaClient

# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

_SYSTEM_PROMPT = textwrap.dedent("""\
    You are an expert Minecraft server plugin developer who writes clean,
    compilable Java for the Spigot API.  You always answer with a single JSON
    object and nothing else.
""")

_GENERATION_PROMPT = textwrap.dedent("""\
    Create a Spigot plugin with the following details.

    Plugin name: {name}
    Version: {version}
    Description of behaviour:
    {description}

    Requirements:
    - Write ONE Java file containing the main plugin class, which extends
      org.bukkit.plugin.java.JavaPlugin and implements every listener or
      command the description needs.
    - Suggested class name: {class_name}
    - Suggested package name: {package_name}
    - The class name must match [A-Za-z_][A-Za-z0-9_]* and must not be a Java
      keyword.  The package name must be dot-separated lower-case segments.
    - The Java file must start with "package <packageName>;" and declare
      "public class <className>".
    - Write a plugin.yml with name, version, main (the fully-qualified class
      name), api-version and every command the plugin registers.

    Respond ONLY with a JSON object (no markdown fencing) with this schema:
    {{
        "java": "full Java source of the main class",
        "yml": "full plugin.yml content",
        "className": "the main class name",
        "packageName": "the package of the main class"
    }}
""")

_REQUIRED_FIELDS: tuple[str, ...] = ("java", "yml", "className", "packageName")


# ---------------------------------------------------------------------------
# Capability interface
# ---------------------------------------------------------------------------


class ArtifactGenerator(Protocol):
    """Anything that can turn a request into a validated artifact."""

    async def generate(self, request: PluginRequest) -> GeneratedArtifact:
        """Return a validated artifact or raise :class:`GenerationError`."""
        ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_prompt(request: PluginRequest, group_prefix: str = "com.example") -> str:
    """Render the generation prompt for *request*, including identifier hints."""
    return _GENERATION_PROMPT.format(
        name=request.name,
        version=request.version,
        description=request.description,
        class_name=suggest_class_name(request.name),
        package_name=suggest_package_name(request.name, group_prefix),
    )


def _parse_json_response(raw: str) -> dict[str, Any]:
    """Extract the first JSON object from *raw*.

    Model responses sometimes include markdown fences or preamble text; this
    helper strips those away before parsing.

    Raises:
        GenerationError: If no JSON object can be recovered.
    """
    cleaned = re.sub(r"```(?:json)?\s*", "", raw)
    cleaned = cleaned.strip().rstrip("`").strip()
    if not cleaned:
        raise GenerationError("The generation service returned an empty response.")

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        match = re.search(r"\{[\s\S]*\}", cleaned)
        if not match:
            raise GenerationError("The generation service did not return JSON.") from None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise GenerationError(f"Malformed JSON in generation response: {exc}") from exc

    if not isinstance(data, dict):
        raise GenerationError("The generation response is not a JSON object.")
    return data


def parse_artifact(data: dict[str, Any]) -> GeneratedArtifact:
    """Validate a decoded response and build the artifact.

    Raises:
        GenerationError: On missing fields, non-string fields, invalid
            identifiers or a manifest that is not a YAML mapping.
    """
    missing = [key for key in _REQUIRED_FIELDS if key not in data]
    if missing:
        raise GenerationError(f"Generation response is missing fields: {', '.join(missing)}")
    wrong_type = [key for key in _REQUIRED_FIELDS if not isinstance(data[key], str)]
    if wrong_type:
        raise GenerationError(
            f"Generation response fields must be strings: {', '.join(wrong_type)}"
        )

    try:
        artifact = GeneratedArtifact.model_validate(
            {key: data[key] for key in _REQUIRED_FIELDS}
        )
    except ValidationError as exc:
        reasons = "; ".join(err["msg"] for err in exc.errors())
        raise GenerationError(f"Generated identifiers are invalid: {reasons}") from exc

    try:
        manifest = yaml.safe_load(artifact.manifest_text)
    except yaml.YAMLError as exc:
        raise GenerationError(f"Generated plugin.yml is not valid YAML: {exc}") from exc
    if not isinstance(manifest, dict):
        raise GenerationError("Generated plugin.yml is not a YAML mapping.")

    return artifact


# ---------------------------------------------------------------------------
# Ollama-backed generator
# ---------------------------------------------------------------------------


class OllamaArtifactGenerator:
    """Generates plugin source and manifest with a local Ollama model.

    Makes exactly one generation request per call.  Retry and backoff policy
    is left to the caller; the transport error is reported as-is.
    """

    def __init__(
        self,
        client: OllamaClient,
        model: str = "qwen2.5-coder:32b",
        group_prefix: str = "com.example",
    ) -> None:
        self.client = client
        self.model = model
        self.group_prefix = group_prefix

    async def generate(self, request: PluginRequest) -> GeneratedArtifact:
        prompt = build_prompt(request, self.group_prefix)
        response = await self.client.generate(
            prompt,
            model=self.model,
            system=_SYSTEM_PROMPT,
            json_output=True,
        )
        if not response.success:
            raise GenerationError(response.error or "The generation service failed.")

        data = _parse_json_response(response.text)
        return parse_artifact(data)
