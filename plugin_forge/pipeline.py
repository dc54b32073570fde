"""Plugin Forge pipeline orchestrator.

Runs the three-phase forge pipeline:

Phase 1: GENERATE -- Ask the model for the Java source and plugin.yml.
Phase 2: ASSEMBLE -- Synthesize pom.xml and README, reconcile identifiers,
                     lay the files out the way Maven expects.
Phase 3: PACKAGE  -- Zip the layout and save ``<ClassName>-plugin-project.zip``.

Usage::

    plugin-forge --name LightningWand --version 1.0.0 \\
        --description "Strikes lightning wherever a player right-clicks a block."
    python -m plugin_forge.pipeline --name MyPlugin --version 0.1 --description-file idea.txt
"""

from __future__ import annotations

import asyncio
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

from plugin_forge.config import Config
from plugin_forge.errors import PluginForgeError, RequestValidationError
from plugin_forge.models import GeneratedArtifact, PluginRequest, ProjectLayout
from plugin_forge.ollama_client import OllamaClient
from plugin_forge.requestor import ArtifactGenerator, OllamaArtifactGenerator
from plugin_forge.scaffolder import (
    TemplateRenderer,
    assemble,
    build_archive,
    save_archive,
    synthesize_descriptor,
)
from plugin_forge.scaffolder.assembler import MANIFEST_PATH
from plugin_forge.utils import (
    PHASE_NAMES,
    console,
    format_duration,
    print_error,
    print_phase_header,
    print_source,
    print_success,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class ForgeResult:
    """Outcome of one pipeline run."""

    plugin_name: str
    success: bool = False
    artifact: GeneratedArtifact | None = None
    layout: ProjectLayout | None = None
    archive_path: Path | None = None
    failed_phase: int | None = None
    errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    def summary(self) -> dict[str, str]:
        """Key/value summary suitable for ``print_summary_table``."""
        data = {
            "Plugin": self.plugin_name,
            "Status": "SUCCESS" if self.success else "FAILED",
            "Duration": format_duration(self.duration_seconds),
        }
        if self.artifact is not None:
            data["Main class"] = self.artifact.main_class
            data["Artifact id"] = self.artifact.artifact_id
        if self.layout is not None:
            data["Files"] = str(len(self.layout))
        if self.archive_path is not None:
            data["Archive"] = str(self.archive_path)
        if self.failed_phase is not None:
            data["Failed phase"] = PHASE_NAMES.get(self.failed_phase, "?")
        return data


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class ForgePipeline:
    """Drives generation, assembly and packaging for a single request.

    Every method works on values passed in; the pipeline keeps no state
    between requests.  Pass a custom ``generator`` to replace the Ollama
    backend (tests use a fake).
    """

    def __init__(
        self,
        config: Config,
        generator: ArtifactGenerator | None = None,
    ) -> None:
        self.config = config
        self.ollama = OllamaClient(
            base_url=config.ollama.url,
            timeout=config.ollama.timeout,
        )
        self.generator: ArtifactGenerator = generator or OllamaArtifactGenerator(
            self.ollama,
            model=config.ollama.code_model,
            group_prefix=config.group_prefix,
        )
        self.renderer = TemplateRenderer()

    # ------------------------------------------------------------------
    # Pre-flight checks
    # ------------------------------------------------------------------

    async def preflight(self) -> bool:
        """Probe the Ollama server and the configured model.

        Only warns; the generation phase reports the real failure.
        """
        if not await self.ollama.is_available():
            print_warning(
                f"Ollama is not reachable at {self.config.ollama.url}. "
                f"Generation will fail until the server is running."
            )
            return False

        model = self.config.ollama.code_model
        if await self.ollama.has_model(model):
            return True
        print_warning(
            f"Model {model} is not pulled. Run 'ollama pull {model}' first."
        )
        return False

    # ------------------------------------------------------------------
    # Individual steps
    # ------------------------------------------------------------------

    async def generate(self, request: PluginRequest) -> GeneratedArtifact:
        """Phase 1: one call to the generator."""
        return await self.generator.generate(request)

    def build_project(self, request: PluginRequest, artifact: GeneratedArtifact) -> ProjectLayout:
        """Phase 2: fresh descriptor plus assembled layout."""
        descriptor = synthesize_descriptor(
            request.name,
            request.version,
            artifact.class_name,
            artifact.package_name,
            self.renderer,
        )
        return assemble(request.name, request.version, artifact, descriptor, self.renderer)

    def package(self, request: PluginRequest, artifact: GeneratedArtifact) -> bytes:
        """Phases 2 and 3 without touching the file system."""
        return build_archive(self.build_project(request, artifact))

    async def download(
        self,
        request: PluginRequest,
        artifact: GeneratedArtifact,
        output_dir: str | Path | None = None,
    ) -> Path:
        """Build the archive and save it as ``<ClassName>-plugin-project.zip``."""
        data = self.package(request, artifact)
        return await save_archive(data, output_dir or self.config.output_dir, artifact.class_name)

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    async def run(
        self,
        request: PluginRequest,
        output_dir: str | Path | None = None,
        show: bool = False,
    ) -> ForgeResult:
        """Run all three phases and collect the outcome.

        Plugin Forge errors are recorded in the result instead of raised, with
        the phase that failed.  Nothing from a failed run is written to disk.
        """
        started = time.monotonic()
        result = ForgeResult(plugin_name=request.name)
        phase = 1

        try:
            print_phase_header(1, PHASE_NAMES[1])
            with console.status("Generating your plugin..."):
                artifact = await self.generate(request)
            result.artifact = artifact
            print_success(f"Generated {artifact.main_class}")
            if show:
                print_source(f"{artifact.class_name}.java", artifact.source_text, "java")
                print_source("plugin.yml", artifact.manifest_text, "yaml")

            phase = 2
            print_phase_header(2, PHASE_NAMES[2])
            layout = self.build_project(request, artifact)
            result.layout = layout
            for note in layout.notes:
                print_warning(note)
            if show and any(note.startswith("plugin.yml") for note in layout.notes):
                print_source("plugin.yml (reconciled)", str(layout[MANIFEST_PATH]), "yaml")
            for path in layout:
                console.print(f"  [green]+[/green] {path}")

            phase = 3
            print_phase_header(3, PHASE_NAMES[3])
            data = build_archive(layout)
            result.archive_path = await save_archive(
                data, output_dir or self.config.output_dir, artifact.class_name
            )
            result.success = True
            print_success(f"Saved {result.archive_path}")
        except PluginForgeError as exc:
            result.failed_phase = phase
            result.errors.append(f"Phase {phase} ({PHASE_NAMES[phase]}): {exc}")
            print_error(str(exc))
        finally:
            result.duration_seconds = time.monotonic() - started

        return result


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``plugin-forge`` and ``python -m plugin_forge.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Plugin Forge -- generate a buildable Spigot plugin project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  plugin-forge --name LightningWand --version 1.0.0 "
            "--description 'Strike lightning on right-click'\n"
            "  plugin-forge --name Claim --version 0.1 --description-file idea.txt -o ./plugins\n"
        ),
    )
    parser.add_argument("--name", "-n", default="", help="Plugin name")
    parser.add_argument("--version", "-v", default="", help="Plugin version (used as-is)")
    parser.add_argument("--description", "-d", default="", help="What the plugin should do")
    parser.add_argument(
        "--description-file",
        default=None,
        help="Read the description from a text file instead of --description",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory for the generated zip (default: ./output)",
    )
    parser.add_argument("--model", default=None, help="Ollama model tag for code generation")
    parser.add_argument("--ollama-url", default=None, help="Ollama server URL")
    parser.add_argument(
        "--group-prefix",
        default=None,
        help="Package prefix suggested to the model (default: com.example)",
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not print the generated Java source and plugin.yml",
    )

    args = parser.parse_args(argv)

    description = args.description
    if args.description_file:
        desc_path = Path(args.description_file)
        if not desc_path.exists():
            print_error(f"Description file not found: {desc_path}")
            sys.exit(1)
        description = desc_path.read_text(encoding="utf-8")

    try:
        request = PluginRequest.create(args.name, args.version, description)
    except RequestValidationError as exc:
        print_error(str(exc))
        sys.exit(1)

    config = Config.from_env()
    if args.output:
        config.output_dir = Path(args.output)
    if args.model:
        config.ollama.code_model = args.model
    if args.ollama_url:
        config.ollama.url = args.ollama_url
    if args.group_prefix:
        config.group_prefix = args.group_prefix

    pipeline = ForgePipeline(config)

    async def _run() -> ForgeResult:
        await pipeline.preflight()
        return await pipeline.run(request, show=not args.no_show)

    result = asyncio.run(_run())
    print_summary_table(result.summary(), title="Plugin Forge")

    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
