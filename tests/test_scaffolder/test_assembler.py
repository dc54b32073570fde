"""Tests for project assembly (plugin_forge.scaffolder.assembler).

Covers:
- Layout paths and their order
- Descriptor placed verbatim, source and manifest reconciled
- README build instructions (jar name, JDK level)
- Idempotence, including path order
- Path consistency and the lower-casing law across identifier shapes
- Refusal on empty package segments and undeclared classes
"""

from __future__ import annotations

import pytest

from conftest import LIGHTNING_MANIFEST, LIGHTNING_SOURCE
from plugin_forge.errors import AssemblyError
from plugin_forge.models import GeneratedArtifact
from plugin_forge.scaffolder.assembler import (
    DESCRIPTOR_PATH,
    MANIFEST_PATH,
    README_PATH,
    assemble,
    render_readme,
    source_file_path,
)
from plugin_forge.scaffolder.descriptor import synthesize_descriptor

pytestmark = pytest.mark.unit


@pytest.fixture
def lightning_pom(lightning_artifact) -> str:
    return synthesize_descriptor(
        "LightningWand",
        "1.0.0",
        lightning_artifact.class_name,
        lightning_artifact.package_name,
    )


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestSourceFilePath:
    def test_nested_package(self):
        assert (
            source_file_path("com.example.lightningwand", "LightningWand")
            == "src/main/java/com/example/lightningwand/LightningWand.java"
        )

    def test_single_segment_package(self):
        assert source_file_path("wand", "Wand") == "src/main/java/wand/Wand.java"


# ---------------------------------------------------------------------------
# assemble
# ---------------------------------------------------------------------------


class TestAssemble:
    def test_paths_in_order(self, lightning_artifact, lightning_pom):
        layout = assemble("LightningWand", "1.0.0", lightning_artifact, lightning_pom)
        assert layout.paths() == [
            DESCRIPTOR_PATH,
            "src/main/java/com/example/lightningwand/LightningWand.java",
            MANIFEST_PATH,
            README_PATH,
        ]

    def test_contents(self, lightning_artifact, lightning_pom):
        layout = assemble("LightningWand", "1.0.0", lightning_artifact, lightning_pom)
        assert layout[DESCRIPTOR_PATH] == lightning_pom
        assert layout[lightning_artifact.source_path] == LIGHTNING_SOURCE
        assert layout[MANIFEST_PATH] == LIGHTNING_MANIFEST
        assert layout.notes == []

    def test_idempotent(self, lightning_artifact, lightning_pom):
        first = assemble("LightningWand", "1.0.0", lightning_artifact, lightning_pom)
        second = assemble("LightningWand", "1.0.0", lightning_artifact, lightning_pom)
        assert first == second
        assert first.paths() == second.paths()

    def test_readme_names_jar(self, lightning_artifact, lightning_pom):
        layout = assemble("LightningWand", "1.0.0", lightning_artifact, lightning_pom)
        readme = layout[README_PATH]
        assert readme.startswith("# LightningWand Minecraft Plugin")
        assert "lightningwand-1.0.0.jar" in readme
        assert "mvn clean package" in readme

    def test_notes_collected_from_reconciliation(self, lightning_artifact, lightning_pom):
        artifact = lightning_artifact.model_copy(
            update={
                "source_text": LIGHTNING_SOURCE.replace(
                    "package com.example.lightningwand;", "package me.wand;"
                ),
                "manifest_text": LIGHTNING_MANIFEST.replace("version: 1.0.0", "version: 0.9"),
            }
        )
        layout = assemble("LightningWand", "1.0.0", artifact, lightning_pom)
        assert len(layout.notes) == 2
        assert layout.notes[0].startswith("LightningWand.java:")
        assert layout.notes[1].startswith("plugin.yml:")
        assert "package com.example.lightningwand;" in layout[artifact.source_path]

    def test_empty_package_segment_rejected(self, lightning_artifact, lightning_pom):
        artifact = GeneratedArtifact.model_construct(
            source_text=LIGHTNING_SOURCE,
            manifest_text=LIGHTNING_MANIFEST,
            class_name="LightningWand",
            package_name="com..lightningwand",
        )
        with pytest.raises(AssemblyError, match="consecutive"):
            assemble("LightningWand", "1.0.0", artifact, lightning_pom)

    def test_undeclared_class_rejected(self, lightning_artifact, lightning_pom):
        artifact = lightning_artifact.model_copy(
            update={"source_text": "package com.example.lightningwand;\n"}
        )
        with pytest.raises(AssemblyError):
            assemble("LightningWand", "1.0.0", artifact, lightning_pom)


# ---------------------------------------------------------------------------
# Layout laws across identifier shapes
# ---------------------------------------------------------------------------


IDENTIFIER_PAIRS = [
    ("Wand", "wand", "src/main/java/wand/Wand.java"),
    ("_Internal", "_tools.core", "src/main/java/_tools/core/_Internal.java"),
    ("Maps3D", "io.github.user_1.maps3d", "src/main/java/io/github/user_1/maps3d/Maps3D.java"),
    ("XMLExporterPRO", "dev.exporter", "src/main/java/dev/exporter/XMLExporterPRO.java"),
    ("a", "a.b.c.d.e", "src/main/java/a/b/c/d/e/a.java"),
]


class TestLayoutLaws:
    @pytest.mark.parametrize("class_name, package_name, expected_source", IDENTIFIER_PAIRS)
    def test_layout_follows_identifiers(self, class_name, package_name, expected_source):
        artifact = GeneratedArtifact(
            source_text=f"package {package_name};\n\npublic class {class_name} {{}}\n",
            manifest_text=f"name: P\nversion: '1.0'\nmain: {package_name}.{class_name}\n",
            class_name=class_name,
            package_name=package_name,
        )
        pom = synthesize_descriptor("P", "1.0", class_name, package_name)
        layout = assemble("P", "1.0", artifact, pom)

        assert layout.paths()[1] == expected_source == artifact.source_path
        assert f"<artifactId>{class_name.lower()}</artifactId>" in layout[DESCRIPTOR_PATH]
        assert f"{class_name.lower()}-1.0.jar" in layout[README_PATH]
        assert len(set(layout.paths())) == len(layout)
        for path in layout:
            assert all(segment for segment in path.split("/"))
        assert layout.notes == []


# ---------------------------------------------------------------------------
# README
# ---------------------------------------------------------------------------


class TestRenderReadme:
    def test_deterministic(self):
        assert render_readme("Wand", "Wand", "1.0") == render_readme("Wand", "Wand", "1.0")

    def test_mentions_class_version_and_jdk(self):
        readme = render_readme("Claim Tools", "ClaimTools", "2.0-SNAPSHOT")
        assert "# Claim Tools Minecraft Plugin" in readme
        assert "`ClaimTools`" in readme
        assert "claimtools-2.0-SNAPSHOT.jar" in readme
        assert "JDK 21" in readme
        assert readme.endswith("\n")
