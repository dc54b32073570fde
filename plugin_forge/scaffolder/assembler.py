"""Project assembly: map the generated texts onto the Maven layout.

The assembler is pure.  It builds an in-memory :class:`ProjectLayout`;
turning that into a zip and saving it is the caller's job
(:mod:`plugin_forge.scaffolder.archive`).
"""

from __future__ import annotations

from ..errors import AssemblyError
from ..identifiers import package_path_issues, source_file_path
from ..models import GeneratedArtifact, ProjectLayout
from .descriptor import JAVA_VERSION
from .reconcile import reconcile_manifest, reconcile_source
from .templates import TemplateRenderer

DESCRIPTOR_PATH = "pom.xml"
MANIFEST_PATH = "src/main/resources/plugin.yml"
README_PATH = "README.md"

README_TEMPLATE = "README.md.j2"


def render_readme(
    plugin_name: str,
    class_name: str,
    version: str,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Render the build/install README.  Deterministic in its three inputs."""
    renderer = renderer or TemplateRenderer()
    return renderer.render(
        README_TEMPLATE,
        {
            "plugin_name": plugin_name,
            "class_name": class_name,
            "version": version,
            "java_version": JAVA_VERSION,
        },
    )


def assemble(
    plugin_name: str,
    version: str,
    artifact: GeneratedArtifact,
    descriptor_text: str,
    renderer: TemplateRenderer | None = None,
) -> ProjectLayout:
    """Build the project layout for one generated plugin.

    Paths, in order: ``pom.xml``, the Java source, ``plugin.yml`` and
    ``README.md``.  The source and manifest are reconciled against
    ``artifact.class_name`` / ``artifact.package_name``; any change is
    recorded in ``layout.notes``.

    Raises:
        AssemblyError: If the package name would produce an empty path
            segment, if the source cannot be reconciled, or if a path is
            malformed or duplicated.
    """
    class_name = artifact.class_name
    package_name = artifact.package_name

    issues = package_path_issues(package_name)
    if issues:
        raise AssemblyError(
            f"Package name {package_name!r} cannot be laid out: {'; '.join(issues)}"
        )

    source_text, source_notes = reconcile_source(
        artifact.source_text, class_name, package_name
    )
    manifest_text, manifest_notes = reconcile_manifest(
        artifact.manifest_text, plugin_name, version, class_name, package_name
    )

    renderer = renderer or TemplateRenderer()
    readme = render_readme(plugin_name, class_name, version, renderer)

    layout = ProjectLayout()
    layout.add(DESCRIPTOR_PATH, descriptor_text)
    layout.add(source_file_path(package_name, class_name), source_text)
    layout.add(MANIFEST_PATH, manifest_text)
    layout.add(README_PATH, readme)
    layout.notes.extend(source_notes + manifest_notes)
    return layout
