"""Plugin Forge scaffolder -- turns a generated artifact into a Maven project.

Quick usage::

    from plugin_forge.scaffolder import assemble, build_archive, synthesize_descriptor

    pom = synthesize_descriptor(name, version, artifact.class_name, artifact.package_name)
    layout = assemble(name, version, artifact, pom)
    data = build_archive(layout)
"""

from plugin_forge.identifiers import source_file_path
from plugin_forge.scaffolder.archive import archive_filename, build_archive, save_archive
from plugin_forge.scaffolder.assembler import assemble, render_readme
from plugin_forge.scaffolder.descriptor import synthesize_descriptor
from plugin_forge.scaffolder.templates import TemplateRenderer

__all__ = [
    "TemplateRenderer",
    "archive_filename",
    "assemble",
    "build_archive",
    "render_readme",
    "save_archive",
    "source_file_path",
    "synthesize_descriptor",
]
