"""Maven ``pom.xml`` synthesis.

:func:`synthesize_descriptor` is a pure function of the plugin name,
version, class name and package name: identical inputs always give
byte-identical output.  The toolchain versions below are the single place
where the target platform is pinned.
"""

from __future__ import annotations

from ..errors import ConfigurationError, IdentifierError
from ..identifiers import parse_class_name, parse_package_name
from .templates import TemplateRenderer

# Spigot 1.20.5+ requires Java 21 at runtime.
JAVA_VERSION = "21"
SPIGOT_API_VERSION = "1.21.4-R0.1-SNAPSHOT"
COMPILER_PLUGIN_VERSION = "3.13.0"
SHADE_PLUGIN_VERSION = "3.6.0"

REPOSITORIES: tuple[tuple[str, str], ...] = (
    ("spigotmc-repo", "https://hub.spigotmc.org/nexus/content/repositories/snapshots/"),
    ("sonatype", "https://oss.sonatype.org/content/groups/public/"),
)

DESCRIPTOR_TEMPLATE = "pom.xml.j2"


def synthesize_descriptor(
    plugin_name: str,
    version: str,
    class_name: str,
    package_name: str,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Render the Maven descriptor for a plugin project.

    The coordinates are ``groupId = package_name``,
    ``artifactId = class_name.lower()`` and ``version`` exactly as given.

    Raises:
        ConfigurationError: If an identifier fails validation or the plugin
            name / version is empty.  No descriptor is produced in that case.
    """
    if not plugin_name:
        raise ConfigurationError("Cannot build pom.xml without a plugin name")
    if not version:
        raise ConfigurationError("Cannot build pom.xml without a version")
    try:
        parse_class_name(class_name)
        parse_package_name(package_name)
    except IdentifierError as exc:
        raise ConfigurationError(f"Refusing to build pom.xml: {exc}") from exc

    renderer = renderer or TemplateRenderer()
    return renderer.render(
        DESCRIPTOR_TEMPLATE,
        {
            "plugin_name": plugin_name,
            "version": version,
            "class_name": class_name,
            "package_name": package_name,
            "java_version": JAVA_VERSION,
            "spigot_api_version": SPIGOT_API_VERSION,
            "compiler_plugin_version": COMPILER_PLUGIN_VERSION,
            "shade_plugin_version": SHADE_PLUGIN_VERSION,
            "repositories": REPOSITORIES,
        },
    )
