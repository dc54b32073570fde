"""Java / Maven identifier derivation and validation.

Everything here is a pure function of its arguments.  Class and package
names produced by the generation service are checked with
:func:`parse_class_name` and :func:`parse_package_name`; the remaining
helpers only *transform* those validated values (lower-casing, dot to slash)
and never re-derive them from the plugin name.

The ``suggest_*`` helpers turn arbitrary user text into build-safe hints that
are handed to the model as part of the prompt.
"""

from __future__ import annotations

import re

from .errors import IdentifierError

# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

CLASS_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
PACKAGE_SEGMENT_PATTERN = re.compile(r"[a-z_][a-z0-9_]*")

JAVA_RESERVED_WORDS: frozenset[str] = frozenset({
    "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
    "class", "const", "continue", "default", "do", "double", "else", "enum",
    "extends", "final", "finally", "float", "for", "goto", "if", "implements",
    "import", "instanceof", "int", "interface", "long", "native", "new",
    "package", "private", "protected", "public", "return", "short", "static",
    "strictfp", "super", "switch", "synchronized", "this", "throw", "throws",
    "transient", "try", "void", "volatile", "while",
    # Literals and the underscore keyword (Java 9+)
    "true", "false", "null", "_",
})

# Contextual keywords that javac refuses as type names (Java 17+).
RESTRICTED_TYPE_IDENTIFIERS: frozenset[str] = frozenset({
    "var", "yield", "record", "sealed", "permits",
})

# Bukkit refuses to load a plugin whose main class lives in its own namespace.
FORBIDDEN_PACKAGE_PREFIXES: tuple[str, ...] = ("org.bukkit",)

SOURCE_ROOT = "src/main/java"
SOURCE_EXTENSION = "java"


def parse_class_name(value: str) -> str:
    """Validate *value* as a Java class name and return it unchanged.

    Raises:
        IdentifierError: If the value does not match ``[A-Za-z_][A-Za-z0-9_]*``
            or is a reserved word or restricted type identifier.
    """
    if not isinstance(value, str) or not value:
        raise IdentifierError("class name", str(value), "must be a non-empty string")
    if not CLASS_NAME_PATTERN.fullmatch(value):
        raise IdentifierError(
            "class name", value, "must match [A-Za-z_][A-Za-z0-9_]*"
        )
    if value in JAVA_RESERVED_WORDS:
        raise IdentifierError("class name", value, "is a Java reserved word")
    if value in RESTRICTED_TYPE_IDENTIFIERS:
        raise IdentifierError("class name", value, "is a restricted identifier and cannot name a type")
    return value


def parse_package_name(value: str) -> str:
    """Validate *value* as a dot-separated, lower-case Java package name.

    Upper-case segments are rejected rather than lower-cased: repairing them
    would desynchronise the ``package`` statement the model wrote.

    Raises:
        IdentifierError: On empty segments, invalid or reserved segments, or a
            forbidden namespace.
    """
    if not isinstance(value, str) or not value:
        raise IdentifierError("package name", str(value), "must be a non-empty string")

    issues = package_path_issues(value)
    if issues:
        raise IdentifierError("package name", value, "; ".join(issues))

    for segment in value.split("."):
        if not PACKAGE_SEGMENT_PATTERN.fullmatch(segment):
            raise IdentifierError(
                "package name",
                value,
                f"segment {segment!r} must match [a-z_][a-z0-9_]*",
            )
        if segment in JAVA_RESERVED_WORDS:
            raise IdentifierError(
                "package name", value, f"segment {segment!r} is a Java reserved word"
            )

    for prefix in FORBIDDEN_PACKAGE_PREFIXES:
        if value == prefix or value.startswith(prefix + "."):
            raise IdentifierError(
                "package name", value, f"plugins may not live in the {prefix} namespace"
            )
    return value


# ---------------------------------------------------------------------------
# Transformations
# ---------------------------------------------------------------------------


def artifact_id(class_name: str) -> str:
    """Maven artifact id and jar stem: the class name, lower-cased."""
    return class_name.lower()


def jar_name(class_name: str, version: str) -> str:
    """File name Maven gives the shaded jar, e.g. ``lightningwand-1.0.0.jar``."""
    return f"{artifact_id(class_name)}-{version}.jar"


def package_path(package_name: str) -> str:
    """Replace every ``.`` with ``/``.

    Empty segments are passed through untouched; use
    :func:`package_path_issues` to detect them.
    """
    return package_name.replace(".", "/")


def source_file_path(package_name: str, class_name: str) -> str:
    """``src/main/java/<package/as/path>/<ClassName>.java``."""
    return f"{SOURCE_ROOT}/{package_path(package_name)}/{class_name}.{SOURCE_EXTENSION}"


def package_path_issues(package_name: str) -> list[str]:
    """Describe empty segments in *package_name*.

    Returns:
        One message per problem (leading dot, trailing dot, consecutive dots).
        An empty list means every segment is non-empty.
    """
    issues: list[str] = []
    if not package_name:
        return ["package name is empty"]
    if package_name.startswith("."):
        issues.append("leading '.' produces an empty first segment")
    if package_name.endswith("."):
        issues.append("trailing '.' produces an empty last segment")
    if ".." in package_name:
        issues.append("consecutive '.' produce an empty segment")
    return issues


# ---------------------------------------------------------------------------
# Suggestions from free text
# ---------------------------------------------------------------------------


def suggest_class_name(plugin_name: str) -> str:
    """Derive a PascalCase class name hint from a human-readable plugin name.

    Examples::

        suggest_class_name("LightningWand")    -> "LightningWand"
        suggest_class_name("lightning wand!")  -> "LightningWand"
        suggest_class_name("3d maps")          -> "Plugin3dMaps"
    """
    parts = [p for p in re.split(r"[^A-Za-z0-9]+", plugin_name) if p]
    candidate = "".join(p[0].upper() + p[1:] for p in parts)
    if not candidate:
        return "MyPlugin"
    if candidate[0].isdigit():
        candidate = "Plugin" + candidate
    if candidate in JAVA_RESERVED_WORDS:
        candidate += "Plugin"
    return candidate


def suggest_package_name(plugin_name: str, group: str = "com.example") -> str:
    """Derive a package name hint: ``<group>.<lower-cased alphanumerics>``.

    Examples::

        suggest_package_name("Lightning Wand") -> "com.example.lightningwand"
        suggest_package_name("1337 Tools")      -> "com.example._1337tools"
    """
    segment = re.sub(r"[^a-z0-9]", "", plugin_name.lower())
    if not segment:
        segment = "plugin"
    if segment[0].isdigit():
        segment = "_" + segment
    if segment in JAVA_RESERVED_WORDS:
        segment += "plugin"
    return f"{group}.{segment}" if group else segment
