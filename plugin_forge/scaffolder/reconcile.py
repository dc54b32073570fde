"""Bring generated files in line with the authoritative identifiers.

The model writes the Java source and ``plugin.yml`` itself, so they can
disagree with the class and package names it reports.  The helpers here
rewrite the disagreeing parts in place (leaving every other line as the
model wrote it) and return a note for each change so the caller can surface
them.  What cannot be repaired safely raises :class:`AssemblyError`.
"""

from __future__ import annotations

import json
import re

import yaml

from ..errors import AssemblyError

# Values Maven resource filtering replaces with the pom's own fields.
MANIFEST_PLACEHOLDERS: dict[str, str] = {
    "name": "${project.name}",
    "version": "${project.version}",
}

_PACKAGE_STATEMENT = re.compile(r"^([ \t]*)package\s+([\w.\s]+?)\s*;", re.MULTILINE)


# ---------------------------------------------------------------------------
# plugin.yml
# ---------------------------------------------------------------------------


def _load_manifest(text: str) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise AssemblyError(f"plugin.yml is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise AssemblyError("plugin.yml must be a YAML mapping")
    return data


def _set_top_level_key(text: str, key: str, value: str) -> str:
    """Replace every top-level ``key:`` line, or append one if there is none."""
    line = f"{key}: {json.dumps(value)}"
    pattern = re.compile(rf"^{re.escape(key)}[ \t]*:.*$", re.MULTILINE)
    if pattern.search(text):
        return pattern.sub(lambda _match: line, text)
    if text and not text.endswith("\n"):
        text += "\n"
    return text + line + "\n"


def reconcile_manifest(
    manifest_text: str,
    plugin_name: str,
    version: str,
    class_name: str,
    package_name: str,
) -> tuple[str, list[str]]:
    """Make ``main``, ``name`` and ``version`` in plugin.yml match the project.

    ``${project.name}`` and ``${project.version}`` are accepted as-is because
    the pom filters resources.

    Returns:
        ``(manifest_text, notes)``.  The text is returned unchanged when every
        identity field already agrees.

    Raises:
        AssemblyError: If the manifest is not a YAML mapping, before or after
            the rewrite.
    """
    data = _load_manifest(manifest_text)
    expected = {
        "main": f"{package_name}.{class_name}",
        "name": plugin_name,
        "version": version,
    }

    accepted = {
        key: {value, MANIFEST_PLACEHOLDERS.get(key, value)}
        for key, value in expected.items()
    }

    text = manifest_text
    notes: list[str] = []
    for key, value in expected.items():
        current = data.get(key)
        if current is not None and str(current) in accepted[key]:
            continue
        text = _set_top_level_key(text, key, value)
        if current is None:
            notes.append(f"plugin.yml: added missing '{key}: {value}'")
        else:
            notes.append(f"plugin.yml: '{key}' changed from {current!r} to {value!r}")

    if notes:
        rewritten = _load_manifest(text)
        for key in expected:
            if str(rewritten.get(key)) not in accepted[key]:
                raise AssemblyError(f"Could not reconcile '{key}' in plugin.yml")
    return text, notes


# ---------------------------------------------------------------------------
# Java source
# ---------------------------------------------------------------------------


def reconcile_source(
    source_text: str,
    class_name: str,
    package_name: str,
) -> tuple[str, list[str]]:
    """Make the ``package`` statement match *package_name*.

    Returns:
        ``(source_text, notes)``.

    Raises:
        AssemblyError: If the source does not declare ``class <class_name>``;
            the file name would not match any class and javac rejects it.
    """
    if not re.search(rf"\bclass\s+{re.escape(class_name)}\b", source_text):
        raise AssemblyError(
            f"Generated source does not declare class {class_name}; "
            f"it cannot be placed at {class_name}.java"
        )

    notes: list[str] = []
    match = _PACKAGE_STATEMENT.search(source_text)
    if match is None:
        source_text = f"package {package_name};\n\n{source_text}"
        notes.append(f"{class_name}.java: added missing 'package {package_name};'")
        return source_text, notes

    declared = re.sub(r"\s+", "", match.group(2))
    if declared != package_name:
        replacement = f"{match.group(1)}package {package_name};"
        source_text = source_text[: match.start()] + replacement + source_text[match.end():]
        notes.append(
            f"{class_name}.java: package changed from {declared!r} to {package_name!r}"
        )
    return source_text, notes
