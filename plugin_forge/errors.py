"""Exception hierarchy shared by every stage of the forge pipeline.

Each error is terminal for the request that raised it.  None of them are
retried automatically; the cause text is preserved so the caller can show it
to the user verbatim.
"""

from __future__ import annotations


class PluginForgeError(Exception):
    """Base class for all Plugin Forge errors."""


class RequestValidationError(PluginForgeError):
    """Raised when required request fields are missing or blank."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            f"Plugin Name, Version, and Description are required. Missing: {', '.join(self.missing)}"
        )


class GenerationError(PluginForgeError):
    """Raised when the generation service fails or returns an unusable artifact."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Failed to generate plugin code. {cause}")


class IdentifierError(PluginForgeError, ValueError):
    """Raised when a value fails a Java identifier predicate."""

    def __init__(self, kind: str, value: str, reason: str) -> None:
        self.kind = kind
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {kind} {value!r}: {reason}")


class ConfigurationError(PluginForgeError):
    """Raised when the build descriptor would be inconsistent with its inputs."""


class AssemblyError(PluginForgeError):
    """Raised when the project layout cannot be built without a broken path or file."""


class PackagingError(PluginForgeError):
    """Raised when the archive primitive fails to produce the zip."""
