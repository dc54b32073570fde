"""Pydantic v2 models and value types for the forge pipeline.

Defines the request coming from the user, the artifact returned by the
generation service, the validated identifier types, and the in-memory
project layout handed to the archive primitive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Iterator, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from .errors import AssemblyError, RequestValidationError
from .identifiers import (
    artifact_id,
    package_path,
    parse_class_name,
    parse_package_name,
    source_file_path,
)

# ---------------------------------------------------------------------------
# Validated identifier types
# ---------------------------------------------------------------------------

ClassName = Annotated[str, AfterValidator(parse_class_name)]
PackageName = Annotated[str, AfterValidator(parse_package_name)]


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class PluginRequest(BaseModel):
    """User input for one generation run.

    Values are kept exactly as typed; the only check is that none is blank.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Human-readable plugin name")
    version: str = Field(..., min_length=1, description="Version string, passed through as-is")
    description: str = Field(..., min_length=1, description="Free-text behaviour description")

    @classmethod
    def create(
        cls,
        name: str | None,
        version: str | None,
        description: str | None,
    ) -> "PluginRequest":
        """Build a request, raising :class:`RequestValidationError` on blank fields."""
        fields = {"name": name, "version": version, "description": description}
        missing = [key for key, value in fields.items() if not value or not value.strip()]
        if missing:
            raise RequestValidationError(missing)
        return cls(name=name, version=version, description=description)


# ---------------------------------------------------------------------------
# Generated artifact
# ---------------------------------------------------------------------------


class GeneratedArtifact(BaseModel):
    """Source and manifest text produced by the generation service.

    ``class_name`` and ``package_name`` are authoritative: every other file in
    the project must reference exactly these values.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_text: str = Field(..., alias="java", description="Java source of the main class")
    manifest_text: str = Field(..., alias="yml", description="plugin.yml content")
    class_name: ClassName = Field(..., alias="className")
    package_name: PackageName = Field(..., alias="packageName")

    @property
    def artifact_id(self) -> str:
        return artifact_id(self.class_name)

    @property
    def package_path(self) -> str:
        return package_path(self.package_name)

    @property
    def main_class(self) -> str:
        """Fully-qualified name of the plugin's main class."""
        return f"{self.package_name}.{self.class_name}"

    @property
    def source_path(self) -> str:
        return source_file_path(self.package_name, self.class_name)


# ---------------------------------------------------------------------------
# Project layout
# ---------------------------------------------------------------------------

FileContent = Union[str, bytes]


@dataclass(eq=False)
class ProjectLayout:
    """Ordered mapping of relative POSIX path to file content.

    Paths are checked on insertion: no absolute paths, no backslashes, no
    empty or dot segments, no duplicates.  Two layouts are equal only when
    they hold the same files in the same order with the same notes.
    """

    files: dict[str, FileContent] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)

    def add(self, path: str, content: FileContent) -> None:
        if not path:
            raise AssemblyError("Refusing to add a file with an empty path")
        if path.startswith("/"):
            raise AssemblyError(f"Layout paths must be relative: {path!r}")
        if "\\" in path:
            raise AssemblyError(f"Layout paths must use '/' separators: {path!r}")
        for segment in path.split("/"):
            if segment in ("", ".", ".."):
                raise AssemblyError(f"Layout path has an empty or relative segment: {path!r}")
        if path in self.files:
            raise AssemblyError(f"Duplicate layout path: {path!r}")
        self.files[path] = content

    def paths(self) -> list[str]:
        return list(self.files)

    def items(self) -> Iterator[tuple[str, FileContent]]:
        return iter(self.files.items())

    def __getitem__(self, path: str) -> FileContent:
        return self.files[path]

    def __contains__(self, path: object) -> bool:
        return path in self.files

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectLayout):
            return NotImplemented
        return (
            list(self.files.items()) == list(other.files.items())
            and self.notes == other.notes
        )
