"""Zip packaging and the download trigger.

``build_archive`` turns a :class:`ProjectLayout` into zip bytes entirely in
memory.  Entries carry a fixed timestamp so equal layouts give equal
archives.  ``save_archive`` is the only function here that touches the
file system.
"""

from __future__ import annotations

import asyncio
import io
import zipfile
import zlib
from pathlib import Path

from ..errors import PackagingError
from ..models import ProjectLayout

# Earliest timestamp the zip format can represent.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def archive_filename(class_name: str) -> str:
    """Name of the downloaded archive, e.g. ``LightningWand-plugin-project.zip``."""
    return f"{class_name}-plugin-project.zip"


def build_archive(layout: ProjectLayout) -> bytes:
    """Compress every file of *layout* into a zip and return its bytes.

    Raises:
        PackagingError: If the zip primitive fails.  The partial buffer is
            discarded.
    """
    if not len(layout):
        raise PackagingError("Cannot package an empty project layout")

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path, content in layout.items():
                info = zipfile.ZipInfo(path, date_time=_ZIP_EPOCH)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                data = content.encode("utf-8") if isinstance(content, str) else content
                zf.writestr(info, data)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, ValueError, OSError) as exc:
        buffer.close()
        raise PackagingError(f"An error occurred while creating the zip file: {exc}") from exc
    return buffer.getvalue()


def _write_file(path: Path, data: bytes) -> None:
    """Synchronous helper: create parent dirs and write bytes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def save_archive(data: bytes, output_dir: str | Path, class_name: str) -> Path:
    """Write *data* to ``<output_dir>/<ClassName>-plugin-project.zip``.

    Returns:
        The path of the written archive.

    Raises:
        PackagingError: If the file cannot be written.
    """
    target = Path(output_dir) / archive_filename(class_name)
    try:
        await asyncio.to_thread(_write_file, target, data)
    except OSError as exc:
        raise PackagingError(f"Could not save {target}: {exc}") from exc
    return target
