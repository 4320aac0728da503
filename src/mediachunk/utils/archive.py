"""Zip archives of exported chunk directories."""

from __future__ import annotations

import zipfile
from pathlib import Path

from mediachunk.utils.progress import log_step


def zip_directory(source_dir: Path | str, output_path: Path | str | None = None) -> Path:
    """Zip the contents of ``source_dir`` (entries relative to it).

    Defaults to ``<source_dir>.zip`` beside the directory.
    """
    source_dir = Path(source_dir).resolve()
    if not source_dir.is_dir():
        raise NotADirectoryError(f"Not a directory: {source_dir}")

    output_path = Path(output_path) if output_path else source_dir.with_suffix(".zip")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with zipfile.ZipFile(
        output_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
    ) as archive:
        for file_path in sorted(source_dir.rglob("*")):
            if file_path.is_file() and file_path.resolve() != output_path.resolve():
                archive.write(file_path, file_path.relative_to(source_dir))
                count += 1

    log_step("Zip", f"Archived {count} file(s) to {output_path}")
    return output_path
