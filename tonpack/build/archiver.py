"""Gzip archiving of build artifacts."""

from __future__ import annotations

import gzip
import pathlib
import shutil
from typing import Union

from tonpack.utils.exceptions import ArchiveFailure, MissingArtifact

ARCHIVE_EXTENSION = "gz"


def archive_path_for(archive_base_name: str, output_dir: Union[str, pathlib.Path]) -> pathlib.Path:
    return pathlib.Path(output_dir) / f"{archive_base_name}.{ARCHIVE_EXTENSION}"


def archive(
        artifact_path: Union[str, pathlib.Path],
        archive_base_name: str,
        output_dir: Union[str, pathlib.Path],
) -> pathlib.Path:
    """Compress a single artifact into ``<output_dir>/<archive_base_name>.gz``.

    A partially written archive is removed before the error is raised.

    Args:
        artifact_path: File to compress
        archive_base_name: Archive file name without extension
        output_dir: Directory receiving the archive

    Returns:
        Path to the written archive

    Raises:
        MissingArtifact: If the artifact does not exist
        ArchiveFailure: If compression or writing fails
    """
    artifact_path = pathlib.Path(artifact_path)
    target = archive_path_for(archive_base_name, output_dir)

    if not artifact_path.is_file():
        raise MissingArtifact(artifact_path, step="archive")

    try:
        with open(artifact_path, "rb") as src, gzip.open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)
    except Exception as e:
        target.unlink(missing_ok=True)
        raise ArchiveFailure(
            f"Failed to write {target}: {e}", artifact=artifact_path, archive=str(target)
        ) from e

    return target
