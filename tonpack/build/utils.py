"""Utility functions for the tonpack build system.

This module contains the filesystem and project-metadata helpers used by the
builder: reading the release version from a project manifest and resetting
the output directory.
"""

from __future__ import annotations

import json
import pathlib
import shutil
import tomllib
from typing import Any, Dict, Union

from tonpack.build.platforms import ARCHIVE_DELIMITER
from tonpack.utils.exceptions import ConfigurationError, FilesystemFailure


def get_project_version(manifest_path: Union[str, pathlib.Path]) -> str:
    """Read the release version from a project manifest.

    ``package.json`` style manifests carry a top-level ``version``;
    ``Cargo.toml`` manifests carry ``package.version``.

    Args:
        manifest_path: Path to ``package.json`` or ``Cargo.toml``

    Returns:
        Version string of the project.

    Raises:
        ConfigurationError: If the manifest is missing, unreadable or has no
            version, or if the version contains the archive name delimiter.
    """
    manifest_path = pathlib.Path(manifest_path)
    if not manifest_path.is_file():
        raise ConfigurationError(
            f"Project manifest not found: {manifest_path}", config_key="manifest_path"
        )

    try:
        if manifest_path.suffix.lower() == ".toml":
            with open(manifest_path, "rb") as f:
                data: Dict[str, Any] = tomllib.load(f)
            version = data.get("package", {}).get("version")
        else:
            with open(manifest_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            version = data.get("version")
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Cannot read project manifest {manifest_path}: {e}", config_key="manifest_path"
        ) from e

    if not isinstance(version, str) or not version:
        raise ConfigurationError(
            f"No version found in {manifest_path}", config_key="manifest_path"
        )
    if ARCHIVE_DELIMITER in version:
        raise ConfigurationError(
            f"Version {version!r} in {manifest_path} must not contain {ARCHIVE_DELIMITER!r}",
            config_key="manifest_path",
        )
    return version


def reset_directory(path: Union[str, pathlib.Path]) -> pathlib.Path:
    """Delete a directory tree if present and create it again, empty.

    Args:
        path: Directory to reset

    Returns:
        The directory path

    Raises:
        FilesystemFailure: If the directory cannot be removed or created.
    """
    path = pathlib.Path(path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemFailure(f"Cannot reset output directory {path}: {e}", path=path) from e
    return path
