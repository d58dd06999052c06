"""Pytest configuration and fixtures for tonpack tests."""

import json
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List

import pytest
import structlog

from tonpack.build.config import BuildConfig

VERSION = "1.2.3"

PLATFORM_FILES: Dict[str, List[str]] = {
    "linux": ["libton_client.so"],
    "darwin": ["libton_client.dylib"],
    "win32": ["ton_client.dll.lib", "ton_client.dll"],
}


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo structlog configuration made by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project layout with a manifest and an empty release directory.

    Layout::

        <tmp>/ton_client/package.json   project dir (toolchain cwd)
        <tmp>/target/release/           build output
    """
    project_dir = tmp_path / "ton_client"
    project_dir.mkdir()
    (project_dir / "package.json").write_text(json.dumps({"name": "ton-client", "version": VERSION}))
    (tmp_path / "target" / "release").mkdir(parents=True)
    return project_dir


@pytest.fixture
def release_dir(project: Path) -> Path:
    return project.parent / "target" / "release"


@pytest.fixture
def build_outputs(release_dir: Path) -> Callable[[str], List[Path]]:
    """Return a function writing the files the toolchain produces on a platform."""

    def _write(host_os: str) -> List[Path]:
        paths = []
        for name in PLATFORM_FILES.get(host_os, []):
            path = release_dir / name
            path.write_bytes(f"binary {name}".encode() * 64)
            paths.append(path)
        return paths

    return _write


@pytest.fixture
def make_config(project: Path) -> Callable[..., BuildConfig]:
    """Return a factory for configurations rooted in the test project.

    Toolchain commands default to no-op Python invocations so that nothing
    outside the temporary directory is touched.
    """

    def _make(**overrides) -> BuildConfig:
        values = {
            "manifest_path": project / "package.json",
            "project_dir": project,
            "build_root": project.parent,
            "output_dir": project / "bin",
            "host_os": "linux",
            "update_command": [sys.executable, "-c", "pass"],
            "build_command": [sys.executable, "-c", "pass"],
        }
        values.update(overrides)
        return BuildConfig(**values)

    return _make


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
