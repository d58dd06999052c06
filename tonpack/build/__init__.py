"""Release build system for the ton_client native library.

This package drives the native toolchain and packages the shared library it
produces into versioned archives for the current platform.

Modules:
    builder: Builder class orchestrating a release run
    config: Build configuration model and loading helpers
    platforms: Platform matrix and artifact resolution
    toolchain: Child process invocation of the toolchain
    hooks: Post-build hook extension point
    archiver: Gzip archiving of artifacts
    cli: Command-line interface for the build system
    utils: Version lookup and output directory handling
"""

from __future__ import annotations

from tonpack.build.builder import Builder, BuildReport
from tonpack.build.config import BuildConfig, load_build_config
from tonpack.build.platforms import (
    PLATFORM_MATRIX,
    ArchiveName,
    ArtifactTemplate,
    HostPlatform,
    ResolvedArtifact,
    resolve,
)
from tonpack.build.cli import main as build_cli

__all__ = [
    "ArchiveName",
    "ArtifactTemplate",
    "Builder",
    "BuildConfig",
    "BuildReport",
    "HostPlatform",
    "PLATFORM_MATRIX",
    "ResolvedArtifact",
    "build_cli",
    "load_build_config",
    "resolve",
]
