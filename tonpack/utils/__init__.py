"""Utility functions and classes for tonpack."""

from tonpack.utils.exceptions import (
    ArchiveFailure,
    ConfigurationError,
    FilesystemFailure,
    MissingArtifact,
    PackagingError,
    PostBuildFailure,
    TonpackError,
    ToolchainFailure,
)
