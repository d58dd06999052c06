from __future__ import annotations

import pathlib
from typing import Any, List, Optional, Sequence, Union


class TonpackError(Exception):
    """Base exception for all tonpack errors."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        """
        Initialize exception.

        Args:
            message: Error message
            **kwargs: Additional error information
        """
        self.message = message
        self.details = kwargs
        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.message}"


class ConfigurationError(TonpackError):
    """Exception raised for configuration-related errors."""

    def __init__(
            self, message: str, *args: Any, config_key: Optional[str] = None, **kwargs: Any
    ) -> None:
        """Initialize a ConfigurationError.

        Args:
            message: A descriptive error message.
            *args: Additional positional arguments to pass to the parent Exception.
            config_key: The configuration key that caused the error.
            **kwargs: Additional keyword arguments to pass to the parent Exception.
        """
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, *args, details=details, **kwargs)
        self.config_key = config_key


class PackagingError(TonpackError):
    """Base exception for failures of a release pipeline step."""

    step = "packaging"

    def __init__(
            self,
            message: str,
            artifact: Optional[Union[str, pathlib.Path]] = None,
            **kwargs: Any
    ) -> None:
        """
        Initialize packaging error.

        Args:
            message: Error message
            artifact: Path of the artifact being processed, if any
            **kwargs: Additional error information
        """
        super().__init__(message, step=self.step, artifact=artifact, **kwargs)
        self.artifact = str(artifact) if artifact is not None else None

    def __str__(self) -> str:
        """String representation."""
        if self.artifact:
            return f"[{self.step}] {self.message} (artifact: {self.artifact})"
        return f"[{self.step}] {self.message}"


class ToolchainFailure(PackagingError):
    """Exception raised when a toolchain command fails or cannot be launched."""

    step = "toolchain"

    def __init__(
            self,
            message: str,
            command: Sequence[str],
            returncode: Optional[int] = None,
            output: str = "",
            **kwargs: Any
    ) -> None:
        """
        Initialize toolchain failure.

        Args:
            message: Error message
            command: The command line that failed
            returncode: Exit status, or None if the process never started
            output: Captured combined output of the command
            **kwargs: Additional error information
        """
        super().__init__(message, command=list(command), returncode=returncode, **kwargs)
        self.command: List[str] = list(command)
        self.returncode = returncode
        self.output = output


class FilesystemFailure(PackagingError):
    """Exception raised when the output directory cannot be reset."""

    step = "reset-output"

    def __init__(self, message: str, path: Union[str, pathlib.Path], **kwargs: Any) -> None:
        super().__init__(message, path=str(path), **kwargs)
        self.path = pathlib.Path(path)


class MissingArtifact(PackagingError):
    """Exception raised when the toolchain did not produce an expected artifact."""

    step = "resolve"

    def __init__(
            self, path: Union[str, pathlib.Path], step: Optional[str] = None, **kwargs: Any
    ) -> None:
        if step:
            self.step = step
        super().__init__(f"Expected build output not found: {path}", artifact=path, **kwargs)
        self.path = pathlib.Path(path)


class PostBuildFailure(PackagingError):
    """Exception raised when a post-build hook fails."""

    step = "post-build"


class ArchiveFailure(PackagingError):
    """Exception raised when an artifact cannot be archived."""

    step = "archive"
