"""Unit tests for the exceptions module."""

import pathlib

import pytest

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


def test_tonpack_error():
    """Test the base TonpackError class."""
    error = TonpackError("Test error message")
    assert str(error) == "Test error message"
    assert error.details == {}

    error = TonpackError("Test with details", key="value", number=123)
    assert error.details == {"key": "value", "number": 123}


def test_configuration_error():
    error = ConfigurationError("Bad value", config_key="output_dir")
    assert str(error) == "Bad value"
    assert error.config_key == "output_dir"
    assert error.details["details"] == {"config_key": "output_dir"}


def test_toolchain_failure():
    error = ToolchainFailure(
        "'cargo build --release' exited with status 101",
        command=("cargo", "build", "--release"),
        returncode=101,
        output="error: could not compile",
    )
    assert str(error) == "[toolchain] 'cargo build --release' exited with status 101"
    assert error.command == ["cargo", "build", "--release"]
    assert error.details["returncode"] == 101
    assert error.artifact is None


def test_filesystem_failure():
    error = FilesystemFailure("Cannot reset output directory bin", path="bin")
    assert error.path == pathlib.Path("bin")
    assert str(error).startswith("[reset-output]")


def test_missing_artifact():
    path = pathlib.Path("target/release/libton_client.so")
    error = MissingArtifact(path)
    assert error.step == "resolve"
    assert error.path == path
    assert str(error) == f"[resolve] Expected build output not found: {path} (artifact: {path})"

    # The step can be narrowed without affecting the class default
    assert MissingArtifact(path, step="archive").step == "archive"
    assert MissingArtifact.step == "resolve"


@pytest.mark.parametrize("error_cls, step", [
    (PostBuildFailure, "post-build"),
    (ArchiveFailure, "archive"),
])
def test_step_errors(error_cls, step):
    error = error_cls("failed", artifact="ton_client.dll")
    assert isinstance(error, PackagingError)
    assert isinstance(error, TonpackError)
    assert error.details["step"] == step
    assert str(error) == f"[{step}] failed (artifact: ton_client.dll)"
