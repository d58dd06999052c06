"""Builder for creating tonpack release archives.

This module contains the Builder class that drives a release: running the
native toolchain, resetting the output directory, resolving the artifacts for
the host platform, running the post-build hook on each of them and archiving
them.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import Any, List, Optional

from tonpack.build import archiver
from tonpack.build.config import BuildConfig
from tonpack.build.hooks import PostBuildHook, load_hook
from tonpack.build.platforms import ResolvedArtifact, resolve
from tonpack.build.toolchain import ToolchainInvoker
from tonpack.build.utils import get_project_version, reset_directory
from tonpack.core.logging_manager import get_logger
from tonpack.utils.exceptions import (
    MissingArtifact,
    PackagingError,
    PostBuildFailure,
    TonpackError,
)


@dataclass
class BuildReport:
    """Summary of a completed run.

    Attributes:
        host_os: Operating system the release was packaged for
        version: Version used in archive names
        artifacts: Artifacts resolved for the platform
        archives: Archive files written, in resolution order
    """

    host_os: str
    version: str
    artifacts: List[ResolvedArtifact] = field(default_factory=list)
    archives: List[pathlib.Path] = field(default_factory=list)


class Builder:
    """Builder for creating release archives of the native library.

    Attributes:
        config: Build configuration
        host_os: Operating system being packaged for
        version: Release version
        hook: Post-build hook applied to each artifact
        invoker: Runs the toolchain commands
        logger: Structured logger for build progress
    """

    def __init__(
            self,
            config: BuildConfig,
            hook: Optional[PostBuildHook] = None,
            invoker: Optional[ToolchainInvoker] = None,
            logger: Optional[Any] = None,
    ) -> None:
        """Initialize the Builder with the given configuration.

        The version is resolved once here, so a missing manifest fails before
        the toolchain runs.

        Args:
            config: Build configuration
            hook: Post-build hook; loaded from the configuration when omitted
            invoker: Toolchain invoker; built from the configuration when omitted
            logger: Optional structured logger
        """
        self.config = config
        self.logger = logger or get_logger("tonpack.builder")
        self.host_os = config.resolved_host_os()
        self.version = config.version or get_project_version(config.manifest_path)
        self.hook = hook or load_hook(config.post_build_hook)
        self.invoker = invoker or ToolchainInvoker(
            update_command=config.update_command,
            build_command=config.build_command,
            cwd=config.project_dir,
            dev_mode=config.dev_mode,
            logger=self.logger,
        )

    def run_toolchain(self) -> None:
        self.logger.info("Building native library", dev_mode=self.config.dev_mode)
        self.invoker.invoke()

    def reset_output_dir(self) -> pathlib.Path:
        self.logger.info("Resetting output directory", path=str(self.config.output_dir))
        return reset_directory(self.config.output_dir)

    def resolve_artifacts(self) -> List[ResolvedArtifact]:
        artifacts = list(resolve(
            self.host_os,
            self.config.library_identifier,
            self.config.build_root,
            self.version,
            prefix=self.config.product_prefix,
        ))
        if not artifacts:
            self.logger.warning("No artifacts defined for platform", host_os=self.host_os)
        else:
            self.logger.info(
                "Resolved artifacts",
                host_os=self.host_os,
                artifacts=[str(a.full_path) for a in artifacts],
            )
        return artifacts

    def apply_hook(self, artifact: ResolvedArtifact) -> None:
        """Run the post-build hook on one artifact.

        Raises:
            MissingArtifact: If the artifact was not produced
            PostBuildFailure: If the hook raises
        """
        path = artifact.full_path
        if not path.is_file():
            raise MissingArtifact(path, step="post-build")

        try:
            self.hook.apply(path, self.host_os)
        except TonpackError:
            raise
        except Exception as e:
            raise PostBuildFailure(
                f"Post-build hook {type(self.hook).__name__} failed: {e}", artifact=path
            ) from e

    def package_artifact(self, artifact: ResolvedArtifact) -> pathlib.Path:
        self.apply_hook(artifact)
        target = archiver.archive(artifact.full_path, artifact.archive_base_name, self.config.output_dir)
        self.logger.info("Archived artifact", artifact=str(artifact.full_path), archive=str(target))
        return target

    def build(self) -> BuildReport:
        """Build and package the library according to the configuration.

        This is the main entry point for the build process. Every step runs
        in order and the first failure aborts the run; archives written before
        the failure are left in place.

        Returns:
            BuildReport describing the archives written

        Raises:
            PackagingError: If any step fails
        """
        report = BuildReport(host_os=self.host_os, version=self.version)
        try:
            self.logger.info(
                "Starting release build",
                library=self.config.library_identifier,
                version=self.version,
                host_os=self.host_os,
            )

            self.run_toolchain()
            self.reset_output_dir()

            report.artifacts = self.resolve_artifacts()
            for artifact in report.artifacts:
                report.archives.append(self.package_artifact(artifact))

        except PackagingError as e:
            self.logger.error("Build failed", step=e.step, artifact=e.artifact, error=e.message)
            raise

        self.logger.info("Build completed successfully", archives=len(report.archives))
        return report
