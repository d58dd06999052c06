"""Post-build hooks applied to each artifact before it is archived."""

from __future__ import annotations

import abc
import importlib
import pathlib
from typing import Optional

from tonpack.utils.exceptions import ConfigurationError


class PostBuildHook(abc.ABC):
    """Extension point for inspecting or modifying a built artifact."""

    @abc.abstractmethod
    def apply(self, artifact_path: pathlib.Path, host_os: str) -> None:
        """Process one artifact.

        Args:
            artifact_path: Path to the built file
            host_os: Operating system the artifact was built on
        """


class NoOpPostBuildHook(PostBuildHook):
    """Leaves artifacts untouched."""

    def apply(self, artifact_path: pathlib.Path, host_os: str) -> None:
        return None


def load_hook(spec: Optional[str]) -> PostBuildHook:
    """Instantiate a hook from a ``module:ClassName`` reference.

    Args:
        spec: Dotted reference, or None for the no-op hook

    Returns:
        PostBuildHook instance

    Raises:
        ConfigurationError: If the reference cannot be imported or is not a hook
    """
    if not spec:
        return NoOpPostBuildHook()

    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Post-build hook must be given as 'module:ClassName', got {spec!r}",
            config_key="post_build_hook",
        )

    try:
        module = importlib.import_module(module_name)
        hook = getattr(module, attr)()
    except (ImportError, AttributeError, TypeError) as e:
        raise ConfigurationError(
            f"Cannot load post-build hook {spec!r}: {e}", config_key="post_build_hook"
        ) from e

    if not isinstance(hook, PostBuildHook):
        raise ConfigurationError(
            f"{spec!r} is not a PostBuildHook", config_key="post_build_hook"
        )
    return hook
