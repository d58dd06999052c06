"""Platform matrix and artifact resolution for tonpack.

This module holds the static table describing which files the native
toolchain produces on each operating system, and the pure resolver that
turns those templates into concrete build-output paths and archive names.
"""

from __future__ import annotations

import enum
import pathlib
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

LIBRARY_IDENTIFIER = "ton_client"
PRODUCT_PREFIX = "tonclient"
RELEASE_OUTPUT_DIR: Tuple[str, ...] = ("target", "release")
ARCHIVE_DELIMITER = "_"
PLACEHOLDER = "{}"


class HostPlatform(str, enum.Enum):
    """Operating systems a release can be packaged on."""

    AIX = "aix"
    DARWIN = "darwin"
    FREEBSD = "freebsd"
    LINUX = "linux"
    OPENBSD = "openbsd"
    SUNOS = "sunos"
    WIN32 = "win32"

    @classmethod
    def from_name(cls, name: Union[str, HostPlatform]) -> Optional[HostPlatform]:
        """Look up a platform by name, returning None for unknown names."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            return None


# sys.platform prefixes in match order
_SYS_PLATFORM_PREFIXES: Tuple[Tuple[str, HostPlatform], ...] = (
    ("linux", HostPlatform.LINUX),
    ("win32", HostPlatform.WIN32),
    ("cygwin", HostPlatform.WIN32),
    ("darwin", HostPlatform.DARWIN),
    ("freebsd", HostPlatform.FREEBSD),
    ("openbsd", HostPlatform.OPENBSD),
    ("aix", HostPlatform.AIX),
    ("sunos", HostPlatform.SUNOS),
    ("solaris", HostPlatform.SUNOS),
)


def detect_host_os(sys_platform: Optional[str] = None) -> str:
    """Return the name of the host operating system.

    Known systems are normalized to their HostPlatform value; anything else is
    returned as reported, which the resolver treats as having no artifacts.

    Args:
        sys_platform: Value to inspect instead of ``sys.platform``

    Returns:
        Operating system name
    """
    raw = sys_platform if sys_platform is not None else sys.platform
    for prefix, platform in _SYS_PLATFORM_PREFIXES:
        if raw.startswith(prefix):
            return platform.value
    return raw


@dataclass(frozen=True)
class ArtifactTemplate:
    """One output the toolchain is expected to produce on a platform."""

    source_pattern: str
    suffix_tag: str = ""

    def __post_init__(self) -> None:
        if self.source_pattern.count(PLACEHOLDER) != 1:
            raise ValueError(
                f"Artifact pattern must contain exactly one '{PLACEHOLDER}': {self.source_pattern!r}"
            )

    def filename(self, library_identifier: str) -> str:
        return self.source_pattern.replace(PLACEHOLDER, library_identifier)


@dataclass(frozen=True)
class ArchiveName:
    """Structured form of an archive base name.

    Attributes:
        prefix: Product prefix
        version: Release version
        host_os: Operating system the artifact was built on
        suffix_tag: Distinguishes several artifacts of one platform, may be empty
    """

    prefix: str
    version: str
    host_os: str
    suffix_tag: str = ""

    def render(self) -> str:
        parts = [self.prefix, self.version, self.host_os]
        if self.suffix_tag:
            parts.append(self.suffix_tag)
        return ARCHIVE_DELIMITER.join(parts)

    @classmethod
    def parse(cls, base_name: str) -> ArchiveName:
        """Split an archive base name back into its parts.

        Args:
            base_name: Name produced by :meth:`render`

        Returns:
            ArchiveName instance

        Raises:
            ValueError: If the name has fewer than three segments
        """
        parts = base_name.split(ARCHIVE_DELIMITER, 3)
        if len(parts) < 3:
            raise ValueError(f"Not an archive base name: {base_name!r}")
        return cls(*parts)


@dataclass(frozen=True)
class ResolvedArtifact:
    """A concrete build output and the archive it is packaged into."""

    path: Tuple[str, ...]
    archive_base_name: str

    @property
    def full_path(self) -> pathlib.Path:
        return pathlib.Path(*self.path)

    @property
    def name(self) -> str:
        return self.path[-1]


PLATFORM_MATRIX: Mapping[HostPlatform, Tuple[ArtifactTemplate, ...]] = MappingProxyType({
    HostPlatform.AIX: (),
    HostPlatform.DARWIN: (ArtifactTemplate("lib{}.dylib"),),
    HostPlatform.FREEBSD: (),
    HostPlatform.LINUX: (ArtifactTemplate("lib{}.so"),),
    HostPlatform.OPENBSD: (),
    HostPlatform.SUNOS: (),
    # Windows links against the import library and loads the DLL at runtime
    HostPlatform.WIN32: (
        ArtifactTemplate("{}.dll.lib", "lib"),
        ArtifactTemplate("{}.dll", "dll"),
    ),
})


def templates_for(host_os: Union[str, HostPlatform]) -> Tuple[ArtifactTemplate, ...]:
    """Return the artifact templates for an operating system, in table order."""
    platform = HostPlatform.from_name(host_os)
    if platform is None:
        return ()
    return PLATFORM_MATRIX[platform]


def resolve(
        host_os: Union[str, HostPlatform],
        library_identifier: str,
        build_root: Union[str, pathlib.Path],
        version: str,
        prefix: str = PRODUCT_PREFIX,
) -> Tuple[ResolvedArtifact, ...]:
    """Resolve the artifacts the toolchain produced for a host operating system.

    An operating system without an entry in the platform matrix resolves to
    an empty tuple.

    Args:
        host_os: Name of the host operating system
        library_identifier: Library name substituted into each pattern
        build_root: Directory containing the toolchain's ``target`` directory
        version: Release version used in archive names
        prefix: Product prefix used in archive names

    Returns:
        Resolved artifacts in table order
    """
    platform = HostPlatform.from_name(host_os)
    os_name = platform.value if platform is not None else str(host_os)
    root_parts = pathlib.PurePath(build_root).parts or (".",)

    return tuple(
        ResolvedArtifact(
            path=(*root_parts, *RELEASE_OUTPUT_DIR, template.filename(library_identifier)),
            archive_base_name=ArchiveName(prefix, version, os_name, template.suffix_tag).render(),
        )
        for template in templates_for(host_os)
    )
