"""Build configuration for tonpack.

This module contains the configuration model describing how a release of the
native library is built and packaged, and the helpers that assemble it from
defaults, a configuration file, environment variables and command-line
overrides.
"""

from __future__ import annotations

import copy
import json
import os
import pathlib
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from tonpack.build.platforms import LIBRARY_IDENTIFIER, PRODUCT_PREFIX, detect_host_os
from tonpack.utils.exceptions import ConfigurationError

ENV_PREFIX = "TONPACK_"

DEFAULT_LOGGING: Dict[str, Any] = {
    "level": "INFO",
    "format": "text",
    "console": {"enabled": True},
    "file": {
        "enabled": False,
        "path": "logs/tonpack.log",
        "max_bytes": 10 * 1024 * 1024,
        "backup_count": 5,
    },
}


class BuildConfig(BaseModel):
    """Configuration for one release packaging run.

    Attributes:
        library_identifier: Name of the library as the toolchain knows it
        product_prefix: Leading part of every archive name
        version: Release version; read from the manifest when not given
        manifest_path: Project manifest holding the version
        project_dir: Working directory for toolchain commands
        build_root: Directory containing the toolchain's ``target`` directory
        output_dir: Directory receiving the archives, recreated on every run
        dev_mode: Skip the dependency refresh before building
        host_os: Operating system name; detected when not given
        update_command: Dependency lock refresh command
        build_command: Release build command
        post_build_hook: ``module:ClassName`` of a hook applied to each artifact
        logging: Logging settings (level, format, console, file)
    """

    library_identifier: str = LIBRARY_IDENTIFIER
    product_prefix: str = PRODUCT_PREFIX
    version: Optional[str] = None
    manifest_path: pathlib.Path = pathlib.Path("package.json")
    project_dir: pathlib.Path = pathlib.Path(".")
    build_root: pathlib.Path = pathlib.Path("..")
    output_dir: pathlib.Path = pathlib.Path("bin")
    dev_mode: bool = False
    host_os: Optional[str] = None
    update_command: List[str] = Field(default_factory=lambda: ["cargo", "update"])
    build_command: List[str] = Field(default_factory=lambda: ["cargo", "build", "--release"])
    post_build_hook: Optional[str] = None
    logging: Dict[str, Any] = Field(default_factory=lambda: copy.deepcopy(DEFAULT_LOGGING))

    model_config = {"frozen": True}

    @field_validator("update_command", "build_command", mode="before")
    @classmethod
    def validate_command(cls, v: Any) -> Any:
        """Accept a command given as a single string."""
        if isinstance(v, str):
            v = v.split()
        if not v:
            raise ValueError("Command must not be empty")
        return v

    @field_validator("library_identifier")
    @classmethod
    def validate_library_identifier(cls, v: str) -> str:
        if not v or "{}" in v:
            raise ValueError(f"Invalid library identifier: {v!r}")
        return v

    @field_validator("product_prefix")
    @classmethod
    def validate_product_prefix(cls, v: str) -> str:
        """The prefix is the first archive name segment and must not contain the delimiter."""
        if not v or "_" in v:
            raise ValueError(f"Product prefix must be non-empty and must not contain '_': {v!r}")
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and (not v or "_" in v):
            raise ValueError(f"Version must be non-empty and must not contain '_': {v!r}")
        return v

    def resolved_host_os(self) -> str:
        return self.host_os or detect_host_os()

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> BuildConfig:
        """Create a BuildConfig from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values.

        Returns:
            BuildConfig instance.

        Raises:
            ConfigurationError: If the values do not validate.
        """
        try:
            return cls(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid build configuration: {e}") from e

    @classmethod
    def from_file(cls, path: Union[str, pathlib.Path]) -> BuildConfig:
        """Load a BuildConfig from a JSON or YAML file.

        Args:
            path: Path to the configuration file.

        Returns:
            BuildConfig instance.
        """
        return cls.from_dict(load_config_file(path))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the BuildConfig to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    def to_json_file(self, json_path: Union[str, pathlib.Path]) -> None:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config_file(path: Union[str, pathlib.Path]) -> Dict[str, Any]:
    """Read a configuration file into a dictionary.

    Files ending in ``.json`` are parsed as JSON, everything else as YAML.

    Raises:
        ConfigurationError: If the file is missing or cannot be parsed.
    """
    path = pathlib.Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}", config_key="config_path")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Error parsing config file {path}: {str(e)}", config_key="config_path"
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping", config_key="config_path"
        )
    return data


def parse_env_value(value: str) -> Any:
    """Parse environment variable values into appropriate types.

    Args:
        value: The string value from the environment

    Returns:
        The parsed value (bool, int, or string)
    """
    if value.lower() in ("true", "yes", "1", "on"):
        return True
    if value.lower() in ("false", "no", "0", "off"):
        return False
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    return value


def env_overrides(
        environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX
) -> Dict[str, Any]:
    """Collect configuration overrides from prefixed environment variables.

    ``TONPACK_DEV_MODE=1`` sets ``dev_mode``; ``TONPACK_LOGGING_LEVEL=debug``
    sets ``logging.level``. Variables naming a top-level field are matched
    before being split into nested keys, and nested keys that already exist
    in the defaults keep their underscores, so
    ``TONPACK_LOGGING_FILE_MAX_BYTES`` sets ``logging.file.max_bytes``.
    """
    environ = os.environ if environ is None else environ
    fields = set(BuildConfig.model_fields)
    defaults = BuildConfig().to_dict()
    overrides: Dict[str, Any] = {}

    for env_name, env_value in environ.items():
        if not env_name.startswith(prefix):
            continue
        key = env_name[len(prefix):].lower()
        if key in fields:
            # Only the flag is typed; names and versions such as "1" stay strings
            overrides[key] = parse_env_value(env_value) if key == "dev_mode" else env_value
            continue
        head, _, rest = key.partition("_")
        if head in fields and rest:
            path = [head, *_nested_path(rest.split("_"), defaults.get(head))]
            _set_nested_value(overrides, path, parse_env_value(env_value))

    return overrides


def _nested_path(parts: List[str], known: Any) -> List[str]:
    """Group underscore-separated parts into keys, longest known key first."""
    path: List[str] = []
    while parts:
        end = 1
        if isinstance(known, dict):
            end = next(
                (i for i in range(len(parts), 0, -1) if "_".join(parts[:i]) in known), 1
            )
        key = "_".join(parts[:end])
        path.append(key)
        known = known.get(key) if isinstance(known, dict) else None
        parts = parts[end:]
    return path


def _set_nested_value(config: Dict[str, Any], path: List[str], value: Any) -> None:
    current = config
    for part in path[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[path[-1]] = value


def merge_config(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge two configuration dictionaries.

    Args:
        base: The base configuration
        override: The configuration whose values take precedence

    Returns:
        A new merged dictionary
    """
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value
    return result


def load_build_config(
        config_path: Optional[Union[str, pathlib.Path]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
) -> BuildConfig:
    """Assemble the configuration for a run.

    Precedence, lowest first: model defaults, the configuration file,
    ``TONPACK_*`` environment variables, explicit overrides.

    Args:
        config_path: Optional JSON or YAML configuration file
        overrides: Values from the command line
        environ: Environment to read instead of ``os.environ``

    Returns:
        BuildConfig instance
    """
    data: Dict[str, Any] = BuildConfig().to_dict()
    if config_path is not None:
        data = merge_config(data, load_config_file(config_path))
    data = merge_config(data, env_overrides(environ))
    if overrides:
        data = merge_config(data, {k: v for k, v in overrides.items() if v is not None})
    return BuildConfig.from_dict(data)
