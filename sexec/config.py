"""
Configuration for the spawn collaborator.

ProcessConfig describes how a command line is handed to the OS: which shell
runs it, with which arguments, in which directory and with which environment.
Settings can be built directly or read from the "process" section of a YAML
file loaded with load_config(), which also applies environment overrides:

    # sexec.yaml
    process:
      shell: /bin/sh
      env:
        LANG: C
    logging:
      level: debug

    SEXEC_PROCESS_SHELL=/bin/zsh   # overrides process.shell
    SEXEC_PROCESS_ENV_LANG=C       # sets process.env.LANG
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigError

DEFAULT_SHELL = "/bin/bash"
DEFAULT_SHELL_ARGS: tuple[str, ...] = ("-c",)
DEFAULT_ENV_PREFIX = "SEXEC_"

# Sections whose keys are environment variable names, taken verbatim
VERBATIM_SECTIONS = frozenset({"env"})

# Maximum config file size (1 MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024


def _navigate_to_section(config_dict: Mapping[str, Any], section: str) -> Any:
    """Navigate to a dotted section of a config dict, or {} if absent."""
    current: Any = config_dict
    for part in section.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return {}
    return current if current is not None else {}


def _as_str_tuple(value: Any, key: str) -> tuple[str, ...]:
    """Coerce a scalar or list setting to a tuple of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    raise ConfigError("invalid setting type", key=key, type=type(value).__name__)


@dataclass(frozen=True)
class ProcessConfig:
    """
    Immutable spawn settings for a Process.

    Attributes:
        shell: Shell executable that interprets the command line
        shell_args: Arguments placed between the shell and the command
        inherit: Start the child environment from os.environ
        env: Variables added to (or replacing) the inherited environment
        cwd: Working directory for the child, or None for the caller's
    """

    shell: str = DEFAULT_SHELL
    shell_args: tuple[str, ...] = DEFAULT_SHELL_ARGS
    inherit: bool = True
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: str | None = None

    @classmethod
    def from_params(
        cls,
        shell: str = DEFAULT_SHELL,
        shell_args: Any = DEFAULT_SHELL_ARGS,
        inherit: bool = True,
        env: Mapping[str, Any] | None = None,
        cwd: str | os.PathLike[str] | None = None,
    ) -> ProcessConfig:
        """
        Create a ProcessConfig from individual parameters.

        Args:
            shell: Shell executable path
            shell_args: Single argument or list of arguments for the shell
            inherit: Whether to inherit the caller's environment
            env: Extra environment variables (values converted to str)
            cwd: Working directory for the child

        Returns:
            ProcessConfig instance

        Raises:
            ConfigError: If a setting has an unusable type
        """
        if not isinstance(shell, str) or not shell:
            raise ConfigError("shell must be a non-empty string", shell=shell)
        if env is not None and not isinstance(env, Mapping):
            raise ConfigError("env must be a mapping", type=type(env).__name__)
        return cls(
            shell=shell,
            shell_args=_as_str_tuple(shell_args, "shell_args"),
            inherit=bool(inherit),
            env={str(k): str(v) for k, v in (env or {}).items()},
            cwd=os.fspath(cwd) if cwd is not None else None,
        )

    @classmethod
    def from_config(
        cls, config_dict: Mapping[str, Any], section: str = "process"
    ) -> ProcessConfig:
        """
        Create a ProcessConfig from a configuration dictionary.

        Args:
            config_dict: Configuration dictionary (e.g., from load_config())
            section: Dotted configuration section to use (default: "process")

        Returns:
            ProcessConfig instance, with defaults for missing keys

        Example:
            config = load_config("etc/sexec.yaml")
            proc_config = ProcessConfig.from_config(config, "jobs.process")
        """
        current = _navigate_to_section(config_dict, section)
        if not isinstance(current, Mapping):
            raise ConfigError("config section is not a mapping", section=section)

        return cls.from_params(
            shell=current.get("shell", DEFAULT_SHELL),
            shell_args=current.get("args", DEFAULT_SHELL_ARGS),
            inherit=current.get("inherit", True),
            env=current.get("env") or {},
            cwd=current.get("cwd"),
        )

    def argv(self, command: str) -> list[str]:
        """Argument vector that runs command through the shell."""
        return [self.shell, *self.shell_args, command]

    def environ(self) -> dict[str, str]:
        """Environment for the child process."""
        base = dict(os.environ) if self.inherit else {}
        base.update(self.env)
        return base


def _convert_env_value(value: str) -> Any:
    """Convert an environment variable string to a config value."""
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    # Comma-separated values become lists
    if "," in value:
        return [_convert_env_value(v.strip()) for v in value.split(",")]

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _set_nested_value(data: dict[str, Any], path: list[str], value: Any) -> None:
    """Set a nested value, creating intermediate sections as needed."""
    current = data
    for part in path[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[path[-1]] = value


def _override_path(name: str) -> tuple[list[str], bool]:
    """
    Split an override name into a config path.

    Components are lower-cased and split on underscores, except that
    everything after an "env" component is kept as one key in its original
    case, since it names an environment variable for the child.

    Returns:
        The path, and whether its last key is an environment variable name
    """
    parts = name.split("_")
    path: list[str] = []
    for i, part in enumerate(parts):
        path.append(part.lower())
        if path[-1] in VERBATIM_SECTIONS and i + 1 < len(parts):
            path.append("_".join(parts[i + 1 :]))
            return path, True
    return path, False


def apply_env_overrides(
    config_data: dict[str, Any], env_prefix: str = DEFAULT_ENV_PREFIX
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration data.

    SEXEC_PROCESS_SHELL=/bin/sh sets config_data["process"]["shell"].
    Path components are lower-cased and split on underscores, except under
    an "env" section: SEXEC_PROCESS_ENV_MY_VAR=x sets
    config_data["process"]["env"]["MY_VAR"] to the string "x".

    Args:
        config_data: Configuration dictionary, modified in place
        env_prefix: Prefix selecting the variables to apply

    Returns:
        The updated configuration dictionary
    """
    for key, value in os.environ.items():
        if not key.startswith(env_prefix) or len(key) == len(env_prefix):
            continue
        path, verbatim = _override_path(key[len(env_prefix) :])
        _set_nested_value(
            config_data, path, value if verbatim else _convert_env_value(value)
        )
    return config_data


def load_config(
    fname: str | os.PathLike[str],
    enable_env_overrides: bool = True,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        fname: Path to the YAML file
        enable_env_overrides: Whether to apply SEXEC_* environment overrides
        env_prefix: Prefix for override variables

    Returns:
        dict: Parsed configuration (empty for an empty file)

    Raises:
        ConfigError: If the file is missing, too large, malformed, or its
            top level is not a mapping
    """
    path = Path(fname)
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ConfigError("cannot read config file", path=str(path)) from e

    if size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            "config file too large",
            path=str(path),
            size=size,
            limit=MAX_CONFIG_SIZE_BYTES,
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError("invalid YAML", path=str(path), error=str(e)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            "cannot read config file", path=str(path), error=str(e)
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping", path=str(path))

    if enable_env_overrides:
        data = apply_env_overrides(data, env_prefix)
    return data
