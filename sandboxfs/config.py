"""
sandboxfs configuration

Settings are a pydantic model loaded from a YAML file. Every field has a
default, so a missing config file yields a rootless sandbox.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .exceptions import ConfigError
from .core.filesystem.fs_types import DEFAULT_WORK_DIR_NAME

logger = logging.getLogger('sandboxfs.config')

CONFIG_ENV_VAR = 'SANDBOXFS_CONFIG'

KNOWN_ABIS = ('linux', 'android', 'darwin', 'ios')


def default_config_paths():
    """Config file locations searched when no path is given"""
    paths = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path))
    paths.append(Path.home() / ".sandboxfs" / "config.yaml")
    paths.append(Path("/etc/sandboxfs/config.yaml"))
    return paths


class SandboxConfig(BaseModel):
    """Settings for a host-backed guest filesystem"""
    root_dir: Optional[Path] = None  # None runs rootless
    abi: str = 'linux'
    work_dir_name: str = DEFAULT_WORK_DIR_NAME
    log_level: str = 'INFO'

    @field_validator('root_dir')
    @classmethod
    def validate_root_dir(cls, v):
        """Expand ~ and make the root absolute"""
        if v is None:
            return v
        return Path(os.path.abspath(os.path.expanduser(str(v))))

    @field_validator('abi')
    @classmethod
    def validate_abi(cls, v):
        v = v.strip().lower()
        if v not in KNOWN_ABIS:
            raise ValueError(f"Unknown guest ABI: {v} (expected one of {', '.join(KNOWN_ABIS)})")
        return v

    @field_validator('work_dir_name')
    @classmethod
    def validate_work_dir_name(cls, v):
        """The work directory must be a single path segment under the root"""
        if not v or v in ('.', '..') or '/' in v or '\\' in v:
            raise ValueError(f"Invalid work directory name: {v!r}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v}")
        return v


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_config(path=None, **overrides) -> SandboxConfig:
    """
    Load sandbox configuration

    Args:
        path: Config file; when None the default locations are searched
        overrides: Field values taking precedence over the file (None values
            are ignored)

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file cannot be read or fails validation
    """
    data: Dict[str, Any] = {}
    if path is not None:
        data = _read_yaml(Path(path))
        logger.debug(f"Loaded config from {path}")
    else:
        for candidate in default_config_paths():
            if candidate.exists():
                data = _read_yaml(candidate)
                logger.debug(f"Loaded config from {candidate}")
                break

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return SandboxConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
