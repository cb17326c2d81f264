"""
TMCDButils/config.py

Ingestion settings loaded from a YAML file and the environment.
Precedence, lowest first: defaults, YAML file, environment, explicit overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .backends.mongodb import DEFAULT_DATABASE
from .exceptions import ConfigError

ENV_VARS = {
    "TMCDB_URL": "connection_string",
    "TMCDB_DATABASE": "database",
    "TMCDB_WORKERS": "num_workers",
    "TMCDB_QUEUE_SIZE": "queue_size",
}


class IngestSettings(BaseModel):
    """Validated ingestion settings."""

    connection_string: Optional[str] = None
    database: str = DEFAULT_DATABASE
    num_workers: int = Field(default=4, gt=0)
    queue_size: int = Field(default=10000, gt=0)
    existence_capacity: int = Field(default=250000, gt=0)
    existence_stripes: int = Field(default=16, gt=0)
    preallocate: bool = True
    shard_collections: bool = False
    hour_offset: int = 3
    sample_time: int = Field(default=1, gt=0)
    progress_every: int = Field(default=10000, ge=0)
    poll_interval: float = Field(default=0.5, gt=0)


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML mapping; an empty file yields an empty dict."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def env_overrides(environ=None) -> Dict[str, str]:
    environ = os.environ if environ is None else environ
    return {field: environ[var] for var, field in ENV_VARS.items() if environ.get(var)}


def load_settings(path: Optional[Union[str, Path]] = None, environ=None, **overrides) -> IngestSettings:
    """Merge defaults, YAML file, environment and ``overrides`` into settings."""
    values: Dict[str, Any] = {}
    if path:
        values.update(load_yaml(path))
    values.update(env_overrides(environ))
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return IngestSettings(**values)
    except PydanticValidationError as exc:
        raise ConfigError(str(exc)) from exc
