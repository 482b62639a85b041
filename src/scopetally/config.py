from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator


_ENV_REF = re.compile(r"\$\{(?P<name>[A-Za-z_]\w*)(?::-(?P<fallback>[^}]*))?\}")


def expand_env(value: str) -> str:
    """Substitute ``${NAME}`` and ``${NAME:-fallback}`` from the environment."""

    def _lookup(match: re.Match) -> str:
        name, fallback = match.group("name", "fallback")
        resolved = os.environ.get(name, fallback)
        if resolved is None:
            raise ValueError(f"Environment variable ${{{name}}} is not set")
        return resolved

    return _ENV_REF.sub(_lookup, value)


class ReportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    print_enabled: bool = True
    color: bool | None = None
    html: str | None = None
    log_file: str | None = None
    internal_paths: list[str] = []

    @field_validator("html", "log_file")
    @classmethod
    def expand_path(cls, v: str | None) -> str | None:
        return expand_env(v) if v is not None else None

    @field_validator("internal_paths")
    @classmethod
    def expand_paths(cls, v: list[str]) -> list[str]:
        return [expand_env(p) for p in v]


def load_config(path: Path) -> ReportConfig:
    """Load and validate a report config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    config = ReportConfig(**raw)

    # Resolve relative paths relative to config file location
    if config.html and not Path(config.html).is_absolute():
        config.html = str((config_dir / config.html).resolve())
    if config.log_file and not Path(config.log_file).is_absolute():
        config.log_file = str((config_dir / config.log_file).resolve())
    config.internal_paths = [
        p if Path(p).is_absolute() else str((config_dir / p).resolve())
        for p in config.internal_paths
    ]

    return config
