"""Configuration management for Drift Radar."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from driftradar.exceptions import ConfigError

DRIFTRADAR_DIR = ".driftradar"
CONFIG_FILE = "config.json"
BASELINE_DB_FILE = "baseline.db"

DEFAULT_COMMENT_TAG = "<!-- drift-radar -->"


class GitHubConfig(BaseModel):
    """GitHub access and comment publishing."""

    token_env: str = "GITHUB_TOKEN"
    comment_tag: str = DEFAULT_COMMENT_TAG
    timeout: int = 30

    @property
    def token(self) -> str | None:
        if self.token_env:
            value = os.environ.get(self.token_env)
            if value:
                return value
        # gh's own variable, so a locally authenticated shell keeps working
        return os.environ.get("GH_TOKEN")


class BaselineConfig(BaseModel):
    """Rolling baseline settings."""

    history_prs: int = Field(default=20, ge=1)
    default_branch: str = "main"


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    baseline: BaselineConfig = Field(default_factory=BaselineConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .driftradar directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / DRIFTRADAR_DIR).is_dir():
            return current
        current = current.parent
    if (current / DRIFTRADAR_DIR).is_dir():
        return current
    return None


def get_driftradar_dir(root: Path) -> Path:
    """Get the .driftradar directory for a project root."""
    return root / DRIFTRADAR_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .driftradar/config.json."""
    config_path = get_driftradar_dir(root) / CONFIG_FILE
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            return ProjectConfig(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    return ProjectConfig(name=root.name, root_path=str(root))


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .driftradar/config.json."""
    dr_dir = get_driftradar_dir(root)
    dr_dir.mkdir(parents=True, exist_ok=True)
    config_path = dr_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'baseline.history_prs')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from e
