"""Application configuration: settings schema and diffreport.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "diffreport.yaml"


class Settings(BaseModel):
    title:             str  = Field(default="File Diffs", description="Report heading")
    top:               int  = Field(default=100,   ge=0, description="Max files per report page")
    skip:              int  = Field(default=0,     ge=0, description="Files to skip before the page starts")
    include_content:   bool = Field(default=False, description="Fetch content and render region blocks")
    context_size:      int  = Field(default=5,     ge=0, description="Context lines around each changed region")
    fallback_line_cap: int  = Field(default=50,    ge=0, description="Head/tail lines shown for unchanged files")
    max_workers:       int  = Field(default=4,     ge=1, description="Concurrent file fetches")
    log_level:         str  = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from diffreport.yaml, then DIFFREPORT_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"DIFFREPORT_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def default_config_yaml() -> str:
    """Settings defaults rendered as diffreport.yaml content."""
    return yaml.dump(Settings().model_dump(), default_flow_style=False, sort_keys=False)
