"""Application configuration: settings schema and hpal.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "hpal.yaml"
DOCS_URL = "https://raw.githubusercontent.com/{owner}/{pkg}/{ref}/API.md"


class Settings(BaseModel):
    default_owner: str = Field(default="hapijs", description="GitHub owner for packages without a known owner")
    default_ref:   str = Field(default="master", description="Git ref used when no version can be resolved")
    docs_url:      str = Field(default=DOCS_URL, description="Template for the raw API.md location")
    fetch_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds for docs fetches")
    color:         bool = Field(default=True, description="Colorize terminal output")
    width:         Optional[int] = Field(default=None, ge=20, description="Terminal render width; None = auto")
    log_level:     str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    manifest_names: list[str] = Field(default=[".hc.yaml", ".hc.yml"], description="Amendment file names")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from hpal.yaml, then HPAL_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"HPAL_{name.upper()}"):
            data[name] = val.split(",") if name == "manifest_names" else val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
