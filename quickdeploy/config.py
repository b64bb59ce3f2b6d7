"""
Project configuration (quick-deploy.config.json).

The file is optional; every field has a default. Keys are camelCase on disk.
"""

import json
import os
import re
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .analyzer.registry import FrameworkId
from .errors import ConfigError

CONFIG_FILE_NAME = "quick-deploy.config.json"
CONFIG_ENV_VAR = "QUICK_DEPLOY_CONFIG"
LOG_LEVEL_ENV_VAR = "QUICK_DEPLOY_LOG_LEVEL"


class WranglerOverrides(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    compatibility_date: Optional[str] = None
    compatibility_flags: List[str] = Field(default_factory=list)


class QuickDeployConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    project_name: Optional[str] = Field(default=None, alias="projectName")
    framework: Optional[str] = None
    output_dir: Optional[str] = Field(default=None, alias="outputDir")
    compatibility_date: Optional[str] = Field(default=None, alias="compatibilityDate")
    environment_variables: Dict[str, str] = Field(default_factory=dict, alias="environmentVariables")
    wrangler: WranglerOverrides = Field(default_factory=WranglerOverrides)

    @field_validator("framework")
    @classmethod
    def _known_framework(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        valid = [f.value for f in FrameworkId if f is not FrameworkId.UNKNOWN]
        if value not in valid:
            raise ValueError(f"unknown framework '{value}' (expected one of: {', '.join(valid)})")
        return value

    @field_validator("environment_variables", mode="before")
    @classmethod
    def _stringify_env(cls, value):
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value


def resolve_config_path(root: Path, explicit: Optional[str] = None) -> Path:
    candidate = explicit or os.environ.get(CONFIG_ENV_VAR)
    if candidate:
        path = Path(candidate)
        return path if path.is_absolute() else root / path
    return root / CONFIG_FILE_NAME


def load_config(root: Path, explicit: Optional[str] = None) -> QuickDeployConfig:
    """
    Load and validate the project config.

    Raises:
        ConfigError: If an explicitly requested file is missing, or the file is invalid
    """
    path = resolve_config_path(root, explicit)
    if not path.is_file():
        if explicit or os.environ.get(CONFIG_ENV_VAR):
            raise ConfigError(f"Config file not found: {path}")
        return QuickDeployConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return QuickDeployConfig.model_validate(data)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e


def write_config(path: Path, config: QuickDeployConfig) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(by_alias=True, exclude_none=True), f, indent=2)
        f.write("\n")


def worker_name(name: str) -> str:
    """Lowercase a project name into a valid Workers script name."""
    cleaned = re.sub(r"[^a-z0-9-]", "-", name.lower()).strip("-")
    return cleaned or "quick-deploy-app"


def today() -> str:
    return date.today().isoformat()
