"""Action input handling for pagesdeploy.

Inputs arrive the way GitHub Actions passes them to a step: as ``INPUT_*``
environment variables. Command-line options override them.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator

from pagesdeploy.exceptions import ConfigError

DEFAULT_TIMEZONE = "UTC"
DEFAULT_WRANGLER_VERSION = "3"

# Field name -> action input name (as declared in action.yml)
INPUT_NAMES = {
    "api_token": "apiToken",
    "account_id": "accountId",
    "project_name": "projectName",
    "directory": "directory",
    "github_token": "gitHubToken",
    "branch": "branch",
    "working_directory": "workingDirectory",
    "wrangler_version": "wranglerVersion",
    "debug": "debug",
    "timezone": "timezone",
    "app_id": "appId",
    "private_key": "privateKey",
    "installation_id": "installationId",
    "reactions": "reactions",
}

REQUIRED_INPUTS = ("api_token", "account_id", "project_name", "directory")


class ActionInputs(BaseModel):
    """Validated inputs for a single deploy run."""

    api_token: str
    account_id: str
    project_name: str
    directory: str
    github_token: str = ""
    branch: str = ""
    working_directory: str = ""
    wrangler_version: str = DEFAULT_WRANGLER_VERSION
    debug: bool = False
    timezone: str = DEFAULT_TIMEZONE
    app_id: str = ""
    private_key: str = ""
    installation_id: str = ""
    reactions: list[str] = Field(default_factory=list)

    @field_validator("reactions", mode="before")
    @classmethod
    def _split_reactions(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [r.strip() for r in value.split("\n") if r.strip()]
        return value

    @field_validator("debug", mode="before")
    @classmethod
    def _blank_debug(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return False
        return value

    @field_validator("timezone", mode="before")
    @classmethod
    def _check_timezone(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TIMEZONE
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: '{value}'")
        return value

    @field_validator("wrangler_version", mode="before")
    @classmethod
    def _default_wrangler(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_WRANGLER_VERSION
        return value

    @property
    def has_app_credentials(self) -> bool:
        return bool(self.app_id and self.private_key and self.installation_id)

    @property
    def has_github_credentials(self) -> bool:
        return bool(self.github_token) or self.has_app_credentials


def read_input_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect raw input values from ``INPUT_*`` environment variables.

    Accepts both the Actions spelling (``INPUT_APITOKEN``) and the snake
    case spelling (``INPUT_API_TOKEN``).
    """
    env = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for field_name, input_name in INPUT_NAMES.items():
        for key in (f"INPUT_{input_name.upper()}", f"INPUT_{field_name.upper()}"):
            if key in env:
                values[field_name] = env[key]
                break
    return values


def build_inputs(values: Mapping[str, Any]) -> ActionInputs:
    """Validate raw values into ActionInputs.

    Raises:
        ConfigError: If a required input is missing or a value is invalid.
    """
    missing = [
        INPUT_NAMES[name] for name in REQUIRED_INPUTS
        if not str(values.get(name) or "").strip()
    ]
    if missing:
        raise ConfigError(f"Input required and not supplied: {', '.join(missing)}")

    data = {k: v for k, v in values.items() if v is not None}
    try:
        return ActionInputs(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{INPUT_NAMES.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid inputs: {problems}") from e


def load_inputs(environ: Mapping[str, str] | None = None) -> ActionInputs:
    """Load and validate inputs straight from the environment."""
    return build_inputs(read_input_env(environ))
