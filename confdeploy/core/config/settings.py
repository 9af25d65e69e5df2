"""
Deploy settings — reads confdeploy.yml into a typed model.

Settings are resolved in precedence order:
    environment variables  >  confdeploy.yml  >  model defaults

The file is optional. When present it is validated against the
``DeploySettings`` schema; a broken file is an error, never silently
ignored.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from confdeploy.core.deploy.coordinator import DeployOptions
from confdeploy.core.features import FLAGS, FeatureFlag
from confdeploy.core.persistence.stubs import StubRecorder

logger = logging.getLogger(__name__)

# Default settings filename
SETTINGS_FILE = "confdeploy.yml"

_ENV_BOOLS = {
    "dry_run": "CONFDEPLOY_DRY_RUN",
    "continue_on_error": "CONFDEPLOY_CONTINUE_ON_ERROR",
}
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when the settings file is invalid or unreadable."""


class DeploySettings(BaseModel):
    """Run-wide settings."""

    dry_run: bool = False
    continue_on_error: bool = True
    log_level: str = "WARNING"
    stubs_folder: str | None = None
    features: dict[str, bool] = Field(default_factory=dict)

    def options(self) -> DeployOptions:
        return DeployOptions(dry_run=self.dry_run, continue_on_error=self.continue_on_error)

    def feature_flag(self, name: str) -> FeatureFlag:
        """Flag ``name`` with any override from the settings file applied.

        Raises:
            KeyError: Unknown flag name.
        """
        return FLAGS[name].with_override(self.features.get(name))

    def stub_recorder(self) -> StubRecorder:
        return StubRecorder(Path(self.stubs_folder) if self.stubs_folder else None)


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for confdeploy.yml starting from the given directory, walking up."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _env_bool(var: str) -> bool | None:
    raw = os.environ.get(var)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"{var} must be a boolean (true/false), got {raw!r}")


def load_settings(path: Path | None = None) -> DeploySettings:
    """Load settings from ``path`` (or the nearest confdeploy.yml) and the environment.

    Args:
        path: Explicit settings file. If None, searches upward; a missing
            file means defaults.

    Returns:
        Validated DeploySettings.

    Raises:
        ConfigError: The file is unreadable or invalid, or an environment
            override is malformed.
    """
    if path is None:
        path = find_settings_file()

    data: dict = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Settings file not found: {path}")

        logger.debug("Loading settings from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(loaded).__name__}")
        data = loaded

    for key, var in _ENV_BOOLS.items():
        value = _env_bool(var)
        if value is not None:
            data[key] = value

    if os.environ.get("CONFDEPLOY_LOG_LEVEL"):
        data["log_level"] = os.environ["CONFDEPLOY_LOG_LEVEL"]
    if os.environ.get("CONFDEPLOY_STUBS_FOLDER"):
        data["stubs_folder"] = os.environ["CONFDEPLOY_STUBS_FOLDER"]

    try:
        return DeploySettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


@dataclass
class SettingsCheckResult:
    """Result of settings validation."""

    valid: bool = False
    settings: DeploySettings | None = None
    path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "path": str(self.path) if self.path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "settings": self.settings.model_dump(mode="json") if self.settings else None,
        }


def check_settings(path: Path | None = None) -> SettingsCheckResult:
    """Validate settings and report issues."""
    result = SettingsCheckResult(path=path or find_settings_file())

    try:
        settings = load_settings(result.path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.settings = settings

    if result.path is None:
        result.warnings.append(f"No {SETTINGS_FILE} found, using defaults.")

    unknown = sorted(set(settings.features) - set(FLAGS))
    if unknown:
        result.errors.append(f"Unknown feature flags: {', '.join(unknown)}")

    if settings.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        result.warnings.append(f"Unknown log level '{settings.log_level}', WARNING will be used.")

    if settings.dry_run and not settings.continue_on_error:
        result.warnings.append(
            "continue_on_error is off during a dry run: validation stops at the first failure."
        )

    result.valid = len(result.errors) == 0
    return result
