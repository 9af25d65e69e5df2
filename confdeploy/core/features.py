"""
Feature flags — boolean capability gates read from the environment.

A flag is enabled when its environment variable holds a truthy value
(1, true, yes, on). An explicit override, e.g. from the settings file,
takes precedence over the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class FeatureFlag:
    env_var: str
    default: bool = False
    override: bool | None = None

    def enabled(self) -> bool:
        if self.override is not None:
            return self.override
        raw = os.environ.get(self.env_var, "").strip().lower()
        if raw in _TRUTHY:
            return True
        if raw in _FALSY:
            return False
        return self.default

    def with_override(self, value: bool | None) -> FeatureFlag:
        return replace(self, override=value)


# Gates deployment of automation resources (workflows, calendars, rules).
AUTOMATION_RESOURCES = FeatureFlag("CONFDEPLOY_FEATURE_AUTOMATION_RESOURCES")

FLAGS: dict[str, FeatureFlag] = {
    "automation_resources": AUTOMATION_RESOURCES,
}
