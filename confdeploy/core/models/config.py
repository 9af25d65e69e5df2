"""
Config model — one deployable configuration object.

A config pairs a template with the parameters that fill it, and says
which remote API family it targets through its ``type``:

    ClassicApiType   classic config API (dashboards, alerting profiles, ...)
    SettingsType     settings 2.0 object of a schema, bound to a scope
    EntityType       custom monitored entity of an entities type
    AutomationType   automation resource (workflow, calendar, rule)

Configs are built once per run from project data and never modified by
the engine.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from confdeploy.core.models.coordinate import Coordinate
from confdeploy.core.parameters.base import (
    NAME_PARAMETER,
    Parameter,
    ParameterReference,
)
from confdeploy.core.template.template import Template


class ClassicApiType(BaseModel):
    """Classic config API. Uniqueness of names comes from the API catalog."""

    kind: Literal["classic"] = "classic"
    api: str


class SettingsType(BaseModel):
    """Settings object; the scope comes from the ``scope`` parameter."""

    kind: Literal["settings"] = "settings"
    schema_id: str
    schema_version: str = ""


class EntityType(BaseModel):
    kind: Literal["entity"] = "entity"
    entities_type: str


class AutomationType(BaseModel):
    kind: Literal["automation"] = "automation"
    resource: str   # workflow, business-calendar, scheduling-rule


ConfigType = Annotated[
    Union[ClassicApiType, SettingsType, EntityType, AutomationType],
    Field(discriminator="kind"),
]


class Config(BaseModel):
    """A deployable config.

    ``skip`` is either a literal flag or a parameter resolved at deploy
    time (e.g. an environment parameter).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    coordinate: Coordinate
    type: ConfigType
    template: Template
    parameters: dict[str, Parameter] = Field(default_factory=dict)
    skip: bool | Parameter = False
    environment: str = ""
    group: str = ""

    @property
    def parameter_references(self) -> list[ParameterReference]:
        """Every reference declared by every parameter, in declaration order."""
        refs: list[ParameterReference] = []
        for param in self.parameters.values():
            refs.extend(param.references())
        if isinstance(self.skip, Parameter):
            refs.extend(self.skip.references())
        return refs

    @property
    def references(self) -> list[Coordinate]:
        """Distinct coordinates this config depends on, first-seen order."""
        seen: list[Coordinate] = []
        for ref in self.parameter_references:
            if ref.target not in seen:
                seen.append(ref.target)
        return seen

    @property
    def has_name_parameter(self) -> bool:
        return NAME_PARAMETER in self.parameters

    def describe(self) -> dict[str, Any]:
        """Short serializable summary, used in logs and reports."""
        return {
            "coordinate": str(self.coordinate),
            "type": self.type.kind,
            "environment": self.environment,
            "group": self.group,
            "parameters": sorted(self.parameters),
            "references": [str(c) for c in self.references],
        }
