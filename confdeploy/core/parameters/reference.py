"""
Reference parameter — a value produced by deploying another config.
"""

from __future__ import annotations

from typing import Any

from confdeploy.core.errors import (
    MissingPropertyError,
    ReferenceToSkippedConfigError,
    UnresolvedDependencyError,
)
from confdeploy.core.models.coordinate import Coordinate
from confdeploy.core.parameters.base import Parameter, ParameterReference, ResolveContext


class ReferenceParameter(Parameter):
    """Reads ``property`` from the resolved entity at ``target``.

    The target must have been processed earlier in the same environment.
    The reference validator normally rejects bad targets before
    ``resolve`` runs; the checks here keep the parameter safe on its own.
    """

    type_name = "reference"

    def __init__(self, target: Coordinate, property: str):
        self.target = target
        self.property = property

    def references(self) -> list[ParameterReference]:
        return [ParameterReference(target=self.target, property=self.property)]

    def resolve(self, context: ResolveContext) -> Any:
        common = {
            "coordinate": context.coordinate,
            "parameter": context.parameter_name,
            "referenced": self.target,
            "property_name": self.property,
            "environment": context.environment or None,
        }

        entity = context.resolved_entities.get(self.target)
        if entity is None:
            raise UnresolvedDependencyError(
                f"referenced config `{self.target}` has not been deployed", **common
            )
        if entity.skip:
            raise ReferenceToSkippedConfigError(
                f"referenced config `{self.target}` is skipped", **common
            )
        if self.property not in entity.properties:
            raise MissingPropertyError(
                f"referenced config `{self.target}` has no property `{self.property}`",
                **common,
            )
        return entity.properties[self.property]

    def __repr__(self) -> str:
        return f"<ReferenceParameter {self.target}.{self.property}>"
