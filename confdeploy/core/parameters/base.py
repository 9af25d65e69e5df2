"""
Parameter protocol — how a config declares its values.

Every parameter variant offers the same two capabilities:

    resolve(context)  → the concrete value (raises DeploymentError on failure)
    references()      → the other configs' properties this value depends on

The resolver and the ordering code only ever talk to parameters through
this pair, so a new variant is a new subclass, never a change to them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from confdeploy.core.models.coordinate import Coordinate
from confdeploy.core.models.entity import ResolvedEntity

# Reserved parameter names
NAME_PARAMETER = "name"
SCOPE_PARAMETER = "scope"
SKIP_PARAMETER = "skip"

# Property set from the remote-assigned identifier after deployment
ID_PROPERTY = "id"


class ParameterReference(BaseModel):
    """Declares a dependency on ``property`` of the config at ``target``."""

    model_config = ConfigDict(frozen=True)

    target: Coordinate
    property: str

    def __str__(self) -> str:
        return f"{self.target}.{self.property}"


@dataclass(frozen=True)
class ResolveContext:
    """What a parameter may look at while resolving.

    ``resolved_entities`` is a read-only view of the environment's
    registry; parameters must never write to it.
    """

    coordinate: Coordinate
    parameter_name: str
    resolved_entities: Mapping[Coordinate, ResolvedEntity]
    environment: str = ""


class Parameter(ABC):
    """Base class for every parameter variant."""

    type_name: ClassVar[str] = ""

    @abstractmethod
    def resolve(self, context: ResolveContext) -> Any:
        """Produce the concrete value.

        Raises:
            DeploymentError: The value cannot be produced.
        """

    def references(self) -> list[ParameterReference]:
        """Cross-config references, in declaration order."""
        return []

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} type={self.type_name!r}>"
