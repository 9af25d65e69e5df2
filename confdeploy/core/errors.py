"""
Deployment errors — typed failures collected as values.

Every per-config problem is an instance of ``DeploymentError``. The
engine never lets one of these unwind a run: resolver, dispatcher and
coordinator catch them and append them to an error list, so a single
pass reports every problem at once.

Each error carries a stable ``kind`` string plus the coordinate,
parameter and environment it concerns (where known), enough to
localize the problem without re-running.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from confdeploy.core.models.coordinate import Coordinate


class DeploymentError(Exception):
    """Base class for every error the engine reports."""

    kind = "DeploymentError"

    def __init__(
        self,
        message: str,
        coordinate: Coordinate | None = None,
        parameter: str | None = None,
        environment: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.coordinate = coordinate
        self.parameter = parameter
        self.environment = environment

    def __str__(self) -> str:
        location = ""
        if self.coordinate is not None:
            location = str(self.coordinate)
            if self.parameter:
                location += f":{self.parameter}"
            location = f"[{location}] "
        env = f"(env: {self.environment}) " if self.environment else ""
        return f"{env}{location}{self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "coordinate": str(self.coordinate) if self.coordinate else None,
            "parameter": self.parameter,
            "environment": self.environment,
        }


# ── Reference validation ─────────────────────────────────────────────


class InvalidReferenceError(DeploymentError):
    """A parameter reference that cannot be followed."""

    kind = "ReferenceError"

    def __init__(
        self,
        message: str,
        coordinate: Coordinate | None = None,
        parameter: str | None = None,
        referenced: Coordinate | None = None,
        property_name: str = "",
        environment: str | None = None,
    ):
        super().__init__(message, coordinate, parameter, environment)
        self.referenced = referenced
        self.property_name = property_name

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["referenced"] = str(self.referenced) if self.referenced else None
        data["property"] = self.property_name
        return data


class SelfReferenceError(InvalidReferenceError):
    kind = "SelfReference"


class UnresolvedDependencyError(InvalidReferenceError):
    kind = "UnresolvedDependency"


class ReferenceToSkippedConfigError(InvalidReferenceError):
    kind = "ReferenceToSkippedConfig"


class MissingPropertyError(InvalidReferenceError):
    """The referenced config was deployed but has no such property."""

    kind = "MissingProperty"


# ── Parameter resolution ─────────────────────────────────────────────


class ParameterResolutionError(DeploymentError):
    kind = "ParameterResolution"


class MissingNameParameterError(DeploymentError):
    kind = "MissingNameParameter"


class InvalidNameTypeError(DeploymentError):
    kind = "InvalidNameType"


class MissingScopeParameterError(DeploymentError):
    kind = "MissingScopeParameter"


# ── Dispatch ─────────────────────────────────────────────────────────


class DuplicateNameError(DeploymentError):
    kind = "DuplicateName"


class FeatureDisabledError(DeploymentError):
    kind = "FeatureDisabled"


class UnknownApiError(DeploymentError):
    kind = "UnknownApi"


class UnresolvedPlaceholderError(DeploymentError):
    """A template placeholder names a key with no value."""

    kind = "UnresolvedPlaceholder"

    def __init__(
        self,
        message: str,
        template_id: str = "",
        key: str = "",
        coordinate: Coordinate | None = None,
    ):
        super().__init__(message, coordinate)
        self.template_id = template_id
        self.key = key


class InvalidJsonError(DeploymentError):
    """The rendered payload is not well-formed JSON."""

    kind = "InvalidJson"


class RemoteCallFailedError(DeploymentError):
    """Wraps any exception raised by the remote client."""

    kind = "RemoteCallFailed"

    def __init__(
        self,
        message: str,
        coordinate: Coordinate | None = None,
        cause: BaseException | None = None,
        environment: str | None = None,
    ):
        super().__init__(message, coordinate, environment=environment)
        self.cause = cause


# ── Ordering ─────────────────────────────────────────────────────────


class CycleDetectedError(DeploymentError):
    """Configs reference each other in a loop; no deploy order exists."""

    kind = "CycleDetected"

    def __init__(self, cycle: list[Coordinate], environment: str | None = None):
        chain = " -> ".join(str(c) for c in [*cycle, cycle[0]]) if cycle else ""
        super().__init__(
            f"cyclic dependency between configs: {chain}",
            environment=environment,
        )
        self.cycle = list(cycle)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["cycle"] = [str(c) for c in self.cycle]
        return data
