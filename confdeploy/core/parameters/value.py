"""
Value and environment parameters — values known without deploying anything.
"""

from __future__ import annotations

import os
from typing import Any

from confdeploy.core.errors import ParameterResolutionError
from confdeploy.core.parameters.base import Parameter, ResolveContext

_NO_DEFAULT = object()


class ValueParameter(Parameter):
    """A literal value (string, number, bool, list or mapping)."""

    type_name = "value"

    def __init__(self, value: Any):
        self.value = value

    def resolve(self, context: ResolveContext) -> Any:
        return self.value


class EnvironmentParameter(Parameter):
    """Reads an environment variable of the deploying process.

    Missing variables fail unless a default was given.
    """

    type_name = "environment"

    def __init__(self, name: str, default: Any = _NO_DEFAULT):
        self.name = name
        self.default = default

    @property
    def has_default(self) -> bool:
        return self.default is not _NO_DEFAULT

    def resolve(self, context: ResolveContext) -> Any:
        if self.name in os.environ:
            return os.environ[self.name]
        if self.has_default:
            return self.default
        raise ParameterResolutionError(
            f"environment variable `{self.name}` not set",
            coordinate=context.coordinate,
            parameter=context.parameter_name,
            environment=context.environment or None,
        )
