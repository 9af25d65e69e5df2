"""
Parameter variants.

    from confdeploy.core.parameters import ValueParameter, ReferenceParameter
"""

from confdeploy.core.parameters.base import (
    ID_PROPERTY,
    NAME_PARAMETER,
    SCOPE_PARAMETER,
    SKIP_PARAMETER,
    Parameter,
    ParameterReference,
    ResolveContext,
)
from confdeploy.core.parameters.list_parameter import ListParameter
from confdeploy.core.parameters.reference import ReferenceParameter
from confdeploy.core.parameters.value import EnvironmentParameter, ValueParameter

__all__ = [
    "ID_PROPERTY",
    "NAME_PARAMETER",
    "SCOPE_PARAMETER",
    "SKIP_PARAMETER",
    "EnvironmentParameter",
    "ListParameter",
    "Parameter",
    "ParameterReference",
    "ReferenceParameter",
    "ResolveContext",
    "ValueParameter",
]
