"""
Parameter resolution and reference validation.

Resolution is fail-together: every parameter of a config is validated
and resolved independently, and all problems are returned in one list,
so a single run reports everything wrong with a config instead of one
problem per attempt.

Reference rules, checked per declared reference before the parameter
resolves:

    target == own coordinate     → SelfReference
    target not in registry       → UnresolvedDependency
    target registered as skipped → ReferenceToSkippedConfig

A parameter whose references fail validation is not resolved.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from confdeploy.core.errors import (
    DeploymentError,
    InvalidNameTypeError,
    MissingNameParameterError,
    MissingScopeParameterError,
    ParameterResolutionError,
    ReferenceToSkippedConfigError,
    SelfReferenceError,
    UnresolvedDependencyError,
)
from confdeploy.core.models.config import Config, SettingsType
from confdeploy.core.models.coordinate import Coordinate
from confdeploy.core.models.entity import ResolvedEntity
from confdeploy.core.parameters.base import (
    NAME_PARAMETER,
    SCOPE_PARAMETER,
    SKIP_PARAMETER,
    Parameter,
    ResolveContext,
)

logger = logging.getLogger(__name__)


def validate_parameter_references(
    coordinate: Coordinate,
    parameter_name: str,
    parameter: Parameter,
    entities: Mapping[Coordinate, ResolvedEntity],
    environment: str = "",
) -> list[DeploymentError]:
    """Check every reference of one parameter against the registry.

    Args:
        coordinate: Coordinate of the config owning the parameter.
        parameter_name: Name of the parameter (for error messages).
        parameter: The parameter whose references are checked.
        entities: Resolved entities of the current environment.
        environment: Environment name (for error messages).

    Returns:
        One error per invalid reference; empty if all are valid.
    """
    errors: list[DeploymentError] = []
    env = environment or None

    for ref in parameter.references():
        common = {
            "coordinate": coordinate,
            "parameter": parameter_name,
            "referenced": ref.target,
            "property_name": ref.property,
            "environment": env,
        }

        if ref.target == coordinate:
            errors.append(SelfReferenceError(
                f"parameter references its own config (property `{ref.property}`); "
                "parameters may not depend on other parameters of the same config",
                **common,
            ))
            continue

        entity = entities.get(ref.target)
        if entity is None:
            errors.append(UnresolvedDependencyError(
                f"referenced config `{ref.target}` was not deployed before this config "
                "(it failed, does not exist, or is not part of this environment)",
                **common,
            ))
            continue

        if entity.skip:
            errors.append(ReferenceToSkippedConfigError(
                f"referenced config `{ref.target}` is skipped",
                **common,
            ))

    return errors


def _resolve_one(
    config: Config,
    name: str,
    parameter: Parameter,
    entities: Mapping[Coordinate, ResolvedEntity],
) -> tuple[Any, list[DeploymentError]]:
    errors = validate_parameter_references(
        config.coordinate, name, parameter, entities, config.environment
    )
    if errors:
        return None, errors

    context = ResolveContext(
        coordinate=config.coordinate,
        parameter_name=name,
        resolved_entities=entities,
        environment=config.environment,
    )
    try:
        return parameter.resolve(context), []
    except DeploymentError as e:
        if e.coordinate is None:
            e.coordinate = config.coordinate
        if e.parameter is None:
            e.parameter = name
        return None, [e]
    except (TypeError, ValueError) as e:
        return None, [ParameterResolutionError(
            f"failed to resolve parameter: {e}",
            coordinate=config.coordinate,
            parameter=name,
            environment=config.environment or None,
        )]


def resolve_parameter_values(
    config: Config,
    entities: Mapping[Coordinate, ResolvedEntity],
) -> tuple[dict[str, Any], list[DeploymentError]]:
    """Resolve every parameter of ``config``.

    The registry is handed to parameters as a read-only view.

    Args:
        config: The config to resolve.
        entities: Resolved entities of the current environment.

    Returns:
        (values, errors). ``values`` only holds successfully resolved
        parameters; ``errors`` holds every failure.
    """
    view = MappingProxyType(entities)
    values: dict[str, Any] = {}
    errors: list[DeploymentError] = []

    if isinstance(config.type, SettingsType) and SCOPE_PARAMETER not in config.parameters:
        errors.append(MissingScopeParameterError(
            f"settings config has no `{SCOPE_PARAMETER}` parameter",
            coordinate=config.coordinate,
            parameter=SCOPE_PARAMETER,
            environment=config.environment or None,
        ))

    for name, parameter in config.parameters.items():
        value, param_errors = _resolve_one(config, name, parameter, view)
        if param_errors:
            errors.extend(param_errors)
            continue
        values[name] = value

    if errors:
        logger.debug(
            "Resolution of %s produced %d error(s)", config.coordinate, len(errors)
        )
    return values, errors


def resolve_skip(
    config: Config,
    entities: Mapping[Coordinate, ResolvedEntity],
) -> tuple[bool, list[DeploymentError]]:
    """Evaluate the config's skip flag or skip parameter.

    Strings are truthy when they read ``true`` (case-insensitive).
    """
    if not isinstance(config.skip, Parameter):
        return bool(config.skip), []

    view = MappingProxyType(entities)
    value, errors = _resolve_one(config, SKIP_PARAMETER, config.skip, view)
    if errors:
        return False, errors
    if isinstance(value, str):
        return value.strip().lower() == "true", []
    return bool(value), []


def extract_config_name(config: Config, properties: Mapping[str, Any]) -> str:
    """Return the resolved ``name`` property.

    Raises:
        MissingNameParameterError: ``name`` was not resolved.
        InvalidNameTypeError: ``name`` resolved to something other than a string.
    """
    if NAME_PARAMETER not in properties:
        raise MissingNameParameterError(
            f"config has no resolved `{NAME_PARAMETER}` parameter",
            coordinate=config.coordinate,
            parameter=NAME_PARAMETER,
            environment=config.environment or None,
        )

    name = properties[NAME_PARAMETER]
    if not isinstance(name, str):
        raise InvalidNameTypeError(
            f"`{NAME_PARAMETER}` must be a string, got {type(name).__name__}",
            coordinate=config.coordinate,
            parameter=NAME_PARAMETER,
            environment=config.environment or None,
        )
    return name
