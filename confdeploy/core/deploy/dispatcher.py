"""
Deployment dispatcher — deploys one config.

Per config the dispatcher walks a small state machine:

    PENDING → SKIPPED    skip flag set; no remote call, no name check
    PENDING → FAILED     any error below; nothing is registered
    PENDING → DEPLOYED   remote call succeeded (or dry run validated)

Flow:
    skip? → feature gate → resolve + validate references → name → duplicate
    name check → escape + render → JSON check → remote upsert → register

Errors are collected, never raised. A failed config leaves no entry in
the registry, so configs that depend on it report UnresolvedDependency
on their own.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from confdeploy.adapters.base import DeployClient, RemoteEntity, SettingsObject
from confdeploy.core.deploy.ids import generate_external_id, generate_uuid_from_coordinate
from confdeploy.core.deploy.resolver import (
    extract_config_name,
    resolve_parameter_values,
    resolve_skip,
)
from confdeploy.core.errors import (
    DeploymentError,
    DuplicateNameError,
    FeatureDisabledError,
    InvalidJsonError,
    RemoteCallFailedError,
    UnknownApiError,
    UnresolvedPlaceholderError,
)
from confdeploy.core.features import AUTOMATION_RESOURCES, FeatureFlag
from confdeploy.core.models.api import Api, ApiCatalog
from confdeploy.core.models.config import (
    AutomationType,
    ClassicApiType,
    Config,
    EntityType,
    SettingsType,
)
from confdeploy.core.models.coordinate import Coordinate
from confdeploy.core.models.entity import KnownEntityNames, ResolvedEntity
from confdeploy.core.parameters.base import ID_PROPERTY, NAME_PARAMETER, SCOPE_PARAMETER
from confdeploy.core.persistence.stubs import Stub, StubRecorder
from confdeploy.core.template.renderer import escape_properties

logger = logging.getLogger(__name__)


class ConfigState(StrEnum):
    PENDING = "pending"
    SKIPPED = "skipped"
    FAILED = "failed"
    DEPLOYED = "deployed"


class TargetVariant(StrEnum):
    """Which remote call a config maps to."""

    SETTINGS = "settings"
    CLASSIC_UNIQUE = "classic_unique"
    CLASSIC_NON_UNIQUE = "classic_non_unique"
    ENTITY = "entity"
    AUTOMATION = "automation"


@dataclass
class DeploymentOutcome:
    """Result of dispatching one config."""

    coordinate: Coordinate
    environment: str = ""
    state: ConfigState = ConfigState.PENDING
    variant: TargetVariant | None = None
    entity: ResolvedEntity | None = None
    errors: list[DeploymentError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state in (ConfigState.DEPLOYED, ConfigState.SKIPPED)

    @property
    def failed(self) -> bool:
        return self.state == ConfigState.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "coordinate": str(self.coordinate),
            "environment": self.environment,
            "state": self.state.value,
            "variant": self.variant.value if self.variant else None,
            "entity_name": self.entity.entity_name if self.entity else None,
            "errors": [e.to_dict() for e in self.errors],
        }


def classify(config: Config, apis: ApiCatalog) -> tuple[TargetVariant | None, Api | None]:
    """Map a config to its target variant.

    Returns ``(None, None)`` for a classic config whose API is unknown.
    """
    config_type = config.type
    if isinstance(config_type, SettingsType):
        return TargetVariant.SETTINGS, None
    if isinstance(config_type, EntityType):
        return TargetVariant.ENTITY, None
    if isinstance(config_type, AutomationType):
        return TargetVariant.AUTOMATION, None

    api = apis.get(config_type.api)
    if api is None:
        return None, None
    if api.requires_unique_name:
        return TargetVariant.CLASSIC_UNIQUE, api
    return TargetVariant.CLASSIC_NON_UNIQUE, api


def deploy_config(
    client: DeployClient,
    apis: ApiCatalog,
    entities: dict[Coordinate, ResolvedEntity],
    known_names: KnownEntityNames,
    config: Config,
    *,
    dry_run: bool = False,
    automation_flag: FeatureFlag = AUTOMATION_RESOURCES,
    stubs: StubRecorder | None = None,
    environment: str | None = None,
) -> DeploymentOutcome:
    """Deploy a single config and record the outcome in ``entities``.

    Args:
        client: Remote client for the config's environment.
        apis: Catalog of classic APIs.
        entities: Registry of the config's environment. Written on success or skip.
        known_names: Names already deployed per unique-name API. Written on success.
        config: The config to deploy.
        dry_run: Validate, resolve and render, but never call the client.
        automation_flag: Gate for automation resources.
        stubs: Optional recorder for deployed objects.
        environment: Environment the config is deployed to; defaults to
            ``config.environment``. Stamped on the outcome and its errors.

    Returns:
        DeploymentOutcome. Never raises for per-config problems.
    """
    env = config.environment if environment is None else environment
    outcome = DeploymentOutcome(coordinate=config.coordinate, environment=env)

    def _fail(errors: list[DeploymentError]) -> DeploymentOutcome:
        for e in errors:
            if e.coordinate is None:
                e.coordinate = config.coordinate
            e.environment = env or None
        outcome.errors.extend(errors)
        outcome.state = ConfigState.FAILED
        return outcome

    # ── Skip ─────────────────────────────────────────────────────
    skip, skip_errors = resolve_skip(config, entities)
    if skip_errors:
        return _fail(skip_errors)
    if skip:
        entity = ResolvedEntity(
            entity_name=config.coordinate.config_id,
            coordinate=config.coordinate,
            skip=True,
        )
        entities[config.coordinate] = entity
        outcome.entity = entity
        outcome.state = ConfigState.SKIPPED
        return outcome

    # ── Classify ─────────────────────────────────────────────────
    variant, api = classify(config, apis)
    outcome.variant = variant
    if variant is None:
        return _fail([UnknownApiError(f"unknown API `{config.type.api}`")])

    if api is not None and api.is_deprecated:
        logger.warning(
            "API `%s` used by %s is deprecated, use `%s` instead",
            api.id, config.coordinate, api.deprecated_by,
        )

    if variant == TargetVariant.AUTOMATION and not automation_flag.enabled():
        return _fail([FeatureDisabledError(
            f"automation resources are disabled; set {automation_flag.env_var}=true to deploy them"
        )])

    # ── Resolve ──────────────────────────────────────────────────
    properties, errors = resolve_parameter_values(config, entities)

    name: str | None = None
    name_failed_to_resolve = config.has_name_parameter and NAME_PARAMETER not in properties
    if variant in (TargetVariant.CLASSIC_UNIQUE, TargetVariant.CLASSIC_NON_UNIQUE):
        if not name_failed_to_resolve:
            try:
                name = extract_config_name(config, properties)
            except DeploymentError as e:
                errors.append(e)
    elif NAME_PARAMETER in properties:
        try:
            name = extract_config_name(config, properties)
        except DeploymentError as e:
            errors.append(e)

    if errors:
        return _fail(errors)

    # ── Duplicate name ───────────────────────────────────────────
    if variant == TargetVariant.CLASSIC_UNIQUE:
        assert api is not None and name is not None
        if name in known_names.get(api.id, set()):
            return _fail([DuplicateNameError(
                f"a config named `{name}` was already deployed to API `{api.id}` in this run",
                parameter=NAME_PARAMETER,
            )])

    # ── Render ───────────────────────────────────────────────────
    try:
        payload = config.template.render(escape_properties(properties))
    except UnresolvedPlaceholderError as e:
        return _fail([e])

    try:
        json.loads(payload)
    except json.JSONDecodeError as e:
        return _fail([InvalidJsonError(
            f"rendered template `{config.template.id}` is not valid JSON: {e}"
        )])

    # ── Upsert ───────────────────────────────────────────────────
    stable_id = generate_uuid_from_coordinate(config.coordinate)
    if dry_run:
        remote = RemoteEntity(
            id=stable_id,
            name=name or config.coordinate.config_id,
        )
    else:
        try:
            remote = _upsert(client, variant, api, config, name, properties, payload, stable_id)
        except Exception as e:
            logger.debug("Remote call for %s failed", config.coordinate, exc_info=True)
            return _fail([RemoteCallFailedError(
                f"failed to upsert {variant.value} config: {e}",
                cause=e,
            )])

    # ── Register ─────────────────────────────────────────────────
    resolved = dict(properties)
    resolved[ID_PROPERTY] = remote.id
    entity_name = name or remote.name or config.coordinate.config_id
    resolved[NAME_PARAMETER] = remote.name or entity_name

    entity = ResolvedEntity(
        entity_name=entity_name,
        coordinate=config.coordinate,
        properties=resolved,
    )
    entities[config.coordinate] = entity
    if variant == TargetVariant.CLASSIC_UNIQUE:
        assert api is not None and name is not None
        known_names.setdefault(api.id, set()).add(name)

    if stubs is not None and stubs.enabled and not dry_run:
        generated = variant not in (TargetVariant.SETTINGS, TargetVariant.CLASSIC_UNIQUE)
        entity_id = stable_id if generated else None
        stubs.record(
            Stub(id=remote.id, name=remote.name or entity_name, entity_id=entity_id),
            config.coordinate.type,
        )
        stubs.write_value(config.coordinate.type, remote.id, payload)

    outcome.entity = entity
    outcome.state = ConfigState.DEPLOYED
    return outcome


def _upsert(
    client: DeployClient,
    variant: TargetVariant,
    api: Api | None,
    config: Config,
    name: str | None,
    properties: Mapping[str, Any],
    payload: str,
    stable_id: str,
) -> RemoteEntity:
    config_type = config.type

    if variant == TargetVariant.SETTINGS:
        assert isinstance(config_type, SettingsType)
        return client.upsert_settings(SettingsObject(
            coordinate=config.coordinate,
            schema_id=config_type.schema_id,
            schema_version=config_type.schema_version,
            scope=str(properties[SCOPE_PARAMETER]),
            external_id=generate_external_id(config.coordinate),
            content=payload,
        ))

    if variant == TargetVariant.CLASSIC_UNIQUE:
        assert api is not None and name is not None
        return client.upsert_by_name(api, name, payload)

    if variant == TargetVariant.CLASSIC_NON_UNIQUE:
        assert api is not None and name is not None
        return client.upsert_by_entity_id(api, stable_id, name, payload)

    if variant == TargetVariant.ENTITY:
        assert isinstance(config_type, EntityType)
        return client.upsert_entity(config_type.entities_type, stable_id, payload)

    assert isinstance(config_type, AutomationType)
    return client.upsert_automation(config_type.resource, stable_id, payload)


def describe_target(config: Config) -> str:
    """Short human label for a config's target, used in log lines."""
    config_type = config.type
    if isinstance(config_type, ClassicApiType):
        return config_type.api
    if isinstance(config_type, SettingsType):
        return config_type.schema_id
    if isinstance(config_type, EntityType):
        return f"entity:{config_type.entities_type}"
    return f"automation:{config_type.resource}"
