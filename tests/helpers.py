"""
Config factories shared by the test modules.
"""

from __future__ import annotations

from confdeploy.core.models.config import (
    AutomationType,
    ClassicApiType,
    Config,
    EntityType,
    SettingsType,
)
from confdeploy.core.models.coordinate import Coordinate
from confdeploy.core.parameters import ReferenceParameter, ValueParameter
from confdeploy.core.template import Template

SIMPLE_TEMPLATE = '{"name": "{{ .name }}"}'


def coord(config_id: str, type: str = "dashboard", project: str = "project") -> Coordinate:
    return Coordinate(project=project, type=type, config_id=config_id)


def ref(config_id: str, property: str = "id", type: str = "dashboard") -> ReferenceParameter:
    return ReferenceParameter(coord(config_id, type), property)


def make_config(
    config_id: str,
    *,
    api: str = "dashboard",
    template: str = SIMPLE_TEMPLATE,
    parameters: dict | None = None,
    skip=False,
    environment: str = "dev",
    config_type=None,
) -> Config:
    """A classic config named after its id unless parameters say otherwise."""
    if parameters is None:
        parameters = {"name": ValueParameter(config_id)}
    return Config(
        coordinate=coord(config_id, api),
        type=config_type or ClassicApiType(api=api),
        template=Template(id=f"{config_id}.json", content=template),
        parameters=parameters,
        skip=skip,
        environment=environment,
    )


def make_settings_config(config_id: str, *, scope: str | None = "environment", **kwargs) -> Config:
    parameters = kwargs.pop("parameters", {})
    if scope is not None:
        parameters = {"scope": ValueParameter(scope), **parameters}
    return make_config(
        config_id,
        api="builtin:alerting.profile",
        template=kwargs.pop("template", '{"enabled": true}'),
        parameters=parameters,
        config_type=SettingsType(schema_id="builtin:alerting.profile", schema_version="1.0"),
        **kwargs,
    )


def make_entity_config(config_id: str, **kwargs) -> Config:
    return make_config(
        config_id,
        api="CUSTOM_DEVICE",
        template=kwargs.pop("template", '{"displayName": "device"}'),
        parameters=kwargs.pop("parameters", {}),
        config_type=EntityType(entities_type="CUSTOM_DEVICE"),
        **kwargs,
    )


def make_automation_config(config_id: str, **kwargs) -> Config:
    return make_config(
        config_id,
        api="workflow",
        template=kwargs.pop("template", '{"title": "wf"}'),
        parameters=kwargs.pop("parameters", {}),
        config_type=AutomationType(resource="workflow"),
        **kwargs,
    )


