"""
Deployment engine — resolve, validate, render, dispatch, coordinate.

    from confdeploy.core.deploy import deploy_configs, DeployOptions
"""

from confdeploy.core.deploy.coordinator import (
    DeploymentReport,
    DeployOptions,
    EnvironmentReport,
    deploy_all,
    deploy_configs,
    deploy_environments,
    run_deployment,
)
from confdeploy.core.deploy.dispatcher import (
    ConfigState,
    DeploymentOutcome,
    TargetVariant,
    deploy_config,
)
from confdeploy.core.deploy.ordering import sort_configs, sort_configs_for_environments

__all__ = [
    "ConfigState",
    "DeployOptions",
    "DeploymentOutcome",
    "DeploymentReport",
    "EnvironmentReport",
    "TargetVariant",
    "deploy_all",
    "deploy_config",
    "deploy_configs",
    "deploy_environments",
    "run_deployment",
    "sort_configs",
    "sort_configs_for_environments",
]
