"""
Run coordinator — the central deployment loop.

Takes configs that are already in dependency order, deploys them one
after another through the dispatcher, and aggregates every error of the
run. Each environment gets its own registry of resolved entities and
its own index of known names; nothing is shared across environments.

Flow:
    (sort per environment) → for each config: cancel? → dispatch → record → log

Policy:
    continue_on_error=True   (default) process every config, report every error
    continue_on_error=False  stop the whole run at the first failed config

Under the default policy a failed config does not stop the run: its
dependents fail with UnresolvedDependency, which names the missing config.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel

from confdeploy.adapters.base import DeployClient
from confdeploy.core.deploy.dispatcher import (
    ConfigState,
    DeploymentOutcome,
    deploy_config,
    describe_target,
)
from confdeploy.core.deploy.ordering import sort_configs_for_environments
from confdeploy.core.errors import DeploymentError
from confdeploy.core.features import AUTOMATION_RESOURCES, FeatureFlag
from confdeploy.core.models.api import ApiCatalog
from confdeploy.core.models.config import Config
from confdeploy.core.models.entity import KnownEntityNames, ResolvedEntities
from confdeploy.core.persistence.stubs import StubRecorder

logger = logging.getLogger(__name__)


class DeployOptions(BaseModel):
    """The externally configurable surface of a run."""

    dry_run: bool = False
    continue_on_error: bool = True


@dataclass
class EnvironmentReport:
    """Everything that happened in one environment."""

    environment: str = ""
    outcomes: list[DeploymentOutcome] = field(default_factory=list)
    errors: list[DeploymentError] = field(default_factory=list)
    entities: ResolvedEntities = field(default_factory=dict)
    known_names: KnownEntityNames = field(default_factory=dict)

    def _count(self, state: ConfigState) -> int:
        return sum(1 for o in self.outcomes if o.state == state)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def deployed(self) -> int:
        return self._count(ConfigState.DEPLOYED)

    @property
    def skipped(self) -> int:
        return self._count(ConfigState.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(ConfigState.FAILED)

    @property
    def status(self) -> str:
        if not self.errors:
            return "ok"
        if self.deployed > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "environment": self.environment,
            "status": self.status,
            "total": self.total,
            "deployed": self.deployed,
            "skipped": self.skipped,
            "failed": self.failed,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class DeploymentReport:
    """Result of a whole run, across environments."""

    dry_run: bool = False
    environments: dict[str, EnvironmentReport] = field(default_factory=dict)
    cancelled: bool = False
    aborted: bool = False

    def environment(self, name: str) -> EnvironmentReport:
        if name not in self.environments:
            self.environments[name] = EnvironmentReport(environment=name)
        return self.environments[name]

    @property
    def errors(self) -> list[DeploymentError]:
        return [e for env in self.environments.values() for e in env.errors]

    @property
    def all_ok(self) -> bool:
        return not self.errors and not self.cancelled

    @property
    def status(self) -> str:
        if self.all_ok:
            return "ok"
        if any(env.deployed > 0 for env in self.environments.values()):
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "dry_run": self.dry_run,
            "status": self.status,
            "cancelled": self.cancelled,
            "aborted": self.aborted,
            "environments": {name: env.to_dict() for name, env in self.environments.items()},
        }


# ── Logging helpers ─────────────────────────────────────────────────


def operation_noun(dry_run: bool) -> str:
    return "Validation" if dry_run else "Deployment"


def log_environments_info(environments: Sequence[str]) -> None:
    logger.info("Environments to deploy to (%d):", len(environments))
    for name in environments:
        logger.info("  - %s", name or "<default>")


def log_deployment_info(dry_run: bool, environment: str) -> None:
    if dry_run:
        logger.info("Validating configurations for environment `%s`...", environment)
    else:
        logger.info("Deploying configurations to environment `%s`...", environment)


def _log_outcome(config: Config, outcome: DeploymentOutcome) -> None:
    marker = {
        ConfigState.DEPLOYED: "✓",
        ConfigState.SKIPPED: "⊘",
        ConfigState.FAILED: "✗",
    }.get(outcome.state, "?")
    logger.info("%s %s [%s] → %s", marker, config.coordinate, describe_target(config), outcome.state.value)
    for error in outcome.errors:
        logger.debug("    %s", error)


# ── Core loop ───────────────────────────────────────────────────────


def _run(
    items: Iterable[tuple[str, Config]],
    client_for: Mapping[str, DeployClient] | DeployClient,
    apis: ApiCatalog,
    options: DeployOptions,
    report: DeploymentReport,
    cancel: threading.Event | None,
    automation_flag: FeatureFlag,
    stubs: StubRecorder | None,
) -> DeploymentReport:
    current_env: str | None = None

    for environment, config in items:
        if cancel is not None and cancel.is_set():
            logger.warning("Deployment cancelled before %s", config.coordinate)
            report.cancelled = True
            break

        env_report = report.environment(environment)
        if environment != current_env:
            log_deployment_info(options.dry_run, environment)
            current_env = environment

        if isinstance(client_for, DeployClient):
            client = client_for
        else:
            client = client_for.get(environment)

        if client is None and not options.dry_run:
            outcome = DeploymentOutcome(
                coordinate=config.coordinate,
                environment=environment,
                state=ConfigState.FAILED,
                errors=[DeploymentError(
                    "no remote client configured for this environment",
                    coordinate=config.coordinate,
                    environment=environment or None,
                )],
            )
        else:
            outcome = deploy_config(
                client,  # type: ignore[arg-type]  # unused under dry run
                apis,
                env_report.entities,
                env_report.known_names,
                config,
                dry_run=options.dry_run,
                automation_flag=automation_flag,
                stubs=stubs,
                environment=environment,
            )

        env_report.outcomes.append(outcome)
        env_report.errors.extend(outcome.errors)
        _log_outcome(config, outcome)

        if outcome.failed and not options.continue_on_error:
            logger.error(
                "%s of %s failed, stopping (continue_on_error is off)",
                operation_noun(options.dry_run), config.coordinate,
            )
            report.aborted = True
            break

    for env_report in report.environments.values():
        logger.info(
            "%s of environment `%s` finished: %d deployed, %d skipped, %d failed",
            operation_noun(options.dry_run),
            env_report.environment,
            env_report.deployed,
            env_report.skipped,
            env_report.failed,
        )

    if stubs is not None and not options.dry_run:
        stubs.write_all()

    return report


def run_deployment(
    client: DeployClient,
    apis: ApiCatalog,
    sorted_configs: Sequence[Config],
    options: DeployOptions | None = None,
    *,
    cancel: threading.Event | None = None,
    automation_flag: FeatureFlag = AUTOMATION_RESOURCES,
    stubs: StubRecorder | None = None,
) -> DeploymentReport:
    """Deploy already-ordered configs with one client.

    Configs may belong to several environments; each keeps its own
    registry.

    Args:
        client: Remote client used for every config.
        apis: Catalog of classic APIs.
        sorted_configs: Configs in dependency order.
        options: Dry run / continue-on-error switches.
        cancel: Checked between configs; set it to stop the run.
        automation_flag: Gate for automation resources.
        stubs: Optional recorder for deployed objects.

    Returns:
        DeploymentReport with every outcome and error.
    """
    options = options or DeployOptions()
    report = DeploymentReport(dry_run=options.dry_run)
    items = ((c.environment, c) for c in sorted_configs)
    return _run(items, client, apis, options, report, cancel, automation_flag, stubs)


def deploy_configs(
    client: DeployClient,
    apis: ApiCatalog,
    sorted_configs: Sequence[Config],
    options: DeployOptions | None = None,
    *,
    cancel: threading.Event | None = None,
    automation_flag: FeatureFlag = AUTOMATION_RESOURCES,
    stubs: StubRecorder | None = None,
) -> list[DeploymentError]:
    """Deploy already-ordered configs and return every error of the run.

    An empty list means every non-skipped config was deployed (or
    validated, under dry run).
    """
    report = run_deployment(
        client, apis, sorted_configs, options,
        cancel=cancel, automation_flag=automation_flag, stubs=stubs,
    )
    return report.errors


def deploy_environments(
    clients: Mapping[str, DeployClient],
    apis: ApiCatalog,
    sorted_per_environment: Mapping[str, Sequence[Config]],
    options: DeployOptions | None = None,
    *,
    cancel: threading.Event | None = None,
    automation_flag: FeatureFlag = AUTOMATION_RESOURCES,
    stubs: StubRecorder | None = None,
    report: DeploymentReport | None = None,
) -> DeploymentReport:
    """Deploy per-environment ordered configs, each with its own client.

    The mapping key is the environment; it wins over ``Config.environment``.
    """
    options = options or DeployOptions()
    report = report or DeploymentReport(dry_run=options.dry_run)
    log_environments_info(list(sorted_per_environment))

    items = (
        (environment, config)
        for environment, configs in sorted_per_environment.items()
        for config in configs
    )
    return _run(items, clients, apis, options, report, cancel, automation_flag, stubs)


def deploy_all(
    clients: Mapping[str, DeployClient],
    apis: ApiCatalog,
    configs: Sequence[Config],
    options: DeployOptions | None = None,
    *,
    cancel: threading.Event | None = None,
    automation_flag: FeatureFlag = AUTOMATION_RESOURCES,
    stubs: StubRecorder | None = None,
) -> DeploymentReport:
    """Sort configs per environment, then deploy them.

    An environment whose configs contain a reference cycle is not
    deployed at all; its report carries only the cycle errors. Other
    environments are unaffected.
    """
    options = options or DeployOptions()
    report = DeploymentReport(dry_run=options.dry_run)

    sorted_per_environment, cycle_errors = sort_configs_for_environments(configs)
    for error in cycle_errors:
        report.environment(error.environment or "").errors.append(error)

    logger.info("%s of %d configurations", operation_noun(options.dry_run), len(configs))
    return deploy_environments(
        clients, apis, sorted_per_environment, options,
        cancel=cancel, automation_flag=automation_flag, stubs=stubs, report=report,
    )
