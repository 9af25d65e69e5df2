"""
Dependency ordering — turns configs into a deployable sequence.

Edges come from parameter references: if config A references a
property of config B (B != A, B in the same environment), B must be
deployed before A.

    - Self-references are not edges; the resolver rejects them.
    - References to configs outside the input set are not edges; they
      surface as UnresolvedDependency when A is deployed.
    - Ties are broken by input order, so the result is deterministic and
      leaves unrelated configs in the order they were given.

A cycle yields a CycleDetectedError naming every coordinate on it, and
no order at all for that environment.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Sequence

from confdeploy.core.errors import CycleDetectedError
from confdeploy.core.models.config import Config
from confdeploy.core.models.coordinate import Coordinate

logger = logging.getLogger(__name__)


def _build_edges(configs: Sequence[Config]) -> list[list[int]]:
    """For each config index, the indices of the configs it depends on."""
    index_by_coordinate: dict[Coordinate, list[int]] = {}
    for i, config in enumerate(configs):
        index_by_coordinate.setdefault(config.coordinate, []).append(i)

    depends_on: list[list[int]] = []
    for i, config in enumerate(configs):
        deps: list[int] = []
        for target in config.references:
            if target == config.coordinate:
                continue
            for j in index_by_coordinate.get(target, []):
                if j != i and j not in deps:
                    deps.append(j)
        depends_on.append(deps)
    return depends_on


def _find_cycles(
    configs: Sequence[Config],
    depends_on: list[list[int]],
    remaining: set[int],
) -> list[list[Coordinate]]:
    """Extract distinct cycles from the nodes Kahn's algorithm could not place.

    Every remaining node has at least one remaining dependency, so
    walking dependencies from any of them must revisit a node.
    """
    cycles: list[list[Coordinate]] = []
    in_cycle: set[int] = set()
    visited: set[int] = set()

    for start in sorted(remaining):
        if start in visited:
            continue
        path: list[int] = []
        position: dict[int, int] = {}
        node = start
        while node not in position and node not in visited:
            position[node] = len(path)
            path.append(node)
            node = next(d for d in depends_on[node] if d in remaining)
        visited.update(path)
        if node in position and node not in in_cycle:
            cycle = path[position[node]:]
            in_cycle.update(cycle)
            cycles.append([configs[i].coordinate for i in cycle])
    return cycles


def sort_configs(
    configs: Sequence[Config],
    environment: str = "",
) -> tuple[list[Config], list[CycleDetectedError]]:
    """Order configs so every dependency precedes its dependents.

    Args:
        configs: Configs of ONE environment, in their original order.
        environment: Environment name, used in cycle errors.

    Returns:
        (sorted configs, errors). On a cycle the list is empty and the
        errors name every cycle found.
    """
    depends_on = _build_edges(configs)

    dependents: list[list[int]] = [[] for _ in configs]
    in_degree = [len(deps) for deps in depends_on]
    for i, deps in enumerate(depends_on):
        for d in deps:
            dependents[d].append(i)

    ready = [i for i, deg in enumerate(in_degree) if deg == 0]
    heapq.heapify(ready)
    order: list[int] = []

    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for successor in dependents[node]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                heapq.heappush(ready, successor)

    if len(order) < len(configs):
        remaining = set(range(len(configs))) - set(order)
        cycles = _find_cycles(configs, depends_on, remaining)
        errors = [CycleDetectedError(cycle, environment=environment or None) for cycle in cycles]
        for e in errors:
            logger.error("%s", e)
        return [], errors

    return [configs[i] for i in order], []


def group_by_environment(configs: Sequence[Config]) -> dict[str, list[Config]]:
    """Split configs per environment, keeping first-seen environment order."""
    grouped: dict[str, list[Config]] = {}
    for config in configs:
        grouped.setdefault(config.environment, []).append(config)
    return grouped


def sort_configs_for_environments(
    configs: Sequence[Config],
) -> tuple[dict[str, list[Config]], list[CycleDetectedError]]:
    """Sort each environment independently.

    Returns:
        (sorted configs per environment, cycle errors). Environments
        with a cycle are absent from the mapping.
    """
    result: dict[str, list[Config]] = {}
    errors: list[CycleDetectedError] = []

    for environment, env_configs in group_by_environment(configs).items():
        ordered, env_errors = sort_configs(env_configs, environment)
        if env_errors:
            errors.extend(env_errors)
            continue
        result[environment] = ordered
    return result, errors
