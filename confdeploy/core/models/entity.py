"""
Resolved entity — what deploying (or skipping) a config leaves behind.

Later configs read these through reference parameters, so the registry
of resolved entities is the only channel through which one config's
deployment feeds another's.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from confdeploy.core.models.coordinate import Coordinate


class ResolvedEntity(BaseModel):
    """Outcome of one processed config.

    ``properties`` holds the config's resolved parameter values plus the
    identifiers the remote side assigned (``id``, ``name``). A skipped
    config is stored with ``skip=True`` and no usable properties.
    """

    entity_name: str
    coordinate: Coordinate
    properties: dict[str, Any] = Field(default_factory=dict)
    skip: bool = False


# Registry of processed configs for one environment, append-only within a run.
ResolvedEntities = dict[Coordinate, ResolvedEntity]

# API id → names already deployed under that API in the current run.
KnownEntityNames = dict[str, set[str]]
