"""
Stub recorder — optional record of deployed remote objects.

When ``CONFDEPLOY_STUBS_FOLDER`` is set, every object deployed during a
run is recorded as a stub (id + name) grouped by config type, and
``write_all`` dumps one ``<type>.json`` file per type into that folder.
Useful to replay a run against a fake platform in tests.

Recording is append-only and never affects the deployment outcome:
write failures are logged, not raised.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

STUBS_FOLDER_ENV = "CONFDEPLOY_STUBS_FOLDER"


class Stub(BaseModel):
    """A deployed remote object."""

    id: str
    name: str
    entity_id: str | None = None    # generated identity sent to the platform, if any


class StubRecorder:
    """Collects stubs during a run and writes them on demand."""

    def __init__(self, folder: Path | None = None):
        self._folder = folder
        self._stubs: dict[str, list[Stub]] = {}

    @classmethod
    def from_env(cls) -> StubRecorder:
        raw = os.environ.get(STUBS_FOLDER_ENV, "").strip()
        return cls(Path(raw) if raw else None)

    @property
    def folder(self) -> Path | None:
        return self._folder

    @property
    def enabled(self) -> bool:
        return self._folder is not None

    def record(self, stub: Stub, config_type: str) -> None:
        self._stubs.setdefault(config_type, []).append(stub)

    def stubs(self, config_type: str) -> list[Stub]:
        return list(self._stubs.get(config_type, []))

    @property
    def types(self) -> list[str]:
        return list(self._stubs.keys())

    def write_all(self) -> list[Path]:
        """Write one JSON file per config type.

        Returns:
            Paths written; empty when no folder is configured.
        """
        if self._folder is None:
            return []

        try:
            self._folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create stubs folder %s: %s", self._folder, e)
            return []

        written: list[Path] = []
        for config_type, stubs in self._stubs.items():
            path = self._folder / f"{config_type}.json"
            data = [s.model_dump(mode="json", exclude_none=True) for s in stubs]
            try:
                path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
                written.append(path)
            except OSError as e:
                logger.error("Failed to write stubs file %s: %s", path, e)
        return written

    def write_value(self, name: str, stub_id: str, value: str) -> Path | None:
        """Write a single raw value as ``<name>_<id>.json``."""
        if self._folder is None:
            return None

        path = self._folder / f"{name}_{stub_id}.json"
        try:
            self._folder.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to write stubs value file %s: %s", path, e)
            return None
        return path
