"""
Coordinate — the identity key of a deployable config.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Coordinate(BaseModel):
    """(project, type, config_id) triple identifying one config.

    Frozen so it can key the resolved-entity registry; equality is
    structural.
    """

    model_config = ConfigDict(frozen=True)

    project: str = ""
    type: str = ""
    config_id: str = ""

    def __str__(self) -> str:
        return f"{self.project}:{self.type}:{self.config_id}"

    @classmethod
    def parse(cls, value: str) -> Coordinate:
        """Parse the ``project:type:config_id`` string form."""
        parts = value.split(":", 2)
        if len(parts) != 3:
            raise ValueError(f"Invalid coordinate {value!r}, expected 'project:type:config_id'")
        return cls(project=parts[0], type=parts[1], config_id=parts[2])
