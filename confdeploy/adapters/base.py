"""
Remote client base — the contract between the engine and the platform.

The engine only talks to the monitoring platform through this
interface. Transport concerns (HTTP, auth, retries, rate limits) live
entirely inside implementations; the engine selects the right upsert
variant, hands over the rendered payload, and records what comes back.

Unlike adapters that report failures in a receipt, a client RAISES on
failure. The dispatcher catches any exception from these methods and
turns it into a ``RemoteCallFailedError`` for that one config.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from confdeploy.core.models.api import Api
from confdeploy.core.models.coordinate import Coordinate


class RemoteEntity(BaseModel):
    """What the platform reports back for an upserted object."""

    id: str
    name: str = ""


class SettingsObject(BaseModel):
    """Everything needed to upsert one settings object."""

    coordinate: Coordinate
    schema_id: str
    schema_version: str = ""
    scope: str
    external_id: str
    content: str


class DeployClient(ABC):
    """Abstract base class for remote clients.

    To create a new client:
        1. Subclass DeployClient
        2. Implement the five upsert operations
        3. Pass an instance to the coordinator (one per environment)
    """

    @property
    def name(self) -> str:
        """Identifier used in logs."""
        return self.__class__.__name__

    @abstractmethod
    def upsert_settings(self, obj: SettingsObject) -> RemoteEntity:
        """Create or update a settings object identified by its external id."""

    @abstractmethod
    def upsert_by_name(self, api: Api, name: str, payload: str) -> RemoteEntity:
        """Create or update a classic config identified by its name."""

    @abstractmethod
    def upsert_by_entity_id(self, api: Api, entity_id: str, name: str, payload: str) -> RemoteEntity:
        """Create or update a classic config identified by a generated id."""

    @abstractmethod
    def upsert_entity(self, entities_type: str, entity_id: str, payload: str) -> RemoteEntity:
        """Create or update a custom monitored entity."""

    @abstractmethod
    def upsert_automation(self, resource: str, resource_id: str, payload: str) -> RemoteEntity:
        """Create or update an automation resource."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
