"""
Mock client — in-process test double for the remote platform.

Records every call and answers with a synthetic entity. Individual
objects can be configured to fail, keyed by their identity: the name
for by-name upserts, the generated id for by-id / entity / automation
upserts, and the external id for settings.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from confdeploy.adapters.base import DeployClient, RemoteEntity, SettingsObject
from confdeploy.core.models.api import Api


class ClientCall(BaseModel):
    """One recorded call."""

    operation: str                  # settings, by_name, by_entity_id, entity, automation
    target: str = ""                # api id, schema id, entities type or resource
    identity: str = ""              # name, id or external id
    name: str = ""
    payload: str = ""
    extra: dict[str, Any] = Field(default_factory=dict)


class MockClient(DeployClient):
    """Universal mock client for testing.

    By default every upsert succeeds. Use ``set_failure`` to make the
    object with a given identity fail, or ``fail_all`` for an outage.
    """

    def __init__(self, client_name: str = "mock"):
        self._name = client_name
        self._failures: dict[str, str] = {}
        self._fail_all: str | None = None
        self._call_log: list[ClientCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ClientCall]:
        """All calls this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls(self, operation: str) -> list[ClientCall]:
        return [c for c in self._call_log if c.operation == operation]

    def set_failure(self, identity: str, error: str = "Mock failure") -> None:
        """Configure the object with ``identity`` to fail."""
        self._failures[identity] = error

    def fail_all(self, error: str = "Mock outage") -> None:
        self._fail_all = error

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()
        self._fail_all = None

    # ── DeployClient ─────────────────────────────────────────────

    def upsert_settings(self, obj: SettingsObject) -> RemoteEntity:
        self._record(
            ClientCall(
                operation="settings",
                target=obj.schema_id,
                identity=obj.external_id,
                payload=obj.content,
                extra={"scope": obj.scope, "schema_version": obj.schema_version},
            )
        )
        return RemoteEntity(id=f"settings-{self.call_count}", name=obj.external_id)

    def upsert_by_name(self, api: Api, name: str, payload: str) -> RemoteEntity:
        self._record(ClientCall(operation="by_name", target=api.id, identity=name, name=name, payload=payload))
        return RemoteEntity(id=f"{api.id}-{self.call_count}", name=name)

    def upsert_by_entity_id(self, api: Api, entity_id: str, name: str, payload: str) -> RemoteEntity:
        self._record(
            ClientCall(operation="by_entity_id", target=api.id, identity=entity_id, name=name, payload=payload)
        )
        return RemoteEntity(id=entity_id, name=name)

    def upsert_entity(self, entities_type: str, entity_id: str, payload: str) -> RemoteEntity:
        self._record(ClientCall(operation="entity", target=entities_type, identity=entity_id, payload=payload))
        return RemoteEntity(id=entity_id, name=entity_id)

    def upsert_automation(self, resource: str, resource_id: str, payload: str) -> RemoteEntity:
        self._record(ClientCall(operation="automation", target=resource, identity=resource_id, payload=payload))
        return RemoteEntity(id=resource_id, name=resource_id)

    def _record(self, call: ClientCall) -> None:
        self._call_log.append(call)
        if self._fail_all is not None:
            raise RuntimeError(self._fail_all)
        if call.identity in self._failures:
            raise RuntimeError(self._failures[call.identity])
