"""Adapters — remote platform clients.

Public re-exports for convenient access.
"""

from confdeploy.adapters.base import DeployClient, RemoteEntity, SettingsObject
from confdeploy.adapters.mock import ClientCall, MockClient

__all__ = [
    "ClientCall",
    "DeployClient",
    "MockClient",
    "RemoteEntity",
    "SettingsObject",
]
