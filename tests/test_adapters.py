"""
Tests for the client contract and the mock client.
"""

import pytest

from confdeploy.adapters import DeployClient, MockClient, SettingsObject
from confdeploy.core.models.api import Api
from helpers import coord

DASHBOARDS = Api(id="dashboard")


class TestDeployClient:
    def test_is_abstract(self):
        with pytest.raises(TypeError):
            DeployClient()

    def test_repr(self):
        assert repr(MockClient("dev")) == "<MockClient name='dev'>"


class TestMockClient:
    def test_default_success(self):
        mock = MockClient()
        entity = mock.upsert_by_name(DASHBOARDS, "Overview", "{}")
        assert entity.id == "dashboard-1"
        assert entity.name == "Overview"
        assert mock.call_count == 1

    def test_settings(self):
        mock = MockClient()
        entity = mock.upsert_settings(SettingsObject(
            coordinate=coord("s"),
            schema_id="builtin:tags",
            scope="environment",
            external_id="confdeploy:abc",
            content="{}",
        ))
        assert entity.name == "confdeploy:abc"
        assert mock.calls("settings")[0].extra["scope"] == "environment"

    def test_ids_are_echoed(self):
        mock = MockClient()
        assert mock.upsert_by_entity_id(DASHBOARDS, "uuid-1", "n", "{}").id == "uuid-1"
        assert mock.upsert_entity("CUSTOM_DEVICE", "uuid-2", "{}").id == "uuid-2"
        assert mock.upsert_automation("workflow", "uuid-3", "{}").id == "uuid-3"
        assert [c.operation for c in mock.call_log] == ["by_entity_id", "entity", "automation"]

    def test_set_failure(self):
        mock = MockClient()
        mock.set_failure("Overview", error="Intentional failure")
        with pytest.raises(RuntimeError, match="Intentional failure"):
            mock.upsert_by_name(DASHBOARDS, "Overview", "{}")
        assert mock.upsert_by_name(DASHBOARDS, "Other", "{}").name == "Other"

    def test_fail_all(self):
        mock = MockClient()
        mock.fail_all()
        with pytest.raises(RuntimeError, match="outage"):
            mock.upsert_entity("CUSTOM_DEVICE", "x", "{}")

    def test_reset(self):
        mock = MockClient()
        mock.fail_all()
        with pytest.raises(RuntimeError):
            mock.upsert_entity("CUSTOM_DEVICE", "x", "{}")
        mock.reset()
        assert mock.call_count == 0
        mock.upsert_entity("CUSTOM_DEVICE", "x", "{}")
