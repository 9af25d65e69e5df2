"""
Tests for parameter variants — value, environment, reference, list.
"""

import pytest

from confdeploy.core.errors import (
    MissingPropertyError,
    ParameterResolutionError,
    ReferenceToSkippedConfigError,
    UnresolvedDependencyError,
)
from confdeploy.core.models.entity import ResolvedEntity
from confdeploy.core.parameters import (
    EnvironmentParameter,
    ListParameter,
    ParameterReference,
    ReferenceParameter,
    ResolveContext,
    ValueParameter,
)
from confdeploy.core.template import JsonFragment
from helpers import coord


def _context(entities=None) -> ResolveContext:
    return ResolveContext(
        coordinate=coord("me"),
        parameter_name="p",
        resolved_entities=entities or {},
        environment="dev",
    )


class TestValueParameter:
    def test_resolves_literal(self):
        assert ValueParameter({"a": 1}).resolve(_context()) == {"a": 1}

    def test_has_no_references(self):
        assert ValueParameter("x").references() == []


class TestEnvironmentParameter:
    def test_reads_variable(self, monkeypatch):
        monkeypatch.setenv("CD_TEST_VAR", "value")
        assert EnvironmentParameter("CD_TEST_VAR").resolve(_context()) == "value"

    def test_missing_without_default(self, monkeypatch):
        monkeypatch.delenv("CD_TEST_VAR", raising=False)
        with pytest.raises(ParameterResolutionError) as exc_info:
            EnvironmentParameter("CD_TEST_VAR").resolve(_context())
        assert exc_info.value.parameter == "p"
        assert exc_info.value.coordinate == coord("me")

    def test_missing_with_default(self, monkeypatch):
        monkeypatch.delenv("CD_TEST_VAR", raising=False)
        param = EnvironmentParameter("CD_TEST_VAR", default="fallback")
        assert param.has_default
        assert param.resolve(_context()) == "fallback"

    def test_none_is_a_valid_default(self, monkeypatch):
        monkeypatch.delenv("CD_TEST_VAR", raising=False)
        assert EnvironmentParameter("CD_TEST_VAR", default=None).resolve(_context()) is None


class TestReferenceParameter:
    def test_references(self):
        param = ReferenceParameter(coord("other"), "id")
        assert param.references() == [ParameterReference(target=coord("other"), property="id")]

    def test_resolves_property(self):
        entities = {
            coord("other"): ResolvedEntity(
                entity_name="other", coordinate=coord("other"), properties={"id": "abc"}
            )
        }
        assert ReferenceParameter(coord("other"), "id").resolve(_context(entities)) == "abc"

    def test_unresolved(self):
        with pytest.raises(UnresolvedDependencyError) as exc_info:
            ReferenceParameter(coord("other"), "id").resolve(_context())
        assert exc_info.value.referenced == coord("other")

    def test_skipped_target(self):
        entities = {
            coord("other"): ResolvedEntity(entity_name="other", coordinate=coord("other"), skip=True)
        }
        with pytest.raises(ReferenceToSkippedConfigError):
            ReferenceParameter(coord("other"), "id").resolve(_context(entities))

    def test_missing_property(self):
        entities = {
            coord("other"): ResolvedEntity(
                entity_name="other", coordinate=coord("other"), properties={"id": "abc"}
            )
        }
        with pytest.raises(MissingPropertyError) as exc_info:
            ReferenceParameter(coord("other"), "threshold").resolve(_context(entities))
        assert exc_info.value.property_name == "threshold"


class TestListParameter:
    def test_renders_json_string_literals(self):
        result = ListParameter(["element a", 'with "quotes"']).resolve(_context())
        assert isinstance(result, JsonFragment)
        assert result == '"element a", "with \\"quotes\\""'

    def test_nested_parameters(self):
        entities = {
            coord("zone"): ResolvedEntity(
                entity_name="zone", coordinate=coord("zone"), properties={"id": "mz-1"}
            )
        }
        param = ListParameter(["static", ReferenceParameter(coord("zone"), "id")])
        assert param.resolve(_context(entities)) == '"static", "mz-1"'
        assert [str(r) for r in param.references()] == ["project:dashboard:zone.id"]

    def test_empty(self):
        assert ListParameter([]).resolve(_context()) == ""
