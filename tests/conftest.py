"""
Shared test fixtures and configuration.
"""

import logging

import pytest

from confdeploy.adapters.mock import MockClient
from confdeploy.core.models.api import Api, ApiCatalog


@pytest.fixture
def apis() -> ApiCatalog:
    return ApiCatalog([
        Api(id="dashboard", url_path="/api/config/v1/dashboards", non_unique_name=True),
        Api(id="alerting-profile", url_path="/api/config/v1/alertingProfiles"),
        Api(id="management-zone", url_path="/api/config/v1/managementZones"),
        Api(
            id="application",
            url_path="/api/config/v1/applications/web",
            deprecated_by="application-web",
        ),
    ])


@pytest.fixture
def client() -> MockClient:
    return MockClient()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep confdeploy environment switches out of every test."""
    for var in (
        "CONFDEPLOY_DRY_RUN",
        "CONFDEPLOY_CONTINUE_ON_ERROR",
        "CONFDEPLOY_LOG_LEVEL",
        "CONFDEPLOY_LOG_FILE",
        "CONFDEPLOY_LOG_FILE_LEVEL",
        "CONFDEPLOY_STUBS_FOLDER",
        "CONFDEPLOY_FEATURE_AUTOMATION_RESOURCES",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Drop handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
