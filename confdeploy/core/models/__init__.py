"""
Domain models — pydantic types for the deployment engine.

Leaf models are re-exported here for convenient access:

    from confdeploy.core.models import Coordinate, ResolvedEntity

``Config`` and its type variants depend on the parameter and template
packages, which themselves use these leaf models; import them from
``confdeploy.core.models.config``.
"""

from confdeploy.core.models.api import Api, ApiCatalog
from confdeploy.core.models.coordinate import Coordinate
from confdeploy.core.models.entity import KnownEntityNames, ResolvedEntities, ResolvedEntity

__all__ = [
    # api.py
    "Api",
    "ApiCatalog",
    # coordinate.py
    "Coordinate",
    # entity.py
    "KnownEntityNames",
    "ResolvedEntities",
    "ResolvedEntity",
]
