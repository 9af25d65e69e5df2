"""
Identifier helpers — stable remote identities derived from coordinates.

Configs whose remote identity is not their name (non-unique classic
APIs, entities, automations, settings) need an identifier that is the
same on every run, so that re-deploying updates the existing remote
object instead of creating a new one.
"""

from __future__ import annotations

import base64
import hashlib
import uuid

from confdeploy.core.models.coordinate import Coordinate

# Fixed namespace so ids never change between releases.
_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://confdeploy.invalid/coordinates")

EXTERNAL_ID_PREFIX = "confdeploy:"
EXTERNAL_ID_MAX_LENGTH = 500


def generate_uuid_from_string(value: str) -> str:
    return str(uuid.uuid5(_NAMESPACE, value))


def generate_uuid_from_coordinate(coordinate: Coordinate) -> str:
    """Deterministic UUID for a coordinate, derived from its string form."""
    return generate_uuid_from_string(str(coordinate))


def generate_external_id(coordinate: Coordinate) -> str:
    """External id for a settings object.

    Includes the project, so the same config id in two projects maps to
    two different settings objects. Falls back to a SHA-256 digest when
    the encoded form would exceed the remote length limit.
    """
    raw = f"{coordinate.project}${coordinate.type}${coordinate.config_id}"
    encoded = base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")
    external_id = EXTERNAL_ID_PREFIX + encoded
    if len(external_id) > EXTERNAL_ID_MAX_LENGTH:
        external_id = EXTERNAL_ID_PREFIX + hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return external_id
