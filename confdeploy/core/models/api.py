"""
API catalog — metadata about the classic config APIs.

The dispatcher consults the catalog to decide whether a classic config
is identified by its name (unique-name API) or by a generated id
(non-unique-name API), and to warn about deprecated APIs.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel


class Api(BaseModel):
    """One classic config API."""

    id: str                          # e.g. "dashboard", "alerting-profile"
    url_path: str = ""               # informational, used by the remote client
    deprecated_by: str = ""          # id of the replacement API, if deprecated
    non_unique_name: bool = False    # names may repeat; identity is a generated id

    @property
    def is_deprecated(self) -> bool:
        return bool(self.deprecated_by)

    @property
    def requires_unique_name(self) -> bool:
        return not self.non_unique_name


class ApiCatalog:
    """Lookup table of known APIs, keyed by API id."""

    def __init__(self, apis: Iterable[Api] = ()):
        self._apis: dict[str, Api] = {}
        for api in apis:
            self.add(api)

    def add(self, api: Api) -> None:
        self._apis[api.id] = api

    def get(self, api_id: str) -> Api | None:
        return self._apis.get(api_id)

    def __contains__(self, api_id: object) -> bool:
        return api_id in self._apis

    def __iter__(self) -> Iterator[Api]:
        return iter(self._apis.values())

    def __len__(self) -> int:
        return len(self._apis)

    @property
    def ids(self) -> list[str]:
        return list(self._apis.keys())
