"""
Template model — the payload text of a config.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from confdeploy.core.template.renderer import placeholders, render


class Template(BaseModel):
    """Named template text.

    Attributes:
        id:      Identifier used in error messages (usually the file name).
        content: Raw template text with ``{{ }}`` placeholders.
    """

    id: str
    content: str

    @classmethod
    def from_file(cls, path: Path) -> Template:
        return cls(id=str(path), content=path.read_text(encoding="utf-8"))

    def render(self, properties: Mapping[str, Any]) -> str:
        return render(self.id, self.content, properties)

    @property
    def placeholders(self) -> list[str]:
        return placeholders(self.content)
