"""
Template renderer — fills config templates with resolved properties.

Placeholders use double braces:

    {{ color }}  /  {{ .color }}        property, falling back to the environment
    {{ Env.ANIMAL }}  /  {{ .Env.ANIMAL }}   process environment only

A property always wins over an environment variable of the same name.
A key with no value anywhere is a hard failure; nothing is ever
substituted with an empty string. Any other {{ ... }} block (pipelines,
nested fields like {{ .a.b }}, keys starting with a digit) is rejected
rather than left in the payload.

The renderer does NOT escape substituted values. Whatever string a
property holds is written into the payload verbatim: quotes, backslashes,
newlines and ``=`` signs included. Making values safe for a JSON string
context is the job of ``escape_properties``, which the dispatcher applies
before rendering. Validating the rendered payload as JSON is also the
caller's job.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from typing import Any

from confdeploy.core.errors import UnresolvedPlaceholderError

# Every {{ ... }} block; the inner text must then be a supported key.
_PLACEHOLDER_RE = re.compile(r"\{\{(?P<inner>.*?)\}\}", re.DOTALL)
_KEY_RE = re.compile(r"\s*\.?(?:(?P<env>Env)\.)?(?P<key>[A-Za-z_][A-Za-z0-9_\-]*)\s*")


class JsonFragment(str):
    """A property value that is already valid JSON text.

    ``escape_properties`` leaves these untouched, e.g. the rendered
    element list of a list parameter.
    """

    __slots__ = ()


def render(
    template_id: str,
    template_text: str,
    properties: Mapping[str, Any],
) -> str:
    """Render ``template_text`` with ``properties`` and the process environment.

    Args:
        template_id: Identifier used in error messages.
        template_text: The raw template.
        properties: Resolved values keyed by placeholder name. Not mutated.

    Returns:
        The rendered text.

    Raises:
        UnresolvedPlaceholderError: A placeholder names a key with no value,
            or is not a supported key placeholder.
    """
    environ = os.environ

    def _substitute(match: re.Match[str]) -> str:
        key_match = _KEY_RE.fullmatch(match.group("inner"))
        if key_match is None:
            raise UnresolvedPlaceholderError(
                f"template {template_id!r}: unsupported placeholder {match.group(0)!r}",
                template_id=template_id,
                key=match.group("inner").strip(),
            )

        key = key_match.group("key")
        if key_match.group("env"):
            if key not in environ:
                raise UnresolvedPlaceholderError(
                    f'template {template_id!r}: environment has no entry for key "{key}"',
                    template_id=template_id,
                    key=key,
                )
            return environ[key]

        if key in properties:
            return format_value(properties[key])
        if key in environ:
            return environ[key]
        raise UnresolvedPlaceholderError(
            f'template {template_id!r}: map has no entry for key "{key}"',
            template_id=template_id,
            key=key,
        )

    return _PLACEHOLDER_RE.sub(_substitute, template_text)


def placeholders(template_text: str) -> list[str]:
    """List placeholder keys in order of first appearance.

    Environment placeholders are reported as ``Env.KEY``; unsupported
    ones by their stripped inner text.
    """
    seen: list[str] = []
    for match in _PLACEHOLDER_RE.finditer(template_text):
        key_match = _KEY_RE.fullmatch(match.group("inner"))
        if key_match is None:
            key = match.group("inner").strip()
        elif key_match.group("env"):
            key = f"Env.{key_match.group('key')}"
        else:
            key = key_match.group("key")
        if key not in seen:
            seen.append(key)
    return seen


def format_value(value: Any) -> str:
    """Text form of a property value inside a payload."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def escape_for_json(value: str) -> str:
    """Escape a string for use inside a JSON string literal (no quotes added)."""
    return json.dumps(value, ensure_ascii=False)[1:-1]


def escape_properties(properties: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``properties`` with plain strings escaped for JSON.

    ``JsonFragment`` values and non-string values are copied unchanged.
    """
    escaped: dict[str, Any] = {}
    for key, value in properties.items():
        if isinstance(value, str) and not isinstance(value, JsonFragment):
            escaped[key] = escape_for_json(value)
        else:
            escaped[key] = value
    return escaped
