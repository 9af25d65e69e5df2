"""Template rendering for config payloads."""

from confdeploy.core.template.renderer import (
    JsonFragment,
    escape_for_json,
    escape_properties,
    format_value,
    placeholders,
    render,
)
from confdeploy.core.template.template import Template

__all__ = [
    "JsonFragment",
    "Template",
    "escape_for_json",
    "escape_properties",
    "format_value",
    "placeholders",
    "render",
]
