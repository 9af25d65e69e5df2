"""
List parameter — a list of values rendered as JSON string literals.

Resolves to ``"a", "b", "c"``, ready to be dropped between brackets in
a template (``[ {{ .entries }} ]``). Elements may be literal values or
any other parameter, resolved in the same context.
"""

from __future__ import annotations

import json
from typing import Any

from confdeploy.core.parameters.base import Parameter, ParameterReference, ResolveContext
from confdeploy.core.template.renderer import JsonFragment, format_value


class ListParameter(Parameter):
    type_name = "list"

    def __init__(self, values: list[Any]):
        self.values = list(values)

    def references(self) -> list[ParameterReference]:
        refs: list[ParameterReference] = []
        for value in self.values:
            if isinstance(value, Parameter):
                refs.extend(value.references())
        return refs

    def resolve(self, context: ResolveContext) -> JsonFragment:
        items = []
        for value in self.values:
            if isinstance(value, Parameter):
                value = value.resolve(context)
            items.append(json.dumps(format_value(value), ensure_ascii=False))
        return JsonFragment(", ".join(items))
