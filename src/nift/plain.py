"""Projection of forms onto plain Python values (and from there, JSON)."""

from __future__ import annotations

import json
import math
from typing import Any

from nift.errors import NonScalarKey
from nift.forms import Form, Number, Pair, String, Symbol, Table
from nift.printer import format_number


def form_to_plain(form: Form | None) -> Any:
    """Convert a form to dicts, lists, strings, floats, and None.

    A table holding any keyed entry becomes a dict, with its positional
    entries collected under ``children``. A table without keyed entries
    becomes a list.
    """
    if form is None:
        return None
    if isinstance(form, Number):
        return form.value
    if isinstance(form, String):
        return form.value
    if isinstance(form, Symbol):
        return form.name
    if isinstance(form, Table):
        obj: dict[str, Any] = {}
        children: list[Any] = []
        for entry in form.entries:
            if isinstance(entry, Pair):
                obj[_key_text(entry)] = form_to_plain(entry.value)
            else:
                children.append(form_to_plain(entry))
        if not obj:
            return children
        if children:
            obj["children"] = children
        return obj
    raise TypeError(f"not a form: {form!r}")


def _key_text(pair: Pair) -> str:
    key = pair.key
    if isinstance(key, Number):
        return format_number(key.value)
    if isinstance(key, String):
        return key.value
    if isinstance(key, Symbol):
        return key.name
    raise NonScalarKey("cannot use composite key", key.span or pair.span)


def _json_ready(value: Any) -> Any:
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, dict):
        return {k: _json_ready(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_ready(v) for v in value]
    return value


def to_json(form: Form | None, indent: int | None = None) -> str:
    """Serialize the plain projection.

    Integral numbers are written without a fraction; NaN and infinities
    become null.
    """
    return json.dumps(_json_ready(form_to_plain(form)), indent=indent, ensure_ascii=False)
