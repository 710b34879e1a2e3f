"""Projection of forms onto HTML text.

A table is an element: its first positional entry names the tag, scalar
``:key value`` pairs become attributes, and the remaining positional
entries are the element's children.
"""

from __future__ import annotations

from nift.errors import UnsupportedForm
from nift.forms import Form, Number, Pair, String, Symbol, Table, is_scalar
from nift.plain import form_to_plain
from nift.printer import format_number

VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "html", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

_INDENT_STEP = 2


def _text(form: Form) -> str:
    if isinstance(form, Number):
        return format_number(form.value)
    if isinstance(form, String):
        return form.value
    if isinstance(form, Symbol):
        return form.name
    raise UnsupportedForm("expected a symbol, string, or number", form.span)


def _attr_value(value: str) -> str:
    # Only the first quote is escaped, matching the printer
    return value.replace('"', '\\"', 1)


def form_to_html(form: Form, indent: int = 0) -> str:
    """Render a form as HTML, indenting the first line by ``indent`` spaces."""
    pad = " " * indent
    if is_scalar(form):
        return f"{pad}{_text(form)}"
    if not isinstance(form, Table):
        raise UnsupportedForm(f"cannot render {form!r} as HTML")

    attrs: dict[str, str] = {}
    body: list[Form] = []
    for entry in form.entries:
        if isinstance(entry, Pair):
            if is_scalar(entry.key) and is_scalar(entry.value):
                attrs[_text(entry.key)] = _text(entry.value)
        else:
            body.append(entry)

    if body and isinstance(body[0], (Symbol, String)):
        tag = _text(body[0])
        children = body[1:]
    else:
        tag = "div"
        children = body

    if tag == "style":
        return _style_to_css(children)

    child_indent = indent if tag == "html" else indent + _INDENT_STEP
    props = "".join(f' {k}="{_attr_value(v)}"' for k, v in attrs.items())
    lines: list[str] = []
    if tag == "html":
        lines.append("<!doctype html>")
    lines.append(f"{pad}<{tag}{props}>")
    lines.extend(form_to_html(child, child_indent) for child in children)
    if tag not in VOID_TAGS:
        lines.append(f"{pad}</{tag}>")
    return "\n".join(lines)


def _style_to_css(entries: list[Form]) -> str:
    """Render ``(style selector (:prop value ...) ...)`` as a style element."""
    lines = ["<style>"]
    for i in range(0, len(entries), 2):
        selector = entries[i]
        if i + 1 >= len(entries):
            raise UnsupportedForm("style selector without rules", selector.span)
        rules = form_to_plain(entries[i + 1])
        if not isinstance(rules, dict):
            raise UnsupportedForm(
                "style rules must be a table of ':property value' pairs",
                entries[i + 1].span,
            )
        lines.append(f"{_text(selector)} {{")
        for prop, value in rules.items():
            lines.append(f"  {prop}: {_css_value(value)};")
        lines.append("}")
    lines.append("</style>")
    return "\n".join(lines)


def _css_value(value: object) -> str:
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    raise UnsupportedForm(f"unsupported style value {value!r}")
