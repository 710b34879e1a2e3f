"""Form definitions: the parsed representation of nift source.

Spans are carried for diagnostics only and never take part in equality,
so two forms read from differently formatted text compare equal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Union

from nift.source import Span

# ── Leaves ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Number:
    value: float
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Symbol:
    name: str
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class String:
    value: str  # raw text between the quotes, escapes not processed
    span: Span | None = field(default=None, compare=False, repr=False)


# ── Tables ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Pair:
    """A keyed table entry, written ``:key value``."""

    key: Form
    value: Form
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Table:
    entries: tuple[Entry, ...] = ()
    span: Span | None = field(default=None, compare=False, repr=False)

    def positional(self) -> list[Form]:
        """Entries that are not keyed, in source order."""
        return [e for e in self.entries if not isinstance(e, Pair)]

    def pairs(self) -> list[Pair]:
        """Keyed entries, in source order. Duplicate keys are all kept."""
        return [e for e in self.entries if isinstance(e, Pair)]


Scalar = Union[Number, Symbol, String]
Form = Union[Number, Symbol, String, Table]
Entry = Union[Form, Pair]


def is_scalar(form: object) -> bool:
    return isinstance(form, (Number, Symbol, String))


def same_form(a: Entry, b: Entry) -> bool:
    """Structural equality that also treats two NaN numbers as the same."""
    if isinstance(a, Number) and isinstance(b, Number):
        if math.isnan(a.value) and math.isnan(b.value):
            return True
        return a.value == b.value
    if isinstance(a, Pair) and isinstance(b, Pair):
        return same_form(a.key, b.key) and same_form(a.value, b.value)
    if isinstance(a, Table) and isinstance(b, Table):
        return len(a.entries) == len(b.entries) and all(
            same_form(x, y) for x, y in zip(a.entries, b.entries)
        )
    return type(a) is type(b) and a == b
