"""Canonical printer for nift forms.

Whitespace from the source is not preserved; printing a form, reading the
result, and printing again yields the same text.
"""

from __future__ import annotations

import math
from decimal import Decimal

from nift.errors import LossyFormat, NiftError
from nift.forms import Entry, Form, Number, Pair, String, Symbol, Table, same_form
from nift.reader import read_document


def format_number(value: float) -> str:
    """Render a float the way ECMAScript's Number#toString does.

    Integral values print without a fractional part, and exponent notation is
    used only below 1e-6 or from 1e21 upward.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    # repr() gives the shortest digits that round-trip
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent  # position of the decimal point relative to digits
    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    e = n - 1
    mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


class NiftPrinter:
    """Format forms back to canonical nift text."""

    # ── Public API ─────────────────────────────────────────────

    def format(self, form: Form) -> str:
        """Format a single form."""
        if isinstance(form, Number):
            return format_number(form.value)
        if isinstance(form, Symbol):
            return form.name
        if isinstance(form, String):
            # Only the first quote is escaped; later ones are emitted as-is
            return '"' + form.value.replace('"', '\\"', 1) + '"'
        if isinstance(form, Table):
            return "(" + " ".join(self._format_entry(e) for e in form.entries) + ")"
        raise TypeError(f"not a form: {form!r}")

    def format_document(self, table: Table, *, verify: bool = False) -> str:
        """Format a root table as a document, one root entry per line.

        With ``verify`` set, each line is read back first and LossyFormat is
        raised for the first entry that would not survive: strings holding
        an escaped quote, and numbers that print as NaN or Infinity.
        """
        lines = [self._format_entry(e) for e in table.entries]
        if verify:
            for entry, line in zip(table.entries, lines):
                self._verify_line(entry, line)
        return "".join(line + "\n" for line in lines)

    def _format_entry(self, entry: Entry) -> str:
        if isinstance(entry, Pair):
            return f":{self.format(entry.key)} {self.format(entry.value)}"
        return self.format(entry)

    def _verify_line(self, entry: Entry, line: str) -> None:
        lossy = LossyFormat(
            "formatting would change this entry", entry.span,
            notes=[f"it would be written as: {line}"],
        )
        try:
            reread = read_document(line).entries
        except NiftError as e:
            raise lossy from e
        if len(reread) != 1 or not same_form(reread[0], entry):
            raise lossy


def print_form(form: Form) -> str:
    """Render a form to canonical text."""
    return NiftPrinter().format(form)
