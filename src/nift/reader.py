"""Reader for the nift notation.

Recursive descent over the token cursor. There is no error recovery: the
first malformed construct raises a ReadError and no partial form is returned.
"""

from __future__ import annotations

import math
import re
from typing import cast

from nift.errors import (
    DiagnosticLabel,
    MissingKey,
    MissingValue,
    NestingTooDeep,
    UnexpectedCloseParen,
    UnterminatedString,
    UnterminatedTable,
)
from nift.forms import Entry, Form, Number, Pair, String, Symbol, Table
from nift.lexer import Tokenizer
from nift.source import Span
from nift.tokens import Token, TokenKind

_DECIMAL_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?")
_CLOSED_STRING_RE = re.compile(r'"(?:\\.|[^\\"])*"')

# Tables nested deeper than this are rejected before the interpreter stack runs out
MAX_DEPTH = 128


class Reader:
    """Reads forms from nift source text."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.filename = filename
        self.tokens = Tokenizer(source, filename)
        self.depth = 0

    # ── Entry points ─────────────────────────────────────────────

    def read_root(self) -> Table:
        """Read the whole source as the entries of an implicit table."""
        start = self.tokens.peek().span
        entries, end = self._read_entries(None)
        return Table(tuple(entries), self._span(start, end.span))

    def read_form(self) -> Form | None:
        """Read one form, or return None at end of input."""
        tok = self.tokens.peek()
        if tok.kind == TokenKind.EOF:
            return None
        if tok.kind == TokenKind.LPAREN:
            return self._read_table()
        if tok.kind == TokenKind.RPAREN:
            raise UnexpectedCloseParen("unexpected ')'", tok.span)
        if tok.value.startswith('"'):
            return self._read_string()
        if tok.value[0] in "0123456789":
            return self._read_number()
        return self._read_symbol()

    # ── Tables ───────────────────────────────────────────────────

    def _read_table(self) -> Table:
        opener = self.tokens.pop()
        if self.depth >= MAX_DEPTH:
            raise NestingTooDeep(
                "table nesting too deep", opener.span,
                notes=[f"tables may nest at most {MAX_DEPTH} levels"],
            )
        self.depth += 1
        entries, closer = self._read_entries(opener)
        self.depth -= 1
        return Table(tuple(entries), self._span(opener.span, closer.span))

    def _read_entries(self, opener: Token | None) -> tuple[list[Entry], Token]:
        """Read entries up to the matching ')' (or EOF at the root).

        Returns the entries and the token that ended them.
        """
        entries: list[Entry] = []
        while True:
            tok = self.tokens.peek()
            if tok.kind == TokenKind.EOF:
                if opener is None:
                    return entries, tok
                raise UnterminatedTable(
                    "expected ')'", tok.span,
                    related=[DiagnosticLabel(
                        span=opener.span,
                        message="table opened here",
                        style="secondary",
                    )],
                )
            if tok.kind == TokenKind.RPAREN:
                if opener is None:
                    raise UnexpectedCloseParen("unexpected ')'", tok.span)
                return entries, self.tokens.pop()
            if tok.kind == TokenKind.COLON:
                entries.append(self._read_pair())
                continue
            # EOF was handled above, so a form is always read
            entries.append(cast(Form, self.read_form()))

    def _read_pair(self) -> Pair:
        colon = self.tokens.pop()
        if self._at_table_end():
            raise MissingKey("expected key after ':'", colon.span)
        key = cast(Form, self.read_form())
        if self._at_table_end():
            raise MissingValue(
                "expected value after ':'", colon.span,
                notes=["a ':' entry needs both a key and a value"],
            )
        value = cast(Form, self.read_form())
        return Pair(key, value, self._span(colon.span, value.span or colon.span))

    def _at_table_end(self) -> bool:
        return self.tokens.peek().kind in (TokenKind.EOF, TokenKind.RPAREN)

    # ── Leaves ───────────────────────────────────────────────────

    def _read_string(self) -> String:
        tok = self.tokens.pop()
        if not _CLOSED_STRING_RE.fullmatch(tok.value):
            raise UnterminatedString("unterminated string literal", tok.span)
        # Backslash escapes are kept verbatim
        return String(tok.value[1:-1], tok.span)

    def _read_number(self) -> Number:
        tok = self.tokens.pop()
        if _DECIMAL_RE.fullmatch(tok.value):
            return Number(float(tok.value), tok.span)
        return Number(math.nan, tok.span)

    def _read_symbol(self) -> Symbol:
        tok = self.tokens.pop()
        return Symbol(tok.value, tok.span)

    def _span(self, start: Span, end: Span) -> Span:
        """Build a Span from a start span to an end span."""
        return Span(
            self.filename,
            start.start_line, start.start_col,
            end.end_line, end.end_col,
        )


def read(source: str, root: bool = True, filename: str = "<stdin>") -> Form | None:
    """Parse nift source.

    With ``root`` set, the top level is read as an implicit table, so the
    source may hold any number of forms and ``:key value`` pairs. Otherwise a
    single form is read and None is returned for empty input.
    """
    reader = Reader(source, filename)
    if root:
        return reader.read_root()
    return reader.read_form()


def read_document(source: str, filename: str = "<stdin>") -> Table:
    """Parse a whole document into its root table."""
    return Reader(source, filename).read_root()
