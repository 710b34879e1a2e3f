"""Tokenizer for the nift notation.

A lazy cursor over the source text. Each token is scanned only when the
previous one is popped; separators (whitespace and commas) are skipped and
never produce tokens.
"""

from __future__ import annotations

import re

from nift.source import LineIndex, Span
from nift.tokens import PUNCTUATION, Token, TokenKind

# Skip separators, then match one of:
#   a punctuation character     ( ) $ @ ' :
#   a string literal            "a b\"c() d"   (closing quote optional)
#   a word                      foo-bar
_TOKEN_RE = re.compile(r"""[\s,]*([:'()@$]|"(?:\\.|[^\\"])*"?|[^\s,:'"()@$]+)""")


class Tokenizer:
    """Restartable token cursor with one token of lookahead."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self._lines = LineIndex(source)
        self._current = self._scan()

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        return self._current

    def pop(self) -> Token:
        """Return the current token and advance. EOF is never consumed."""
        tok = self._current
        if tok.kind != TokenKind.EOF:
            self._current = self._scan()
        return tok

    def reset(self) -> None:
        """Rewind to the start of the source."""
        self.pos = 0
        self._current = self._scan()

    def lex(self) -> list[Token]:
        """Consume the remaining tokens, returning them with the trailing EOF."""
        tokens: list[Token] = []
        while True:
            tok = self.pop()
            tokens.append(tok)
            if tok.kind == TokenKind.EOF:
                return tokens

    def _scan(self) -> Token:
        match = _TOKEN_RE.match(self.source, self.pos)
        if match is None:
            # Only separators are left
            self.pos = len(self.source)
            return Token(TokenKind.EOF, "", self._span(self.pos, self.pos))
        text = match.group(1)
        self.pos = match.end()
        if text in PUNCTUATION:
            kind = PUNCTUATION[text]
        elif text[0] == '"':
            kind = TokenKind.STRING
        else:
            kind = TokenKind.WORD
        return Token(kind, text, self._span(match.start(1), match.end(1)))

    def _span(self, start: int, end: int) -> Span:
        start_line, start_col = self._lines.position(start)
        end_line, end_col = self._lines.position(max(start, end - 1))
        return Span(self.filename, start_line, start_col, end_line, end_col)
