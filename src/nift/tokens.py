"""Token kinds and token representation for the nift tokenizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nift.source import Span


class TokenKind(Enum):
    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    DOLLAR = auto()
    AT = auto()
    QUOTE = auto()
    COLON = auto()

    # Literals
    STRING = auto()
    WORD = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span


PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "$": TokenKind.DOLLAR,
    "@": TokenKind.AT,
    "'": TokenKind.QUOTE,
    ":": TokenKind.COLON,
}
