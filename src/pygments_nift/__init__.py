"""Pygments lexer for the nift notation."""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)

# Characters that end a word
_WORD = r"""[^\s,:'"()@$]+"""


class NiftLexer(RegexLexer):
    """Pygments lexer for the nift notation."""

    name = "Nift"
    aliases = ["nift"]
    filenames = ["*.nift"]
    mimetypes = ["text/x-nift"]

    tokens = {
        "root": [
            # Whitespace and commas are both separators
            (r"[\s,]+", Text),
            # Strings keep their escapes verbatim
            (r'"', String, "string"),
            # Keys (:name)
            (r"(:)(\s*)(" + _WORD + ")", bygroups(Punctuation, Text, Name.Attribute)),
            (r":", Punctuation),
            # Tags: the first word in a table
            (
                r"(\()(\s*)([^\s,:'\"()@$0-9][^\s,:'\"()@$]*)",
                bygroups(Punctuation, Text, Name.Tag),
            ),
            (r"[()]", Punctuation),
            # Reserved single-character tokens
            (r"[@$']", Operator),
            # Numbers (any word starting with a digit)
            (r"[0-9]+(\.[0-9]*)?([eE][+-]?[0-9]+)?(?=[\s,:'\"()@$]|$)", Number.Float),
            (r"""[0-9][^\s,:'"()@$]*""", Number),
            # Symbols
            (_WORD, Name),
        ],
        "string": [
            (r"\\.", String.Escape),
            (r'[^"\\]+', String),
            (r'"', String, "#pop"),
        ],
    }
