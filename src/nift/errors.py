"""Diagnostics, Rust-style rendering, and the nift exception hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nift.source import Span


class Severity(Enum):
    ERROR = "error"


_RED = "\033[1;31m"
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics as a header, one snippet per label, then notes.

    Source lines come from text registered with ``add_source`` or, failing
    that, from the file named by the label's span.
    """

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._sources: dict[str, list[str]] = {}

    def add_source(self, filename: str, source: str) -> None:
        """Register in-memory source text (stdin, a REPL line) under a name."""
        self._sources[filename] = source.splitlines()

    def render(self, diag: Diagnostic) -> str:
        out = [
            self._paint(_RED, f"{diag.severity.value}[{diag.code}]")
            + self._paint(_BOLD, f": {diag.message}")
        ]
        for label in diag.labels:
            out.extend(self._snippet(label))
        out.extend(f"  {self._paint(_BLUE, '=')} note: {note}" for note in diag.notes)
        return "\n".join(out)

    def _paint(self, ansi: str, text: str) -> str:
        return f"{ansi}{text}{_RESET}" if self.color else text

    def _snippet(self, label: DiagnosticLabel) -> list[str]:
        span = label.span
        bar = "  " + self._paint(_BLUE, "   |")
        out = [f"  {self._paint(_BLUE, '-->')} {span}", bar]
        text = self._line(span.file, span.start_line)
        if text is not None:
            out.append(f"  {self._paint(_BLUE, f'{span.start_line:>4} |')} {text}")
        if span.start_line == span.end_line:
            # Secondary labels use dashes, like rustc
            mark = "^" if label.style == "primary" else "-"
            width = max(1, span.end_col - span.start_col + 1)
            out.append(f"{bar} {' ' * (span.start_col - 1)}{self._paint(_RED, mark * width)}")
        if label.message:
            out.append(f"{bar}   {self._paint(_RED, label.message)}")
        return out

    def _line(self, filename: str, line_num: int) -> str | None:
        """Return the 1-indexed source line, or None if it is unavailable."""
        if filename not in self._sources:
            path = Path(filename)
            self._sources[filename] = path.read_text().splitlines() if path.is_file() else []
        lines = self._sources[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None


# ── Exceptions ───────────────────────────────────────────────────


class NiftError(Exception):
    """Base error carrying one or more diagnostics."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")


class _SingleDiagnosticError(NiftError):
    """An error reported as exactly one diagnostic with a fixed code."""

    code = "E000"

    def __init__(
        self,
        message: str,
        span: Span | None = None,
        *,
        related: list[DiagnosticLabel] | None = None,
        notes: list[str] | None = None,
    ) -> None:
        labels = [DiagnosticLabel(span=span, message="")] if span is not None else []
        labels.extend(related or [])
        self.message = message
        self.span = span
        super().__init__([
            Diagnostic(
                severity=Severity.ERROR,
                code=self.code,
                message=message,
                labels=labels,
                notes=notes or [],
            )
        ])

    def __str__(self) -> str:
        if self.span is not None:
            return f"{self.span}: {self.message}"
        return self.message


class ReadError(_SingleDiagnosticError):
    """Malformed notation; aborts the whole read."""

    code = "E200"


class UnexpectedCloseParen(ReadError):
    code = "E201"


class UnterminatedTable(ReadError):
    code = "E202"


class MissingKey(ReadError):
    code = "E203"


class MissingValue(ReadError):
    code = "E204"


class UnterminatedString(ReadError):
    code = "E205"


class NestingTooDeep(ReadError):
    code = "E206"


class ProjectionError(_SingleDiagnosticError):
    """A form that a projection cannot represent."""

    code = "E300"


class NonScalarKey(ProjectionError):
    code = "E301"


class UnsupportedForm(ProjectionError):
    code = "E302"


class FormatError(_SingleDiagnosticError):
    """Formatted output that would not read back as the same document."""

    code = "E400"


class LossyFormat(FormatError):
    code = "E401"
