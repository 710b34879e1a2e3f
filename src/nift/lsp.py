"""nift Language Server: pygls-based LSP for .nift files.

Provides diagnostics, document symbols, and formatting via stdio transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from nift import __version__
from nift.errors import Diagnostic, NiftError
from nift.forms import Form, Pair, String, Symbol, Table
from nift.printer import NiftPrinter
from nift.reader import read_document
from nift.source import Span

# ── Conversion helpers ────────────────────────────────────────────


def span_to_range(span: Span) -> lsp.Range:
    """Convert a 1-indexed nift Span to a 0-indexed LSP Range."""
    return lsp.Range(
        start=lsp.Position(line=span.start_line - 1, character=span.start_col - 1),
        end=lsp.Position(line=span.end_line - 1, character=span.end_col),
    )


def _read_diag(d: Diagnostic) -> lsp.Diagnostic:
    """Convert a nift Diagnostic to an LSP Diagnostic."""
    span_range = lsp.Range(start=lsp.Position(0, 0), end=lsp.Position(0, 0))
    if d.labels:
        span_range = span_to_range(d.labels[0].span)
    return lsp.Diagnostic(
        range=span_range,
        severity=lsp.DiagnosticSeverity.Error,
        source="nift",
        code=d.code,
        message=f"[{d.code}] {d.message}",
    )


# ── Per-document state ────────────────────────────────────────────


@dataclass
class DocumentState:
    """Cached analysis results for a single open document."""

    source: str = ""
    root: Table | None = None
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)


# ── Server ────────────────────────────────────────────────────────

server = LanguageServer(
    "nift-lsp", __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)
_state: dict[str, DocumentState] = {}


def _analyze(uri: str, source: str) -> DocumentState:
    """Read the document, cache the result, and return the state."""
    ds = DocumentState(source=source)
    try:
        ds.root = read_document(source, filename=uri)
    except NiftError as e:
        ds.diagnostics = [_read_diag(d) for d in e.diagnostics]
    _state[uri] = ds
    return ds


def _symbol_name(table: Table) -> str:
    """Name a table by its tag: the first positional symbol or string."""
    positional = table.positional()
    if positional and isinstance(positional[0], Symbol):
        return positional[0].name
    if positional and isinstance(positional[0], String):
        return positional[0].value
    return "(table)"


def _form_to_symbol(form: Form) -> lsp.DocumentSymbol | None:
    if not isinstance(form, Table) or form.span is None:
        return None
    children = [
        s for s in (_form_to_symbol(e) for e in form.positional()) if s is not None
    ]
    keys = [
        lsp.DocumentSymbol(
            name=f":{_key_name(p)}",
            kind=lsp.SymbolKind.Property,
            range=span_to_range(p.span),
            selection_range=span_to_range(p.span),
        )
        for p in form.pairs() if p.span is not None
    ]
    rng = span_to_range(form.span)
    return lsp.DocumentSymbol(
        name=_symbol_name(form),
        kind=lsp.SymbolKind.Object,
        range=rng,
        selection_range=rng,
        children=keys + children,
    )


def _key_name(pair: Pair) -> str:
    if isinstance(pair.key, Symbol):
        return pair.key.name
    if isinstance(pair.key, String):
        return pair.key.value
    return NiftPrinter().format(pair.key)


def document_symbols(root: Table) -> list[lsp.DocumentSymbol]:
    """One symbol per root-level table, nested for child tables."""
    return [s for s in (_form_to_symbol(e) for e in root.positional()) if s is not None]


# ── LSP Feature Handlers ─────────────────────────────────────────


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
    uri = params.text_document.uri
    ds = _analyze(uri, params.text_document.text)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
    uri = params.text_document.uri
    # Full sync: take last content change
    source = params.content_changes[-1].text if params.content_changes else ""
    ds = _analyze(uri, source)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
    _state.pop(params.text_document.uri, None)


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams) -> list[lsp.DocumentSymbol]:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.root is None:
        return []
    return document_symbols(ds.root)


def format_edits(ds: DocumentState) -> list[lsp.TextEdit] | None:
    """Whole-document edit replacing the source with its formatted text.

    Returns None when nothing changes, or when formatting would alter the
    document; in that case the reason is stored in the state's diagnostics.
    """
    if ds.root is None:
        return None

    try:
        formatted = NiftPrinter().format_document(ds.root, verify=True)
    except NiftError as e:
        ds.diagnostics = [_read_diag(d) for d in e.diagnostics]
        return None
    if formatted == ds.source:
        return None

    return [lsp.TextEdit(
        range=lsp.Range(start=lsp.Position(0, 0), end=_document_end(ds.source)),
        new_text=formatted,
    )]


def _document_end(source: str) -> lsp.Position:
    lines = source.split("\n")
    return lsp.Position(len(lines) - 1, len(lines[-1]))


@server.feature(lsp.TEXT_DOCUMENT_FORMATTING)
def formatting(params: lsp.DocumentFormattingParams) -> list[lsp.TextEdit] | None:
    ds = _state.get(params.text_document.uri)
    if ds is None:
        return None
    edits = format_edits(ds)
    if ds.diagnostics:
        server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
            uri=params.text_document.uri,
            diagnostics=ds.diagnostics,
        ))
    return edits


# ── Entry point ──────────────────────────────────────────────────


def main() -> None:
    """Start the nift language server on stdio."""
    server.start_io()
