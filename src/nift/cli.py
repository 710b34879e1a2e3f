"""nift command line interface."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from nift import __version__
from nift.config import find_config, load_config, load_nearest_config
from nift.errors import DiagnosticRenderer, NiftError
from nift.forms import Entry, Number, Pair, String, Symbol, Table
from nift.printer import NiftPrinter, format_number
from nift.reader import read_document


def _report(error: NiftError, renderer: DiagnosticRenderer) -> None:
    for diag in error.diagnostics:
        click.echo(renderer.render(diag), err=True)


def _renderer_for(path: Path) -> DiagnosticRenderer:
    config = load_nearest_config(path)
    return DiagnosticRenderer(color=config.diagnostics.color)


@click.group()
@click.version_option(__version__, prog_name="nift")
def main() -> None:
    """Read, print, and project nift documents."""


@main.command()
def repl() -> None:
    """Read lines from stdin and print each one back in canonical form."""
    from nift.repl import run_repl

    config = load_nearest_config()
    prompt = config.repl.prompt if sys.stdin.isatty() else ""
    failures = run_repl(
        sys.stdin,
        sys.stdout,
        sys.stderr,
        prompt=prompt,
        renderer=DiagnosticRenderer(color=config.diagnostics.color),
    )
    if failures and not prompt:
        raise SystemExit(1)


@main.command(name="format")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--check", is_flag=True, help="Check formatting without modifying files.")
@click.option("--stdin", "use_stdin", is_flag=True, help="Read from stdin, write to stdout.")
def format_cmd(path: str, check: bool, use_stdin: bool) -> None:
    """Format nift source files."""
    printer = NiftPrinter()
    renderer = _renderer_for(Path(path))

    if use_stdin:
        source = sys.stdin.read()
        try:
            root = read_document(source, "<stdin>")
            formatted = printer.format_document(root, verify=True)
        except NiftError as e:
            renderer.add_source("<stdin>", source)
            _report(e, renderer)
            raise SystemExit(1)
        if check:
            if formatted != source:
                raise SystemExit(1)
        else:
            sys.stdout.write(formatted)
        return

    target = Path(path)
    nift_files = sorted(target.rglob("*.nift")) if target.is_dir() else [target]

    if not nift_files:
        click.echo("no .nift files found", err=True)
        return

    needs_formatting = False
    had_errors = False
    for nift_file in nift_files:
        source = nift_file.read_text()
        filename = str(nift_file)
        try:
            root = read_document(source, filename)
            formatted = printer.format_document(root, verify=True)
        except NiftError as e:
            renderer.add_source(filename, source)
            _report(e, renderer)
            had_errors = True
            continue

        if formatted != source:
            if check:
                click.echo(f"would reformat {filename}")
                needs_formatting = True
            else:
                nift_file.write_text(formatted)
                click.echo(f"formatted {filename}")

    if had_errors or (check and needs_formatting):
        raise SystemExit(1)


@main.command(name="json")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--indent", type=int, default=None, help="Pretty-print with this indent.")
def json_cmd(file: str, indent: int | None) -> None:
    """Print a nift document as JSON."""
    from nift.plain import to_json

    renderer = _renderer_for(Path(file))
    try:
        root = read_document(Path(file).read_text(), file)
        click.echo(to_json(root, indent=indent))
    except NiftError as e:
        _report(e, renderer)
        raise SystemExit(1)


@main.command(name="html")
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write HTML to this file.")
def html_cmd(file: str | None, output: str | None) -> None:
    """Render a nift document as HTML.

    Without FILE, the project's [html] source is rendered to its [html] output.
    """
    from nift.html import form_to_html

    if file is None:
        try:
            config_path = find_config()
        except FileNotFoundError:
            click.echo("error: no FILE given and no nift.toml found", err=True)
            raise SystemExit(1)
        config = load_config(config_path)
        source_path = config_path.parent / config.html.source
        output_path: Path | None = config_path.parent / config.html.output
        if not source_path.is_file():
            click.echo(f"error: {source_path} does not exist", err=True)
            raise SystemExit(1)
    else:
        source_path = Path(file)
        output_path = Path(output) if output else None

    renderer = _renderer_for(source_path)
    try:
        root = read_document(source_path.read_text(), str(source_path))
        html = form_to_html(root)
    except NiftError as e:
        _report(e, renderer)
        raise SystemExit(1)

    if output_path is None:
        click.echo(html)
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html + "\n")
    click.echo(f"wrote {output_path}")


@main.command()
@click.argument("name")
def new(name: str) -> None:
    """Create a new nift project."""
    from nift.project import scaffold

    try:
        project_dir = scaffold(name)
        click.echo(f"created project '{name}' at {project_dir}")
    except FileExistsError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)


@main.command()
def lsp() -> None:
    """Start the nift language server."""
    from nift.lsp import main as lsp_main

    lsp_main()


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def view(file: str) -> None:
    """View the form tree of a nift source file."""
    renderer = _renderer_for(Path(file))
    try:
        root = read_document(Path(file).read_text(), file)
    except NiftError as e:
        _report(e, renderer)
        raise SystemExit(1)

    _dump_form(root, 0)


def _dump_form(entry: Entry, depth: int, label: str = "") -> None:
    """Print a readable form dump."""
    indent = "  " * depth
    if isinstance(entry, Table):
        click.echo(f"{indent}{label}Table")
        for child in entry.entries:
            _dump_form(child, depth + 1)
    elif isinstance(entry, Pair):
        click.echo(f"{indent}{label}Pair")
        _dump_form(entry.key, depth + 1, "key: ")
        _dump_form(entry.value, depth + 1, "value: ")
    elif isinstance(entry, Number):
        click.echo(f"{indent}{label}Number {format_number(entry.value)}")
    elif isinstance(entry, String):
        click.echo(f"{indent}{label}String {entry.value!r}")
    elif isinstance(entry, Symbol):
        click.echo(f"{indent}{label}Symbol {entry.name}")
