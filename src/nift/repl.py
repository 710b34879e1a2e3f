"""Line-oriented front end: read a line, rep it, write the result."""

from __future__ import annotations

from typing import TextIO

import click

from nift.errors import DiagnosticRenderer, NiftError
from nift.evaluator import rep


def run_repl(
    stdin: TextIO,
    stdout: TextIO,
    stderr: TextIO,
    *,
    prompt: str = "",
    renderer: DiagnosticRenderer | None = None,
) -> int:
    """Process lines until ``stdin`` closes. Returns the number of failed lines.

    Blank lines are skipped. A line that fails to read produces no result;
    its diagnostics go to ``stderr`` and the loop carries on.
    """
    renderer = renderer or DiagnosticRenderer(color=False)
    failures = 0
    line_no = 0
    while True:
        if prompt:
            click.echo(prompt, file=stdout, nl=False)
        raw = stdin.readline()
        if not raw:
            break
        line_no += 1
        line = raw.strip()
        if not line:
            continue
        filename = f"<repl:{line_no}>"
        try:
            answer = rep(line, filename=filename)
        except NiftError as e:
            failures += 1
            renderer.add_source(filename, line)
            for diag in e.diagnostics:
                click.echo(renderer.render(diag), file=stderr)
            continue
        click.echo(answer, file=stdout)
    if prompt:
        click.echo(file=stdout)
    return failures
