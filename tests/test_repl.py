"""Tests for the line-oriented front end."""

from __future__ import annotations

import io

from nift.repl import run_repl


def run(text: str, prompt: str = "") -> tuple[int, str, str]:
    """Helper: run the repl over text, return (failures, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    failures = run_repl(io.StringIO(text), out, err, prompt=prompt)
    return failures, out.getvalue(), err.getvalue()


class TestRepl:
    def test_each_line_is_printed(self):
        assert run("a\n  b c  \n") == (0, "(a)\n(b c)\n", "")

    def test_blank_lines_are_skipped(self):
        assert run("\n   \n\na\n") == (0, "(a)\n", "")

    def test_last_line_without_newline(self):
        assert run("(x :k v)") == (0, "((x :k v))\n", "")

    def test_failed_line_produces_no_result(self):
        failures, out, err = run("(a\nx\n")
        assert failures == 1
        assert out == "(x)\n"
        assert "error[E202]: expected ')'" in err
        assert "<repl:1>:1:3" in err

    def test_every_failure_is_counted(self):
        failures, out, _ = run(")\n:k\nok\n")
        assert failures == 2
        assert out == "(ok)\n"

    def test_prompt(self):
        assert run("a\n", prompt="> ") == (0, "> (a)\n> \n", "")

    def test_empty_input(self):
        assert run("") == (0, "", "")

    def test_deep_nesting_is_reported(self):
        failures, out, err = run("(" * 400 + ")" * 400 + "\nok\n")
        assert failures == 1
        assert out == "(ok)\n"
        assert "error[E206]: table nesting too deep" in err

    def test_nesting_within_limit_is_printed(self):
        line = "(" * 100 + ")" * 100
        assert run(line + "\n") == (0, "(" + line + ")\n", "")
