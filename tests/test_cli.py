"""Tests for the nift CLI, config, and error rendering."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from nift.cli import main
from nift.config import NiftConfig, find_config, load_config, load_nearest_config
from nift.errors import (
    Diagnostic,
    DiagnosticLabel,
    DiagnosticRenderer,
    NiftError,
    Severity,
    UnterminatedTable,
)
from nift.reader import read
from nift.source import Span


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tmp_project(tmp_path):
    """Create a minimal nift project in a temp dir."""
    (tmp_path / "nift.toml").write_text(
        '[package]\nname = "testsite"\nversion = "1.0.0"\n'
        '[repl]\nprompt = "> "\n'
        "[diagnostics]\ncolor = false\n"
        '[html]\nsource = "page.nift"\noutput = "out/page.html"\n'
    )
    (tmp_path / "page.nift").write_text('(p "hi")\n')
    return tmp_path


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ["repl", "format", "json", "html", "view", "new", "lsp"]:
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_repl(self, runner):
        result = runner.invoke(main, ["repl"], input="a b\n\n(c)\n")
        assert result.exit_code == 0
        assert result.output == "(a b)\n((c))\n"

    def test_repl_reports_errors_and_continues(self, runner):
        result = runner.invoke(main, ["repl"], input="(a\nb\n")
        assert result.exit_code == 1
        assert "E202" in result.output
        assert "(b)" in result.output

    def test_format_stdin(self, runner):
        result = runner.invoke(main, ["format", "--stdin"], input="a   b\n(c,d)")
        assert result.exit_code == 0
        assert result.output == "a\nb\n(c d)\n"

    def test_format_stdin_error(self, runner):
        result = runner.invoke(main, ["format", "--stdin"], input="(a")
        assert result.exit_code == 1
        assert "expected ')'" in result.output

    def test_format_check(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text("(p   hi)\n:lang en")
        result = runner.invoke(main, ["format", str(f), "--check"])
        assert result.exit_code == 1
        assert "would reformat" in result.output
        assert f.read_text() == "(p   hi)\n:lang en"

    def test_format_rewrites(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text("(p   hi)\n:lang en")
        result = runner.invoke(main, ["format", str(tmp_path)])
        assert result.exit_code == 0
        assert "formatted" in result.output
        assert f.read_text() == "(p hi)\n:lang en\n"

    def test_format_already_formatted(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text("(p hi)\n")
        result = runner.invoke(main, ["format", str(f), "--check"])
        assert result.exit_code == 0

    def test_format_keeps_escaped_quotes(self, runner, tmp_path):
        f = tmp_path / "page.nift"
        f.write_text('(p   "say \\"hi\\"")\n')
        result = runner.invoke(main, ["format", str(f)])
        assert result.exit_code == 1
        assert "E401" in result.output
        assert "formatting would change this entry" in result.output
        assert "formatted" not in result.output
        assert f.read_text() == '(p   "say \\"hi\\"")\n'

    def test_format_keeps_non_decimal_numbers(self, runner, tmp_path):
        f = tmp_path / "page.nift"
        f.write_text("(size   0x10)\n")
        result = runner.invoke(main, ["format", str(f)])
        assert result.exit_code == 1
        assert "(size NaN)" in result.output
        assert f.read_text() == "(size   0x10)\n"

    def test_format_lossy_entry_does_not_stop_other_files(self, runner, tmp_path):
        (tmp_path / "a.nift").write_text("(size 0x10)\n")
        ok = tmp_path / "b.nift"
        ok.write_text("(p   hi)")
        result = runner.invoke(main, ["format", str(tmp_path)])
        assert result.exit_code == 1
        assert ok.read_text() == "(p hi)\n"

    def test_format_stdin_lossy(self, runner):
        result = runner.invoke(main, ["format", "--stdin"], input="a\n(size 0x10)\n")
        assert result.exit_code == 1
        assert "<stdin>:2:1" in result.output
        assert "a\n(size NaN)\n" not in result.output

    def test_json(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text(":a 1")
        result = runner.invoke(main, ["json", str(f)])
        assert result.exit_code == 0
        assert result.output == '{"a": 1}\n'

    def test_json_composite_key(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text(":(a) b")
        result = runner.invoke(main, ["json", str(f)])
        assert result.exit_code == 1
        assert "E301" in result.output

    def test_html_to_stdout(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text("html (br)")
        result = runner.invoke(main, ["html", str(f)])
        assert result.exit_code == 0
        assert result.output == "<!doctype html>\n<html>\n<br>\n"

    def test_html_to_file(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text("(br)")
        out = tmp_path / "site" / "a.html"
        result = runner.invoke(main, ["html", str(f), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text() == "<div>\n  <br>\n</div>\n"

    def test_html_unsupported(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text("style body")
        result = runner.invoke(main, ["html", str(f)])
        assert result.exit_code == 1
        assert "E302" in result.output

    def test_html_project(self, runner, tmp_project, monkeypatch):
        monkeypatch.chdir(tmp_project)
        result = runner.invoke(main, ["html"])
        assert result.exit_code == 0
        assert (tmp_project / "out" / "page.html").read_text() == (
            "<div>\n  <p>\n    hi\n  </p>\n</div>\n"
        )

    def test_html_without_project(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(main, ["html"])
        assert result.exit_code == 1
        assert "no nift.toml" in result.output

    def test_view(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text('(p :id x "hi" 2)')
        result = runner.invoke(main, ["view", str(f)])
        assert result.exit_code == 0
        assert result.output == (
            "Table\n"
            "  Table\n"
            "    Symbol p\n"
            "    Pair\n"
            "      key: Symbol id\n"
            "      value: Symbol x\n"
            "    String 'hi'\n"
            "    Number 2\n"
        )

    def test_view_error(self, runner, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text(")")
        result = runner.invoke(main, ["view", str(f)])
        assert result.exit_code == 1
        assert "E201" in result.output

    def test_new_creates_project(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["new", "hello"])
            assert result.exit_code == 0
            assert "created project 'hello'" in result.output

            project = Path("hello")
            assert 'name = "hello"' in (project / "nift.toml").read_text()
            assert "(title \"My Website\")" in (project / "index.nift").read_text()
            assert (project / ".gitignore").exists()
            assert "# hello" in (project / "README.md").read_text()

    def test_new_project_renders(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner.invoke(main, ["new", "site"])
        monkeypatch.chdir(tmp_path / "site")
        result = runner.invoke(main, ["html"])
        assert result.exit_code == 0
        html = (tmp_path / "site" / "build" / "index.html").read_text()
        assert html.startswith("<!doctype html>\n<html lang=\"en\">")

    def test_new_existing_dir_fails(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("hello").mkdir()
            result = runner.invoke(main, ["new", "hello"])
            assert result.exit_code == 1
            assert "already exists" in result.output


# --- Config tests ---


class TestConfig:
    def test_load_config(self, tmp_project):
        config = load_config(tmp_project / "nift.toml")
        assert config.package.name == "testsite"
        assert config.package.version == "1.0.0"
        assert config.repl.prompt == "> "
        assert config.diagnostics.color is False
        assert config.html.source == "page.nift"
        assert config.html.output == "out/page.html"

    def test_defaults(self, tmp_path):
        path = tmp_path / "nift.toml"
        path.write_text('[package]\nname = "bare"\n')
        config = load_config(path)
        assert config.package.version == "0.0.0"
        assert config.repl.prompt == "nift> "
        assert config.diagnostics.color is True
        assert config.html.output == "build/index.html"

    def test_find_config_walks_up(self, tmp_project):
        nested = tmp_project / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_project / "nift.toml").resolve()

    def test_find_config_from_file(self, tmp_project):
        assert find_config(tmp_project / "page.nift") == (tmp_project / "nift.toml").resolve()

    def test_find_config_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_config(tmp_path)

    def test_load_nearest_config_defaults(self, tmp_path):
        assert load_nearest_config(tmp_path) == NiftConfig()


# --- Error rendering ---


class TestDiagnosticRenderer:
    def test_render_with_source(self):
        with pytest.raises(UnterminatedTable) as exc:
            read("(a b", filename="t.nift")
        renderer = DiagnosticRenderer(color=False)
        renderer.add_source("t.nift", "(a b")
        text = renderer.render(exc.value.diagnostics[0])
        assert text.splitlines()[0] == "error[E202]: expected ')'"
        assert "--> t.nift:1:5" in text
        assert "   1 | (a b" in text
        assert "    ^" in text
        assert "--> t.nift:1:1" in text
        assert "table opened here" in text
        assert "\033" not in text

    def test_render_color(self):
        diag = Diagnostic(Severity.ERROR, "E201", "unexpected ')'")
        text = DiagnosticRenderer(color=True).render(diag)
        assert "\033[1;31m" in text

    def test_render_notes(self):
        diag = Diagnostic(
            Severity.ERROR, "E204", "odd",
            labels=[DiagnosticLabel(Span("missing.nift", 1, 1, 1, 1), "here")],
            notes=["a note"],
        )
        text = DiagnosticRenderer(color=False).render(diag)
        assert text.startswith("error[E204]: odd")
        assert "note: a note" in text
        assert "here" in text

    def test_render_reads_source_file(self, tmp_path):
        f = tmp_path / "a.nift"
        f.write_text("(p\n  (b c")
        with pytest.raises(UnterminatedTable) as exc:
            read(f.read_text(), filename=str(f))
        text = DiagnosticRenderer(color=False).render(exc.value.diagnostics[0])
        assert "   2 |   (b c" in text
        assert f"--> {f}:2:3" in text
        assert "     |   -" in text.splitlines()

    def test_nift_error_message(self):
        err = NiftError([
            Diagnostic(Severity.ERROR, "E201", "one"),
            Diagnostic(Severity.ERROR, "E202", "two"),
        ])
        assert str(err) == "2 error(s): one; two"
