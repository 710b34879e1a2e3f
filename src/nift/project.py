"""Project scaffolding for `nift new`."""

from __future__ import annotations

from pathlib import Path

_NIFT_TOML_TEMPLATE = """\
[package]
name = "{name}"
version = "0.1.0"

[repl]
prompt = "nift> "

[diagnostics]
color = true

[html]
source = "index.nift"
output = "build/index.html"
"""

SAMPLE_PAGE = """\
html
:lang en
(meta :encoding utf-8)
(title "My Website")
(h1 "Hello World!")
(br)
(p "Lorem ipsum dolor sit amet")
"""

_GITIGNORE = """\
build/
__pycache__/
"""

_README_TEMPLATE = """\
# {name}

A nift site.

## Build

```bash
nift html
```

## Format

```bash
nift format
```
"""


def scaffold(name: str, parent: Path | None = None) -> Path:
    """Create a new nift project directory. Returns the project path."""
    base = parent or Path.cwd()
    project_dir = base / name

    if project_dir.exists():
        raise FileExistsError(f"Directory '{name}' already exists")

    project_dir.mkdir(parents=True)

    (project_dir / "nift.toml").write_text(_NIFT_TOML_TEMPLATE.format(name=name))
    (project_dir / "index.nift").write_text(SAMPLE_PAGE)
    (project_dir / ".gitignore").write_text(_GITIGNORE)
    (project_dir / "README.md").write_text(_README_TEMPLATE.format(name=name))

    return project_dir
