"""TOML config loading for nift.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class PackageConfig:
    name: str = "untitled"
    version: str = "0.0.0"


@dataclass
class ReplConfig:
    prompt: str = "nift> "


@dataclass
class DiagnosticsConfig:
    color: bool = True


@dataclass
class HtmlConfig:
    source: str = "index.nift"
    output: str = "build/index.html"


@dataclass
class NiftConfig:
    package: PackageConfig = field(default_factory=PackageConfig)
    repl: ReplConfig = field(default_factory=ReplConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    html: HtmlConfig = field(default_factory=HtmlConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find nift.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / "nift.toml"
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError("No nift.toml found in any parent directory")
        path = parent


def load_config(path: Path) -> NiftConfig:
    """Parse a nift.toml file into a NiftConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = NiftConfig()

    if "package" in data:
        pkg = data["package"]
        config.package = PackageConfig(
            name=pkg.get("name", "untitled"),
            version=pkg.get("version", "0.0.0"),
        )

    if "repl" in data:
        config.repl = ReplConfig(prompt=data["repl"].get("prompt", "nift> "))

    if "diagnostics" in data:
        config.diagnostics = DiagnosticsConfig(
            color=data["diagnostics"].get("color", True),
        )

    if "html" in data:
        html = data["html"]
        config.html = HtmlConfig(
            source=html.get("source", "index.nift"),
            output=html.get("output", "build/index.html"),
        )

    return config


def load_nearest_config(start_path: Path | None = None) -> NiftConfig:
    """Load the nearest nift.toml, or defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return NiftConfig()
