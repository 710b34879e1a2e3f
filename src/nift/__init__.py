"""The nift notation: reader, printer, and projections."""

from __future__ import annotations

__version__ = "0.1.0"

from nift.evaluator import evaluate, rep
from nift.printer import print_form
from nift.reader import read

__all__ = ["__version__", "evaluate", "print_form", "read", "rep"]
