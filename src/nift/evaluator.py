"""Evaluation stage between reading and printing."""

from __future__ import annotations

from typing import Any

from nift.forms import Form
from nift.printer import print_form
from nift.reader import read


def evaluate(form: Form, context: Any = None) -> Form:
    """Return ``form`` unchanged. Forms currently have no evaluation rules."""
    return form


def rep(source: str, filename: str = "<stdin>") -> str:
    """Read, evaluate, and print one source string."""
    form = read(source, filename=filename)
    return print_form(evaluate(form))
