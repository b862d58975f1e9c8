"""Shared enumerations used across formulary."""

from __future__ import annotations

from enum import StrEnum

# -- Namespace ---------------------------------------------------------------


class DirKind(StrEnum):
    """Classification of a namespace directory, computed from its entries."""

    GROUP = "group"
    FORMULA = "formula"
    NESTED_FORMULA = "nested_formula"


# -- Input -------------------------------------------------------------------


class InputMode(StrEnum):
    """Channel a command resolves its target from.  Chosen once per invocation."""

    STDIN = "stdin"
    FLAGS = "flags"
    PROMPT = "prompt"
