"""Workspace data model.

A workspace is a named root directory whose subdirectories form a command
namespace: ``{dir}/test/unit`` is the formula ``rit test unit``.
"""

from __future__ import annotations

from pydantic import BaseModel


class Workspace(BaseModel):
    """Registered workspace."""

    name: str
    dir: str
