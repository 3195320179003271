"""Exceptions raised by the assignment engine.

User-facing validation never raises: missing selections only disable
forward navigation. These exceptions signal programming errors.
"""

from __future__ import annotations


class AssignmentEngineError(Exception):
    """Base exception for all assignment_engine errors."""


class UnknownOverrideFieldError(AssignmentEngineError, KeyError):
    """An override was read or written with a field name the engine does not know."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name)
        self.field_name = field_name

    def __str__(self) -> str:
        return f"Unknown override field: {self.field_name!r}"
