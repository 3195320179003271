"""Serialization module: wire payloads for the persistence collaborator."""

from assignment_engine.serialization.payload import assignment_variables, frequency_to_wire

__all__ = ["assignment_variables", "frequency_to_wire"]
