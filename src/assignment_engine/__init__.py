"""Exercise-set assignment engine: step graph, overrides, dosage and schedule math."""

from assignment_engine.engine import AssignmentEngine, AssignmentSummary

__all__ = ["AssignmentEngine", "AssignmentSummary"]
