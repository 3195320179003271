"""Wizard structure: step graph and navigation state machine."""

from assignment_engine.wizard.state_machine import StepIndicatorState, WizardStateMachine
from assignment_engine.wizard.step_graph import StepDescriptor, compute_steps

__all__ = ["StepDescriptor", "StepIndicatorState", "WizardStateMachine", "compute_steps"]
