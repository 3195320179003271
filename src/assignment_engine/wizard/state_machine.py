"""Wizard state machine: current step, completion and navigation gating.

Navigation never raises. Moves the user is not allowed to make (forward
from an unsatisfied step, jumping ahead to an uncompleted step, back from
the first step) are ignored, whether they came from a button or a keyboard
shortcut.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from assignment_engine.models.draft import AssignmentDraft
from assignment_engine.models.enums import StepId
from assignment_engine.wizard.step_graph import StepDescriptor

logger = logging.getLogger(__name__)


def can_proceed(step: StepId, draft: AssignmentDraft) -> bool:
    """Whether the user may leave *step* forwards with the current draft."""
    if step is StepId.SELECT_SET:
        return draft.selected_set is not None
    if step is StepId.SELECT_PATIENTS:
        return len(draft.selected_patients) > 0
    # Customization and scheduling are optional; summary has no inputs.
    return True


@dataclass(frozen=True)
class StepIndicatorState:
    """Everything the step indicator needs to render."""

    steps: tuple[StepDescriptor, ...]
    current_step: StepId
    completed_steps: frozenset[StepId] = field(default_factory=frozenset)
    allow_navigation: bool = False


class WizardStateMachine:
    """Tracks the current step of one wizard over a fixed step list.

    Usage:
        machine = WizardStateMachine(compute_steps(mode, has_set, has_patient), draft)
        machine.go_next()
        machine.indicator()
    """

    def __init__(self, steps: Sequence[StepDescriptor], draft: AssignmentDraft) -> None:
        if not steps:
            raise ValueError("A wizard needs at least one step")
        self._steps = tuple(steps)
        self._ids = tuple(s.id for s in self._steps)
        self._draft = draft
        self._current = self._ids[0]
        self._completed: set[StepId] = set()

    # -- State ------------------------------------------------------------

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return self._steps

    @property
    def current_step(self) -> StepId:
        return self._current

    @property
    def current_index(self) -> int:
        return self._ids.index(self._current)

    @property
    def completed_steps(self) -> frozenset[StepId]:
        return frozenset(self._completed)

    @property
    def is_first_step(self) -> bool:
        return self.current_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.current_index == len(self._ids) - 1

    @property
    def progress(self) -> float:
        """Fraction of steps completed, 0.0-1.0."""
        return len(self._completed) / len(self._ids)

    def can_proceed(self, step: StepId | None = None) -> bool:
        return can_proceed(step or self._current, self._draft)

    # -- Navigation -------------------------------------------------------

    def go_next(self) -> bool:
        """Complete the current step and advance. Returns True if it moved."""
        if not self.can_proceed():
            logger.debug("go_next ignored: %s not satisfied", self._current.value)
            return False
        index = self.current_index
        if index >= len(self._ids) - 1:
            return False
        self._completed.add(self._current)
        self._current = self._ids[index + 1]
        return True

    def go_back(self) -> bool:
        """Step back one. Completion marks are kept. Returns True if it moved."""
        index = self.current_index
        if index == 0:
            return False
        self._current = self._ids[index - 1]
        return True

    def go_to_step(self, target: StepId | str) -> bool:
        """Jump to a completed or earlier step. Returns True if it moved.

        Accepts a raw step id string; unknown ids are ignored.
        """
        try:
            target = StepId(target)
        except ValueError:
            logger.debug("go_to_step ignored: unknown step %r", target)
            return False
        if target not in self._ids:
            logger.debug("go_to_step ignored: %s not in this wizard", target.value)
            return False
        if target in self._completed or self._ids.index(target) < self.current_index:
            self._current = target
            return True
        logger.debug("go_to_step ignored: %s not reachable yet", target.value)
        return False

    def reset(self) -> None:
        self._current = self._ids[0]
        self._completed.clear()

    # -- Submission -------------------------------------------------------

    def can_submit(self) -> bool:
        """Submit is available on the terminal step with a complete draft.

        The set and patient requirements are checked on the draft directly,
        not through their steps, because a preselected set or patient means
        the corresponding step never existed.
        """
        if not self.is_last_step or not self.can_proceed():
            return False
        return (
            can_proceed(StepId.SELECT_SET, self._draft)
            and can_proceed(StepId.SELECT_PATIENTS, self._draft)
        )

    def indicator(self) -> StepIndicatorState:
        return StepIndicatorState(
            steps=self._steps,
            current_step=self._current,
            completed_steps=frozenset(self._completed),
            allow_navigation=len(self._completed) > 0,
        )
