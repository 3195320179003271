"""Per-assignment exercise exclusions."""

from __future__ import annotations

from typing import Iterable, Iterator

from assignment_engine.models.exercise import ExerciseMapping


class ExclusionSet:
    """Mapping ids hidden from one assignment.

    Orthogonal to overrides: excluding or re-including an exercise never
    touches its override patch.
    """

    def __init__(self, mapping_ids: Iterable[str] = ()) -> None:
        self._ids: set[str] = set(mapping_ids)

    def exclude(self, mapping_id: str) -> None:
        self._ids.add(mapping_id)

    def include(self, mapping_id: str) -> None:
        self._ids.discard(mapping_id)

    def toggle(self, mapping_id: str) -> bool:
        """Flip the exclusion for *mapping_id*. Returns the new state."""
        if mapping_id in self._ids:
            self._ids.discard(mapping_id)
            return False
        self._ids.add(mapping_id)
        return True

    def is_excluded(self, mapping_id: str) -> bool:
        return mapping_id in self._ids

    def visible(
        self, mappings: Iterable[ExerciseMapping]
    ) -> tuple[ExerciseMapping, ...]:
        """Mappings that are not excluded, in their original order."""
        return tuple(m for m in mappings if m.id not in self._ids)

    def clear(self) -> None:
        self._ids.clear()

    def __contains__(self, mapping_id: object) -> bool:
        return mapping_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __repr__(self) -> str:
        return f"ExclusionSet({sorted(self._ids)!r})"
