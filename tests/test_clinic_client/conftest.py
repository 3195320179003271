"""Fixtures with realistic clinic API response dicts for testing."""

from __future__ import annotations

import pytest


@pytest.fixture
def raw_exercise_set() -> dict:
    """One ``exerciseSets`` entry as returned by the organization query."""
    return {
        "id": "set-1",
        "name": "Shoulder mobility",
        "description": "Post-op week 2-6",
        "frequency": {
            "timesPerDay": "2",
            "timesPerWeek": "4",
            "breakBetweenSets": "6",
            "monday": False,
            "tuesday": False,
            "wednesday": False,
            "thursday": False,
            "friday": False,
            "saturday": False,
            "sunday": False,
        },
        "exerciseMappings": [
            {
                "id": "map-b",
                "exerciseId": "ex-2",
                "order": 2,
                "sets": None,
                "reps": None,
                "duration": "45",
                "restSets": None,
                "customName": "",
                "images": [],
                "exercise": {
                    "id": "ex-2",
                    "name": "Doorway stretch",
                    "type": "TIME",
                    "exerciseSide": "left",
                    "duration": 30,
                    "restSets": 20,
                    "images": ["https://cdn.example.com/door.png"],
                },
            },
            {
                "id": "map-a",
                "exerciseId": "ex-1",
                "order": 1,
                "sets": 2,
                "reps": "15",
                "customName": "Pendulum swings",
                "exercise": {
                    "id": "ex-1",
                    "name": "Pendulum",
                    "type": "reps",
                    "exerciseSide": "both",
                    "defaultSets": 3,
                    "defaultReps": 10,
                    "defaultExecutionTime": 2,
                },
            },
            {"exerciseId": "no-id"},
        ],
    }


@pytest.fixture
def raw_therapist_patients() -> list:
    return [
        {"patientId": "p-1", "patient": {"id": "p-1", "fullname": "Anna Nowak", "email": "anna@example.com"}},
        {"patientId": "p-2", "patient": None},
        {"patient": {"fullname": "Ghost"}},
    ]
