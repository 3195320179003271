"""High-level clinic API client facade.

All network I/O of the assignment flow lives here. Every GraphQL call is
wrapped with error mapping and retry on rate limiting.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

import httpx

from assignment_engine.overrides.persistence import parse_persisted_overrides
from clinic_client.exceptions import (
    ClinicAPIError,
    ClinicAuthError,
    ClinicGraphQLError,
    ClinicRateLimitError,
)

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 30.0
_MAX_RETRIES = 3
_BASE_BACKOFF_S = 2

_FREQUENCY_FIELDS = """
    timesPerDay
    timesPerWeek
    breakBetweenSets
    monday
    tuesday
    wednesday
    thursday
    friday
    saturday
    sunday
"""

LIST_EXERCISE_SETS_QUERY = f"""
query GetOrganizationExerciseSets($organizationId: String!) {{
  exerciseSets(where: {{ organizationId: {{ eq: $organizationId }}, isActive: {{ eq: true }} }}) {{
    id
    name
    description
    frequency {{ {_FREQUENCY_FIELDS} }}
    exerciseMappings {{
      id
      exerciseId
      order
      sets
      reps
      duration
      restSets
      restReps
      preparationTime
      executionTime
      notes
      customName
      customDescription
      videoUrl
      imageUrl
      images
      exercise {{
        id
        name
        type
        exerciseSide
        description
        notes
        imageUrl
        videoUrl
        images
        sets
        reps
        duration
        restSets
        restReps
        preparationTime
        executionTime
      }}
    }}
  }}
}}
"""

LIST_THERAPIST_PATIENTS_QUERY = """
query GetTherapistPatients($therapistId: String!, $organizationId: String!) {
  therapistPatients(therapistId: $therapistId, organizationId: $organizationId) {
    patientId
    patient { id fullname email }
  }
}
"""

ASSIGN_EXERCISE_SET_MUTATION = """
mutation AssignExerciseSetToPatient(
  $exerciseSetId: String!
  $patientId: String!
  $startDate: DateTime!
  $endDate: DateTime!
  $frequency: FrequencyInput!
) {
  assignExerciseSetToPatient(
    exerciseSetId: $exerciseSetId
    patientId: $patientId
    startDate: $startDate
    endDate: $endDate
    frequency: $frequency
  ) {
    id
    status
  }
}
"""

UPDATE_EXERCISE_OVERRIDES_MUTATION = """
mutation UpdatePatientExerciseOverrides($assignmentId: String!, $exerciseOverrides: String!) {
  updatePatientExerciseOverrides(assignmentId: $assignmentId, exerciseOverrides: $exerciseOverrides) {
    id
    exerciseOverrides
  }
}
"""

GET_ASSIGNMENT_OVERRIDES_QUERY = """
query GetPatientAssignment($assignmentId: String!) {
  patientAssignmentById(id: $assignmentId) {
    id
    exerciseOverrides
  }
}
"""


class ClinicClient:
    """Facade for the clinic GraphQL API used by the assignment wizard.

    Implements the engine's AssignmentGateway protocol through
    :meth:`assign_exercise_set`.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = _DEFAULT_TIMEOUT_S,
        http: httpx.Client | None = None,
    ) -> None:
        self._endpoint = base_url.rstrip("/") + "/graphql"
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._http = http or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ClinicClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    def list_exercise_sets(self, organization_id: str) -> list[dict[str, Any]]:
        """Active exercise sets of an organization, with mappings and exercises."""
        data = self._execute(
            LIST_EXERCISE_SETS_QUERY, {"organizationId": organization_id}
        )
        return data.get("exerciseSets") or []

    def list_therapist_patients(
        self, therapist_id: str, organization_id: str
    ) -> list[dict[str, Any]]:
        data = self._execute(
            LIST_THERAPIST_PATIENTS_QUERY,
            {"therapistId": therapist_id, "organizationId": organization_id},
        )
        return data.get("therapistPatients") or []

    # ------------------------------------------------------------------
    # Assignment operations
    # ------------------------------------------------------------------

    def assign_exercise_set(self, variables: dict[str, Any]) -> str:
        """Create or update the assignment of a set to one patient.

        The server upserts on (exerciseSetId, patientId), so repeating the
        call is safe. When *variables* carry ``exerciseOverrides`` they are
        stored with a follow-up call on the returned assignment.

        Returns the assignment id.
        """
        variables = dict(variables)
        overrides_json = variables.pop("exerciseOverrides", None)

        data = self._execute(ASSIGN_EXERCISE_SET_MUTATION, variables)
        assignment = data.get("assignExerciseSetToPatient")
        if not isinstance(assignment, dict) or "id" not in assignment:
            raise ClinicAPIError(f"Unexpected assign response: {data}")
        assignment_id = str(assignment["id"])
        logger.info(
            "Assigned set %s to patient %s, assignment=%s",
            variables.get("exerciseSetId"),
            variables.get("patientId"),
            assignment_id,
        )

        if overrides_json is not None:
            self.update_exercise_overrides(assignment_id, overrides_json)
        return assignment_id

    def update_exercise_overrides(
        self, assignment_id: str, overrides: dict[str, Any] | str
    ) -> None:
        """Replace the stored override map of an existing assignment."""
        if not isinstance(overrides, str):
            overrides = json.dumps(overrides, sort_keys=True)
        self._execute(
            UPDATE_EXERCISE_OVERRIDES_MUTATION,
            {"assignmentId": assignment_id, "exerciseOverrides": overrides},
        )
        logger.info("Updated overrides of assignment %s", assignment_id)

    def get_assignment_overrides(self, assignment_id: str) -> dict[str, dict[str, Any]]:
        """Stored override map of an assignment; corrupted data reads as empty."""
        data = self._execute(
            GET_ASSIGNMENT_OVERRIDES_QUERY, {"assignmentId": assignment_id}
        )
        assignment = data.get("patientAssignmentById") or {}
        return parse_persisted_overrides(assignment.get("exerciseOverrides"))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        return self._safe_call(self._post, query, variables)

    def _post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = self._http.post(
                self._endpoint,
                json={"query": query, "variables": variables},
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise ClinicAPIError(f"Request failed: {exc}") from exc

        if resp.status_code in (401, 403):
            raise ClinicAuthError(f"Not authorized ({resp.status_code})")
        if resp.status_code == 429:
            raise ClinicRateLimitError()
        if resp.status_code >= 400:
            raise ClinicAPIError(
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise ClinicAPIError(
                "Response is not valid JSON", status_code=resp.status_code
            ) from exc
        if not isinstance(body, dict):
            raise ClinicAPIError(
                f"Expected a JSON object, got {type(body).__name__}",
                status_code=resp.status_code,
            )

        errors = body.get("errors")
        if errors:
            raise ClinicGraphQLError(
                [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors]
            )
        return body.get("data") or {}

    def _safe_call(self, fn: Callable, *args: Any, **kwargs: Any) -> Any:
        """Call *fn* with retry + exponential backoff on 429."""
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                return fn(*args, **kwargs)
            except ClinicRateLimitError as exc:
                last_exc = exc
                wait = _BASE_BACKOFF_S * (2 ** attempt)
                logger.warning(
                    "Rate limited (attempt %d/%d), retrying in %ds",
                    attempt + 1,
                    _MAX_RETRIES,
                    wait,
                )
                time.sleep(wait)

        raise ClinicRateLimitError(
            f"Rate limited after {_MAX_RETRIES} retries: {last_exc}"
        )
