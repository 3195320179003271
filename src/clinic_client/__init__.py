"""Clinic API client: all network I/O of the assignment flow lives here."""

from clinic_client.client import ClinicClient
from clinic_client.exceptions import (
    ClinicAPIError,
    ClinicAuthError,
    ClinicClientError,
    ClinicGraphQLError,
    ClinicRateLimitError,
)
from clinic_client.mappers import map_exercise_set, map_patient

__all__ = [
    "ClinicClient",
    "ClinicAPIError",
    "ClinicAuthError",
    "ClinicClientError",
    "ClinicGraphQLError",
    "ClinicRateLimitError",
    "map_exercise_set",
    "map_patient",
]
