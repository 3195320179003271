"""Environment-variable-based configuration for the assignment wizard shell."""

from __future__ import annotations

import os

CLINIC_API_URL: str = os.environ.get("CLINIC_API_URL", "")
CLINIC_API_TOKEN: str = os.environ.get("CLINIC_API_TOKEN", "")
ORGANIZATION_ID: str = os.environ.get("ORGANIZATION_ID", "")
THERAPIST_ID: str = os.environ.get("THERAPIST_ID", "")
HTTP_TIMEOUT_S: float = float(os.environ.get("HTTP_TIMEOUT_S", "30"))
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
