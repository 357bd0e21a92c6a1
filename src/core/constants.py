"""Core constants used across dynarepo modules.

This module centralizes store limits and environment defaults.
Keeping values here avoids magic literals in repository logic.
"""

from __future__ import annotations

BATCH_GET_MAX_KEYS = 100
DEFAULT_MAX_UNPROCESSED_ATTEMPTS = 5
DEFAULT_TABLE_PREFIX = ""
THROTTLING_ERROR_CODES = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
)
