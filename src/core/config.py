"""Runtime configuration model for dynarepo.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_MAX_UNPROCESSED_ATTEMPTS, DEFAULT_TABLE_PREFIX
from core.errors import DynarepoConfigError


@dataclass(frozen=True)
class DynarepoConfig:
    """Validated runtime configuration.

    Attributes:
        aws_region: Optional AWS region for the boto3 session.
        aws_profile: Optional AWS profile for the boto3 session.
        endpoint_url: Optional endpoint override, e.g. DynamoDB Local.
        table_prefix: Prefix prepended to every logical table name.
        max_unprocessed_attempts: Rounds spent re-requesting unprocessed batch keys.
    """

    aws_region: str | None = None
    aws_profile: str | None = None
    endpoint_url: str | None = None
    table_prefix: str = DEFAULT_TABLE_PREFIX
    max_unprocessed_attempts: int = DEFAULT_MAX_UNPROCESSED_ATTEMPTS

    @classmethod
    def from_env(cls) -> "DynarepoConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DynarepoConfigError: If environment values are invalid.
        """
        attempts_value = os.getenv(
            "DYNAREPO_MAX_UNPROCESSED_ATTEMPTS",
            str(DEFAULT_MAX_UNPROCESSED_ATTEMPTS),
        )
        return cls(
            aws_region=os.getenv("DYNAREPO_AWS_REGION"),
            aws_profile=os.getenv("DYNAREPO_AWS_PROFILE"),
            endpoint_url=os.getenv("DYNAREPO_ENDPOINT_URL"),
            table_prefix=os.getenv("DYNAREPO_TABLE_PREFIX", DEFAULT_TABLE_PREFIX),
            max_unprocessed_attempts=_parse_max_attempts(attempts_value),
        )

    def table_name(self, logical_name: str) -> str:
        """Return the physical table name for a logical table name."""
        return f"{self.table_prefix}{logical_name}"


def _parse_max_attempts(raw_value: str) -> int:
    """Parse the unprocessed-attempts environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive integer.

    Raises:
        DynarepoConfigError: If value is not a positive integer.
    """
    try:
        attempts = int(raw_value)
    except ValueError as error:
        raise DynarepoConfigError(
            "Invalid DYNAREPO_MAX_UNPROCESSED_ATTEMPTS value: "
            f"expected integer, got '{raw_value}'. "
            "Set DYNAREPO_MAX_UNPROCESSED_ATTEMPTS to a numeric value."
        ) from error
    if attempts < 1:
        raise DynarepoConfigError(
            "Invalid DYNAREPO_MAX_UNPROCESSED_ATTEMPTS value: "
            f"expected at least 1, got {attempts}."
        )
    return attempts
