"""Runtime configuration model for ephemstore.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
import shlex

from core.constants import DEFAULT_SOURCE_COMMAND, DEFAULT_SOURCE_TIMEOUT_SECONDS
from core.errors import EphemConfigError


@dataclass(frozen=True)
class EphemConfig:
    """Validated runtime configuration.

    Attributes:
        source_command: Argument vector prefix that launches the ephemeris source.
        source_timeout_seconds: Maximum wall time for one source run.
    """

    source_command: tuple[str, ...]
    source_timeout_seconds: float

    @classmethod
    def from_env(cls) -> "EphemConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            EphemConfigError: If environment values are invalid.
        """
        command_value = os.getenv("EPHEM_SOURCE_COMMAND", DEFAULT_SOURCE_COMMAND)
        timeout_value = os.getenv("EPHEM_SOURCE_TIMEOUT", str(DEFAULT_SOURCE_TIMEOUT_SECONDS))
        return cls(
            source_command=_parse_source_command(command_value),
            source_timeout_seconds=_parse_timeout(timeout_value),
        )


def _parse_source_command(raw_value: str) -> tuple[str, ...]:
    """Split the source command environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Command tokens.

    Raises:
        EphemConfigError: If the value is empty or has unbalanced quotes.
    """
    try:
        tokens = tuple(shlex.split(raw_value))
    except ValueError as error:
        raise EphemConfigError(
            f"Invalid EPHEM_SOURCE_COMMAND value '{raw_value}': {error}. "
            "Fix the shell quoting and retry."
        ) from error
    if not tokens:
        raise EphemConfigError(
            "EPHEM_SOURCE_COMMAND is empty. "
            "Set it to the command that launches the ephemeris source."
        )
    return tokens


def _parse_timeout(raw_value: str) -> float:
    """Parse the source timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive timeout in seconds.

    Raises:
        EphemConfigError: If value is not a positive finite number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise EphemConfigError(
            "Invalid EPHEM_SOURCE_TIMEOUT value: "
            f"expected number, got '{raw_value}'. "
            "Set EPHEM_SOURCE_TIMEOUT to a positive number of seconds."
        ) from error
    if not math.isfinite(timeout) or timeout <= 0:
        raise EphemConfigError(
            f"Invalid EPHEM_SOURCE_TIMEOUT value {raw_value}: must be a positive number of seconds."
        )
    return timeout
