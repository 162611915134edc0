"""Ephemeris source invocation.

This module renders an ephemeris request into the source's command-line
arguments and runs the configured source command as a subprocess.
"""

from __future__ import annotations

import subprocess

from core.config import EphemConfig
from core.errors import EphemSourceError
from core.logging_config import get_logger
from core.types import EphemerisRequest
from ingest.request_spec import validate_request

_LOGGER = get_logger(__name__)


def build_source_arguments(request: EphemerisRequest) -> list[str]:
    """Render source arguments for a request.

    Args:
        request: Validated ephemeris request.

    Returns:
        Argument list appended after the configured source command.

    Raises:
        EphemConfigError: If the request fails validation.
    """
    validate_request(request)
    arguments: list[str] = []
    if request.jd_list:
        arguments += ["--jd_list", ",".join(f"{value:.15f}" for value in request.jd_list)]
    else:
        arguments += [
            "--jd_min",
            f"{request.jd_min:.15f}",
            "--jd_max",
            f"{request.jd_max:.15f}",
            "--jd_step",
            f"{request.jd_step:.15f}",
        ]
    if request.enable_topocentric:
        arguments += [
            "--latitude",
            f"{request.latitude:.6f}",
            "--longitude",
            f"{request.longitude:.6f}",
            "--enable_topocentric_correction",
            "1",
        ]
    arguments += [
        "--epoch",
        f"{request.epoch:.15f}",
        "--objects",
        ",".join(request.objects),
        "--output_format",
        str(request.output_format),
        "--use_orbital_elements",
        str(int(request.use_orbital_elements)),
        "--output_constellations",
        str(int(request.output_constellations)),
    ]
    return arguments


def run_source(request: EphemerisRequest, config: EphemConfig) -> list[str]:
    """Run the ephemeris source and return its output lines.

    Args:
        request: Ephemeris request.
        config: Runtime config with the source command and timeout.

    Returns:
        Standard output split into lines.

    Raises:
        EphemSourceError: If the command cannot start, times out, or exits non-zero.
    """
    command = [*config.source_command, *build_source_arguments(request)]
    _LOGGER.info("source_command_started", command=command)
    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=config.source_timeout_seconds,
            check=False,
        )
    except OSError as error:
        raise EphemSourceError(
            f"Failed to start ephemeris source '{command[0]}': {error}. "
            "Check EPHEM_SOURCE_COMMAND."
        ) from error
    except subprocess.TimeoutExpired as error:
        raise EphemSourceError(
            f"Ephemeris source timed out after {config.source_timeout_seconds} seconds. "
            "Narrow the request or raise EPHEM_SOURCE_TIMEOUT."
        ) from error
    if completed.returncode != 0:
        stderr_tail = completed.stderr.strip().splitlines()[-5:]
        raise EphemSourceError(
            f"Ephemeris source exited with status {completed.returncode}: "
            f"{' | '.join(stderr_tail) or 'no stderr output'}."
        )
    return completed.stdout.splitlines()
