"""Ephemeris fetch pipeline.

This module runs the external ephemeris source for a request and
turns its output into a dataset ready for any codec.
"""

from __future__ import annotations

from core.config import EphemConfig
from core.logging_config import get_logger
from core.types import Dataset, EphemerisRequest
from ingest.output_parser import parse_source_output
from ingest.source_command import run_source

_LOGGER = get_logger(__name__)


def fetch_dataset(request: EphemerisRequest, config: EphemConfig) -> Dataset:
    """Run the ephemeris source and parse its output.

    Args:
        request: Ephemeris request.
        config: Runtime configuration.

    Returns:
        Dataset with one series per requested object.

    Raises:
        EphemConfigError: If the request is invalid.
        EphemSourceError: If the source run fails.
    """
    lines = run_source(request, config)
    dataset = parse_source_output(lines, request)
    _LOGGER.info(
        "fetch_completed",
        objects=list(request.objects),
        line_count=len(lines),
        point_count=dataset.total_points,
    )
    return dataset
