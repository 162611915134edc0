"""Ephemeris source output parsing.

Each non-blank output line holds a Julian date followed, per requested
object in request order, by 17 numeric fields and an optional
constellation token. Lines become one point per object.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from core.constants import MAX_CONSTELLATION_BYTES, SOURCE_FIELDS_PER_OBJECT
from core.field_values import bound_text, parse_float_or_zero
from core.logging_config import get_logger
from core.types import Dataset, EphemerisRequest, ObjectSeries, ObservationPoint

_LOGGER = get_logger(__name__)


def parse_source_output(lines: Iterable[str], request: EphemerisRequest) -> Dataset:
    """Parse source output lines into a dataset.

    Args:
        lines: Whitespace-delimited output lines.
        request: Request that produced the output; fixes object order and
            whether a constellation token follows each object's fields.

    Returns:
        Dataset with one series per requested object and one point per line.
    """
    points_per_object: list[list[ObservationPoint]] = [[] for _ in request.objects]
    short_line_count = 0
    defaulted_count = 0
    for line in lines:
        tokens = line.split()
        if not tokens:
            continue
        julian_date, _ = parse_float_or_zero(tokens[0])
        token_stream = _TokenStream(tokens[1:])
        for object_points in points_per_object:
            object_points.append(
                _parse_object_fields(julian_date, token_stream, request.output_constellations)
            )
        short_line_count += int(token_stream.exhausted)
        defaulted_count += token_stream.defaulted
    if short_line_count or defaulted_count:
        _LOGGER.warning(
            "source_output_degraded",
            short_line_count=short_line_count,
            defaulted_field_count=defaulted_count,
        )
    return Dataset(
        objects=tuple(
            ObjectSeries(name=name, points=tuple(points))
            for name, points in zip(request.objects, points_per_object)
        )
    )


class _TokenStream:
    """Sequential token reader that records missing and unparsable fields."""

    def __init__(self, tokens: list[str]) -> None:
        self._tokens: Iterator[str] = iter(tokens)
        self.exhausted = False
        self.defaulted = 0

    def next_text(self) -> str | None:
        token = next(self._tokens, None)
        if token is None:
            self.exhausted = True
        return token

    def next_float(self) -> float:
        value, was_defaulted = parse_float_or_zero(self.next_text())
        self.defaulted += int(was_defaulted and not self.exhausted)
        return value


def _parse_object_fields(
    julian_date: float,
    tokens: _TokenStream,
    with_constellation: bool,
) -> ObservationPoint:
    values = [tokens.next_float() for _ in range(SOURCE_FIELDS_PER_OBJECT)]
    constellation = ""
    if with_constellation:
        constellation = bound_text(tokens.next_text() or "", MAX_CONSTELLATION_BYTES)
    return ObservationPoint(
        julian_date=julian_date,
        position=values[0:3],
        ra_dec=values[3:5],
        magnitude=values[5],
        phase=values[6],
        angular_size=values[7],
        physical_size=values[8],
        albedo=values[9],
        sun_distance=values[10],
        earth_distance=values[11],
        sun_angular_distance=values[12],
        theta_edo=values[13],
        ecliptic=values[14:17],
        constellation=constellation,
    )
