"""Flat CSV dataset codec.

One header row naming 20 fixed columns, then one row per point across all
objects in dataset order. There is no quoting: commas inside object names
and constellations are replaced with spaces on write.
"""

from __future__ import annotations

from core.constants import (
    CSV_COLUMNS,
    CSV_DELIMITER,
    CSV_FLOAT_PRECISION,
    FORMAT_CSV,
    MAX_CONSTELLATION_BYTES,
    MAX_OBJECT_NAME_BYTES,
)
from core.errors import EphemFormatError
from core.field_values import bound_text, parse_float_or_zero
from core.logging_config import get_logger
from core.types import Dataset, ObjectSeries, ObservationPoint
from store.resource_io import (
    PathOrStream,
    describe_target,
    open_resource,
    read_all,
    require_dataset,
    write_all,
)

_LOGGER = get_logger(__name__)

_NUMERIC_COLUMN_COUNT = len(CSV_COLUMNS) - 2


def encode_csv(dataset: Dataset) -> str:
    """Encode a dataset into CSV text.

    Args:
        dataset: Dataset with at least one object.

    Returns:
        Header line plus one newline-terminated row per point.

    Raises:
        EphemInvalidArgumentError: If dataset is missing or empty.
    """
    require_dataset(dataset, FORMAT_CSV)
    lines = [CSV_DELIMITER.join(CSV_COLUMNS)]
    for series in dataset:
        safe_name = _sanitize_text(series.name)
        lines.extend(_format_row(safe_name, point) for point in series.points)
    return "\n".join(lines) + "\n"


def decode_csv(text: str) -> Dataset:
    """Decode CSV text into a dataset.

    Rows are grouped by object name in first-seen order and keep their
    original relative order within each object. Numeric fields that are
    missing or unparsable decode as ``0.0``.

    Args:
        text: CSV content including the header row.

    Returns:
        Decoded dataset.

    Raises:
        EphemFormatError: If the header row is missing.
    """
    return _decode_text(text, "<text>")


def write_csv(dataset: Dataset, destination: PathOrStream) -> None:
    """Encode a dataset and write it to a path or text stream.

    Args:
        dataset: Dataset to persist.
        destination: Output path or writable text stream.

    Raises:
        EphemInvalidArgumentError: If dataset or destination is missing.
        EphemIOError: If the destination cannot accept the full text.
    """
    payload = encode_csv(dataset)
    with open_resource(destination, "w", encoding="utf-8") as handle:
        write_all(handle, payload, destination)
    _LOGGER.info(
        "csv_dataset_written",
        destination=describe_target(destination),
        object_count=len(dataset),
        point_count=dataset.total_points,
    )


def read_csv(source: PathOrStream) -> Dataset:
    """Read and decode a CSV dataset from a path or text stream.

    Args:
        source: Input path or readable text stream.

    Returns:
        Decoded dataset.

    Raises:
        EphemIOError: If the source cannot be opened or read.
        EphemFormatError: If the header row is missing.
    """
    with open_resource(source, "r", encoding="utf-8") as handle:
        text = read_all(handle, source)
    dataset = _decode_text(text, describe_target(source))
    _LOGGER.info(
        "csv_dataset_read",
        source=describe_target(source),
        object_count=len(dataset),
        point_count=dataset.total_points,
    )
    return dataset


def _sanitize_text(value: str) -> str:
    return value.replace(CSV_DELIMITER, " ")


def _format_row(safe_name: str, point: ObservationPoint) -> str:
    numbers = (
        point.julian_date,
        *point.position,
        *point.ra_dec,
        point.magnitude,
        point.phase,
        point.angular_size,
        point.physical_size,
        point.albedo,
        point.sun_distance,
        point.earth_distance,
        point.sun_angular_distance,
        point.theta_edo,
        *point.ecliptic,
    )
    fields = [safe_name]
    fields.extend(f"{value:.{CSV_FLOAT_PRECISION}f}" for value in numbers)
    fields.append(_sanitize_text(point.constellation))
    return CSV_DELIMITER.join(fields)


def _decode_text(text: str, label: str) -> Dataset:
    """Group CSV rows into object series.

    Args:
        text: Full CSV content.
        label: Source label for error and log context.

    Returns:
        Decoded dataset.

    Raises:
        EphemFormatError: If the header row is missing.
    """
    lines = text.split("\n")
    if not text or not lines[0].strip():
        raise EphemFormatError(
            f"CSV dataset {label} has no header row. "
            f"Expected: {CSV_DELIMITER.join(CSV_COLUMNS)}"
        )
    points_by_name: dict[str, list[ObservationPoint]] = {}
    defaulted_count = 0
    skipped_count = 0
    for row in lines[1:]:
        row = row.rstrip("\r")
        if not row.strip() or CSV_DELIMITER not in row:
            continue
        fields = row.split(CSV_DELIMITER, len(CSV_COLUMNS) - 1)
        name = bound_text(fields[0], MAX_OBJECT_NAME_BYTES)
        if not name:
            skipped_count += 1
            continue
        point, row_defaults = _parse_point(fields)
        defaulted_count += row_defaults
        points_by_name.setdefault(name, []).append(point)
    if defaulted_count or skipped_count:
        _LOGGER.warning(
            "csv_decode_degraded",
            source=label,
            defaulted_field_count=defaulted_count,
            skipped_row_count=skipped_count,
        )
    return Dataset(
        objects=tuple(
            ObjectSeries(name=name, points=tuple(points))
            for name, points in points_by_name.items()
        )
    )


def _parse_point(fields: list[str]) -> tuple[ObservationPoint, int]:
    """Parse one data row positionally.

    Args:
        fields: Row split into at most 20 columns.

    Returns:
        Parsed point and the number of numeric fields defaulted to zero.
    """
    values: list[float] = []
    defaulted = 0
    for column in range(1, _NUMERIC_COLUMN_COUNT + 1):
        raw_value = fields[column] if column < len(fields) else None
        value, was_defaulted = parse_float_or_zero(raw_value)
        values.append(value)
        defaulted += int(was_defaulted)
    constellation = fields[-1] if len(fields) == len(CSV_COLUMNS) else ""
    point = ObservationPoint(
        julian_date=values[0],
        position=values[1:4],
        ra_dec=values[4:6],
        magnitude=values[6],
        phase=values[7],
        angular_size=values[8],
        physical_size=values[9],
        albedo=values[10],
        sun_distance=values[11],
        earth_distance=values[12],
        sun_angular_distance=values[13],
        theta_edo=values[14],
        ecliptic=values[15:18],
        constellation=bound_text(constellation, MAX_CONSTELLATION_BYTES),
    )
    return point, defaulted
