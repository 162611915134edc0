"""Nested JSON dataset codec.

This module serializes datasets to a self-describing JSON tree. Decode
is tolerant at the leaves: missing or wrong-typed point fields take their
zero defaults, while a missing or malformed object/point structure fails.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping

from core.constants import (
    FORMAT_JSON,
    JSON_FORMAT_VERSION,
    JSON_INDENT,
    MAX_CONSTELLATION_BYTES,
    MAX_OBJECT_NAME_BYTES,
)
from core.errors import EphemFormatError
from core.field_values import bound_text
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

_SCALAR_FIELDS = (
    ("jd", "julian_date"),
    ("magnitude", "magnitude"),
    ("phase", "phase"),
    ("angular_size", "angular_size"),
    ("physical_size", "physical_size"),
    ("albedo", "albedo"),
    ("sun_dist", "sun_distance"),
    ("earth_dist", "earth_distance"),
    ("sun_ang_dist", "sun_angular_distance"),
    ("theta_edo", "theta_edo"),
)
_ARRAY_FIELDS = (
    ("position", "position", 3),
    ("ra_dec", "ra_dec", 2),
    ("ecliptic", "ecliptic", 3),
)


def point_to_payload(point: ObservationPoint) -> dict[str, object]:
    """Serialize an observation point into a JSON-safe payload.

    Args:
        point: Observation point.

    Returns:
        Dictionary with every scalar by name plus array fields.
    """
    payload: dict[str, object] = {
        key: getattr(point, attribute) for key, attribute in _SCALAR_FIELDS
    }
    payload["constellation"] = point.constellation
    for key, attribute, _ in _ARRAY_FIELDS:
        payload[key] = list(getattr(point, attribute))
    return payload


def point_from_payload(payload: object) -> ObservationPoint:
    """Deserialize a point payload, defaulting every missing leaf.

    Args:
        payload: Decoded JSON value for one point.

    Returns:
        Parsed observation point. Non-object payloads yield all defaults.
    """
    if not isinstance(payload, Mapping):
        return ObservationPoint()
    fields: dict[str, Any] = {}
    for key, attribute in _SCALAR_FIELDS:
        fields[attribute] = _leaf_float(payload.get(key))
    for key, attribute, length in _ARRAY_FIELDS:
        fields[attribute] = _array_from_payload(payload.get(key), length)
    constellation = payload.get("constellation")
    if isinstance(constellation, str):
        fields["constellation"] = bound_text(constellation, MAX_CONSTELLATION_BYTES)
    return ObservationPoint(**fields)


def series_to_payload(series: ObjectSeries) -> dict[str, object]:
    """Serialize one object series into a JSON-safe payload."""
    return {
        "object_name": series.name,
        "count": len(series.points),
        "points": [point_to_payload(point) for point in series.points],
    }


def series_from_payload(payload: object, index: int) -> ObjectSeries:
    """Deserialize one object series payload.

    Args:
        payload: Decoded JSON value for one object.
        index: Zero-based position in the objects array.

    Returns:
        Parsed object series.

    Raises:
        EphemFormatError: If the object, its name, or its points array is malformed.
    """
    if not isinstance(payload, Mapping):
        raise EphemFormatError(
            f"Invalid JSON dataset: objects[{index}] must be an object, "
            f"got {type(payload).__name__}."
        )
    name = payload.get("object_name")
    if isinstance(name, str):
        name = bound_text(name, MAX_OBJECT_NAME_BYTES)
    if not isinstance(name, str) or not name:
        raise EphemFormatError(
            f"Invalid JSON dataset: objects[{index}].object_name must be a non-empty string."
        )
    points = payload.get("points")
    if not isinstance(points, list):
        raise EphemFormatError(
            f"Invalid JSON dataset: objects[{index}].points must be an array."
        )
    return ObjectSeries(
        name=name,
        points=tuple(point_from_payload(point) for point in points),
    )


def dataset_to_payload(dataset: Dataset) -> dict[str, object]:
    """Serialize a dataset into the JSON tree.

    Args:
        dataset: Dataset with at least one object.

    Returns:
        Root payload dictionary.

    Raises:
        EphemInvalidArgumentError: If dataset is missing or empty.
    """
    require_dataset(dataset, FORMAT_JSON)
    return {
        "format_version": JSON_FORMAT_VERSION,
        "object_count": len(dataset),
        "objects": [series_to_payload(series) for series in dataset],
    }


def dataset_from_payload(payload: object) -> Dataset:
    """Deserialize the JSON tree into a dataset.

    Args:
        payload: Decoded JSON root value.

    Returns:
        Parsed dataset.

    Raises:
        EphemFormatError: If root structure, counts, or version are invalid.
    """
    if not isinstance(payload, Mapping):
        raise EphemFormatError(
            f"Invalid JSON dataset: expected object at top level, got {type(payload).__name__}."
        )
    _check_format_version(payload)
    object_count = _parse_object_count(payload.get("object_count"))
    objects = payload.get("objects")
    if not isinstance(objects, list):
        raise EphemFormatError("Invalid JSON dataset: 'objects' must be an array.")
    if len(objects) != object_count:
        raise EphemFormatError(
            f"Invalid JSON dataset: object_count is {object_count} "
            f"but 'objects' has {len(objects)} entries."
        )
    return Dataset(
        objects=tuple(series_from_payload(item, index) for index, item in enumerate(objects))
    )


def encode_json(dataset: Dataset) -> str:
    """Encode a dataset into indented JSON text with a trailing newline."""
    return json.dumps(dataset_to_payload(dataset), indent=JSON_INDENT) + "\n"


def decode_json(text: str) -> Dataset:
    """Decode JSON text into a dataset.

    Args:
        text: JSON document.

    Returns:
        Parsed dataset.

    Raises:
        EphemFormatError: If text is not valid JSON or structure is invalid.
    """
    return dataset_from_payload(_parse_document(text, "<text>"))


def write_json(dataset: Dataset, destination: PathOrStream) -> None:
    """Encode a dataset and write it to a path or text stream.

    Args:
        dataset: Dataset to persist.
        destination: Output path or writable text stream.

    Raises:
        EphemInvalidArgumentError: If dataset or destination is missing.
        EphemIOError: If the destination cannot accept the full text.
    """
    payload = encode_json(dataset)
    with open_resource(destination, "w", encoding="utf-8") as handle:
        write_all(handle, payload, destination)
    _LOGGER.info(
        "json_dataset_written",
        destination=describe_target(destination),
        object_count=len(dataset),
        point_count=dataset.total_points,
    )


def read_json(source: PathOrStream) -> Dataset:
    """Read and decode a JSON dataset from a path or text stream.

    Args:
        source: Input path or readable text stream.

    Returns:
        Parsed dataset.

    Raises:
        EphemIOError: If the source cannot be opened or read.
        EphemFormatError: If content is not a valid JSON dataset.
    """
    with open_resource(source, "r", encoding="utf-8") as handle:
        text = read_all(handle, source)
    dataset = dataset_from_payload(_parse_document(text, describe_target(source)))
    _LOGGER.info(
        "json_dataset_read",
        source=describe_target(source),
        object_count=len(dataset),
        point_count=dataset.total_points,
    )
    return dataset


def _parse_document(text: str, label: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise EphemFormatError(
            f"Failed to parse JSON dataset {label}: {error.msg} "
            f"at line {error.lineno} column {error.colno}."
        ) from error


def _check_format_version(payload: Mapping[str, object]) -> None:
    """Accept a missing version, reject anything but the current one."""
    if "format_version" not in payload:
        return
    version = payload["format_version"]
    if not _is_number(version) or version != JSON_FORMAT_VERSION:
        raise EphemFormatError(
            f"Unsupported JSON dataset format_version {version!r}. "
            f"Only version {JSON_FORMAT_VERSION} is supported."
        )


def _parse_object_count(value: object) -> int:
    count = _leaf_float(value) if _is_number(value) else math.nan
    if not math.isfinite(count):
        raise EphemFormatError(
            "Invalid JSON dataset: 'object_count' must be a finite number."
        )
    return int(count)


def _array_from_payload(value: object, length: int) -> tuple[float, ...]:
    """Copy numeric elements index by index, leaving zeros elsewhere.

    Non-numeric elements and elements past ``length`` are not copied.
    """
    slots = [0.0] * length
    if not isinstance(value, list):
        return tuple(slots)
    for index, item in enumerate(value[:length]):
        if _is_number(item):
            slots[index] = _leaf_float(item)
    return tuple(slots)


def _leaf_float(value: object) -> float:
    """Convert a numeric leaf; integers beyond float range saturate to infinity."""
    if not _is_number(value):
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except OverflowError:
        return math.inf if value > 0 else -math.inf  # type: ignore[operator]


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
