"""Versioned binary dataset codec.

Wire layout, little-endian with no padding between fields::

    file header    4s magic "DE43", u32 version, u32 object_count, u32 reserved
    per object     u32 name_length, u32 point_count, name bytes (NUL-terminated)
    per point      18 x f64 fields, u32 constellation_length,
                   constellation bytes (NUL-terminated)

Length fields include the terminator byte. Decode either returns a
complete dataset or raises; partially decoded objects are discarded.
"""

from __future__ import annotations

import io
import struct
from typing import IO

from core.constants import (
    BINARY_FORMAT_VERSION,
    BINARY_MAGIC,
    CONSTELLATION_CAPACITY,
    FORMAT_BINARY,
    OBJECT_NAME_CAPACITY,
    UINT32_MAX,
)
from core.errors import (
    EphemFormatError,
    EphemInvalidArgumentError,
    EphemIOError,
    EphemMemoryError,
)
from core.logging_config import get_logger
from core.types import Dataset, ObjectSeries, ObservationPoint
from store.resource_io import (
    PathOrStream,
    describe_target,
    open_resource,
    require_dataset,
    write_all,
)

_LOGGER = get_logger(__name__)

FILE_HEADER = struct.Struct("<4sIII")
OBJECT_HEADER = struct.Struct("<II")
POINT_HEADER = struct.Struct("<18dI")


def encode_binary(dataset: Dataset) -> bytes:
    """Encode a dataset into the binary layout.

    Args:
        dataset: Dataset with at least one object.

    Returns:
        Encoded bytes.

    Raises:
        EphemInvalidArgumentError: If dataset is missing, empty, or a
            point count does not fit in 32 bits.
    """
    require_dataset(dataset, FORMAT_BINARY)
    buffer = io.BytesIO()
    buffer.write(FILE_HEADER.pack(BINARY_MAGIC, BINARY_FORMAT_VERSION, len(dataset), 0))
    for series in dataset:
        _write_object(buffer, series)
    return buffer.getvalue()


def decode_binary(payload: bytes) -> Dataset:
    """Decode binary bytes into a dataset.

    Args:
        payload: Encoded bytes.

    Returns:
        Decoded dataset.

    Raises:
        EphemFormatError: If bytes are not a valid version 1 payload.
        EphemMemoryError: If declared counts cannot be allocated.
    """
    return _decode_stream(io.BytesIO(payload), "<bytes>")


def write_binary(dataset: Dataset, destination: PathOrStream) -> None:
    """Encode a dataset and write it to a path or binary stream.

    Args:
        dataset: Dataset to persist.
        destination: Output path or writable binary stream.

    Raises:
        EphemInvalidArgumentError: If dataset or destination is missing.
        EphemIOError: If the destination cannot accept every byte.
    """
    payload = encode_binary(dataset)
    with open_resource(destination, "wb") as handle:
        write_all(handle, payload, destination)
    _LOGGER.info(
        "binary_dataset_written",
        destination=describe_target(destination),
        object_count=len(dataset),
        point_count=dataset.total_points,
        byte_count=len(payload),
    )


def read_binary(source: PathOrStream) -> Dataset:
    """Read and decode a binary dataset from a path or binary stream.

    Args:
        source: Input path or readable binary stream.

    Returns:
        Decoded dataset.

    Raises:
        EphemIOError: If the source cannot be opened or read.
        EphemFormatError: If content is not a valid binary dataset.
    """
    with open_resource(source, "rb") as handle:
        dataset = _decode_stream(handle, describe_target(source))
    _LOGGER.info(
        "binary_dataset_read",
        source=describe_target(source),
        object_count=len(dataset),
        point_count=dataset.total_points,
    )
    return dataset


def _write_object(buffer: io.BytesIO, series: ObjectSeries) -> None:
    point_count = len(series.points)
    if point_count > UINT32_MAX:
        raise EphemInvalidArgumentError(
            f"Cannot encode {FORMAT_BINARY}: object '{series.name}' has {point_count} points, "
            "more than the 32-bit count limit."
        )
    name_bytes = series.name.encode("utf-8") + b"\0"
    buffer.write(OBJECT_HEADER.pack(len(name_bytes), point_count))
    buffer.write(name_bytes)
    for point in series.points:
        constellation_bytes = point.constellation.encode("utf-8") + b"\0"
        buffer.write(POINT_HEADER.pack(*_point_values(point), len(constellation_bytes)))
        buffer.write(constellation_bytes)


def _point_values(point: ObservationPoint) -> tuple[float, ...]:
    return (
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


class _BinaryReader:
    """Exact-size reader that maps short reads to format errors."""

    def __init__(self, stream: IO[bytes], label: str) -> None:
        self._stream = stream
        self._label = label
        self._offset = 0

    def read_exact(self, size: int, context: str) -> bytes:
        chunk = self._read(size)
        if chunk is None or len(chunk) != size:
            got = 0 if chunk is None else len(chunk)
            raise EphemFormatError(
                f"Truncated binary dataset {self._label}: expected {size} bytes for {context} "
                f"at offset {self._offset}, got {got}."
            )
        self._offset += size
        return chunk

    def has_trailing_bytes(self) -> bool:
        return bool(self._read(1))

    def _read(self, size: int) -> bytes | None:
        try:
            return self._stream.read(size)
        except OSError as error:
            raise EphemIOError(
                f"Failed to read {self._label} at offset {self._offset}: "
                f"{error.strerror or error}."
            ) from error


def _decode_stream(stream: IO[bytes], label: str) -> Dataset:
    """Decode a binary dataset from an open stream.

    Args:
        stream: Readable binary stream positioned at the file header.
        label: Source label for error context.

    Returns:
        Decoded dataset.

    Raises:
        EphemFormatError: If the payload is invalid or truncated.
        EphemMemoryError: If allocation fails.
    """
    reader = _BinaryReader(stream, label)
    magic, version, object_count, _ = FILE_HEADER.unpack(
        reader.read_exact(FILE_HEADER.size, "file header")
    )
    if magic != BINARY_MAGIC:
        raise EphemFormatError(
            f"Invalid binary dataset {label}: magic {magic!r} does not match {BINARY_MAGIC!r}."
        )
    if version != BINARY_FORMAT_VERSION:
        raise EphemFormatError(
            f"Unsupported binary dataset version {version} in {label}. "
            f"Only version {BINARY_FORMAT_VERSION} is supported."
        )
    try:
        objects = [_read_object(reader, index) for index in range(object_count)]
        dataset = Dataset(objects=tuple(objects))
    except MemoryError as error:
        raise EphemMemoryError(
            f"Out of memory decoding {object_count} objects from {label}."
        ) from error
    if reader.has_trailing_bytes():
        _LOGGER.warning("binary_trailing_bytes_ignored", source=label, object_count=object_count)
    return dataset


def _read_object(reader: _BinaryReader, index: int) -> ObjectSeries:
    name_length, point_count = OBJECT_HEADER.unpack(
        reader.read_exact(OBJECT_HEADER.size, f"object {index} header")
    )
    context = f"object {index} name"
    _check_length(name_length, OBJECT_NAME_CAPACITY, context)
    name = _decode_text(reader.read_exact(name_length, context), context)
    points = [_read_point(reader, index, point_index) for point_index in range(point_count)]
    try:
        return ObjectSeries(name=name, points=tuple(points))
    except EphemInvalidArgumentError as error:
        raise EphemFormatError(f"Invalid {context}: {error}") from error


def _read_point(reader: _BinaryReader, object_index: int, point_index: int) -> ObservationPoint:
    context = f"object {object_index} point {point_index}"
    values = POINT_HEADER.unpack(reader.read_exact(POINT_HEADER.size, context))
    constellation_length = values[-1]
    constellation_context = f"{context} constellation"
    _check_length(constellation_length, CONSTELLATION_CAPACITY, constellation_context)
    constellation = _decode_text(
        reader.read_exact(constellation_length, constellation_context),
        constellation_context,
    )
    try:
        return _point_from_values(values, constellation)
    except EphemInvalidArgumentError as error:
        raise EphemFormatError(f"Invalid {constellation_context}: {error}") from error


def _point_from_values(values: tuple, constellation: str) -> ObservationPoint:
    return ObservationPoint(
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
        constellation=constellation,
    )


def _check_length(length: int, capacity: int, context: str) -> None:
    """Reject length fields outside ``1..capacity`` before reading."""
    if length < 1 or length > capacity:
        raise EphemFormatError(
            f"Invalid {context} length {length}: expected 1 to {capacity} bytes "
            "including the terminator."
        )


def _decode_text(raw: bytes, context: str) -> str:
    terminated = raw.split(b"\0", 1)[0]
    try:
        return terminated.decode("utf-8")
    except UnicodeDecodeError as error:
        raise EphemFormatError(f"Invalid {context}: not valid UTF-8 ({error.reason}).") from error
