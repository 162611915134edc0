"""Unit tests for the binary dataset codec."""

from __future__ import annotations

import io
import math
import struct
from pathlib import Path

import pytest

from core.errors import EphemFormatError, EphemInvalidArgumentError, EphemIOError
from core.types import Dataset, ObjectSeries, ObservationPoint
from store.binary_format import (
    FILE_HEADER,
    OBJECT_HEADER,
    POINT_HEADER,
    decode_binary,
    encode_binary,
    read_binary,
    write_binary,
)


class _ShortWriteSink:
    """Writable stream that accepts only half of each payload."""

    def write(self, payload: bytes) -> int:
        return len(payload) // 2

    def flush(self) -> None:
        return None


def test_encode_binary_writes_little_endian_header(sample_dataset: Dataset) -> None:
    """File header should hold magic, version 1, object count, and zero reserved."""
    payload = encode_binary(sample_dataset)

    assert payload[: FILE_HEADER.size] == b"DE43" + struct.pack("<III", 1, 2, 0)


def test_encode_binary_size_matches_layout(sample_dataset: Dataset) -> None:
    """Encoded length should equal the sum of fixed headers and terminated strings."""
    payload = encode_binary(sample_dataset)

    expected = (
        FILE_HEADER.size
        + 2 * OBJECT_HEADER.size
        + len(b"jupiter\0")
        + len(b"mars\0")
        + 3 * POINT_HEADER.size
        + 2 * len(b"Ari\0")
        + len(b"\0")
    )
    assert len(payload) == expected


def test_binary_round_trip_is_exact(sample_dataset: Dataset) -> None:
    """Decoding encoded bytes should reproduce every value bit for bit."""
    assert decode_binary(encode_binary(sample_dataset)) == sample_dataset


def test_binary_round_trip_preserves_nan() -> None:
    """Non-finite values should pass through unchanged."""
    dataset = Dataset(
        objects=(ObjectSeries(name="comet", points=(ObservationPoint(magnitude=math.nan),)),)
    )

    decoded = decode_binary(encode_binary(dataset))

    assert math.isnan(decoded.objects[0].points[0].magnitude)


def test_encode_binary_is_idempotent(sample_dataset: Dataset) -> None:
    """Re-encoding a decoded payload should produce identical bytes."""
    payload = encode_binary(sample_dataset)

    assert encode_binary(decode_binary(payload)) == payload


def test_decode_binary_keeps_object_with_no_points() -> None:
    """Objects with zero points are valid."""
    dataset = Dataset(objects=(ObjectSeries(name="pluto"),))

    decoded = decode_binary(encode_binary(dataset))

    assert decoded.objects[0].name == "pluto" and decoded.objects[0].points == ()


def test_encode_binary_rejects_missing_dataset() -> None:
    """Encoding without a dataset should be an invalid argument."""
    with pytest.raises(EphemInvalidArgumentError):
        encode_binary(None)  # type: ignore[arg-type]


def test_encode_binary_rejects_empty_dataset() -> None:
    """Encoding a dataset with no objects should be an invalid argument."""
    with pytest.raises(EphemInvalidArgumentError):
        encode_binary(Dataset())


def test_decode_binary_rejects_bad_magic(sample_dataset: Dataset) -> None:
    """Payloads not starting with DE43 should fail."""
    payload = b"XXXX" + encode_binary(sample_dataset)[4:]

    with pytest.raises(EphemFormatError, match="magic"):
        decode_binary(payload)


def test_decode_binary_rejects_unknown_version(sample_dataset: Dataset) -> None:
    """Only version 1 payloads are accepted."""
    payload = bytearray(encode_binary(sample_dataset))
    payload[4:8] = struct.pack("<I", 2)

    with pytest.raises(EphemFormatError, match="version 2"):
        decode_binary(bytes(payload))


def test_decode_binary_rejects_oversized_name_length() -> None:
    """A name length above 64 should fail before any name bytes are read."""
    payload = FILE_HEADER.pack(b"DE43", 1, 1, 0) + OBJECT_HEADER.pack(65, 0)

    with pytest.raises(EphemFormatError, match="length 65"):
        decode_binary(payload)


def test_decode_binary_rejects_zero_name_length() -> None:
    """A name length must include at least the terminator."""
    payload = FILE_HEADER.pack(b"DE43", 1, 1, 0) + OBJECT_HEADER.pack(0, 0)

    with pytest.raises(EphemFormatError, match="length 0"):
        decode_binary(payload)


def test_decode_binary_rejects_oversized_constellation_length() -> None:
    """A constellation length above 32 should fail."""
    payload = (
        FILE_HEADER.pack(b"DE43", 1, 1, 0)
        + OBJECT_HEADER.pack(5, 1)
        + b"mars\0"
        + POINT_HEADER.pack(*([0.0] * 18), 33)
    )

    with pytest.raises(EphemFormatError, match="length 33"):
        decode_binary(payload)


def test_decode_binary_rejects_truncated_payload(sample_dataset: Dataset) -> None:
    """Streams ending mid-point should fail rather than return partial data."""
    payload = encode_binary(sample_dataset)[:-3]

    with pytest.raises(EphemFormatError, match="Truncated"):
        decode_binary(payload)


def test_decode_binary_rejects_short_header() -> None:
    """A stream shorter than the file header should fail."""
    with pytest.raises(EphemFormatError):
        decode_binary(b"DE4")


def test_decode_binary_rejects_invalid_utf8_name() -> None:
    """Name bytes must decode as UTF-8."""
    payload = FILE_HEADER.pack(b"DE43", 1, 1, 0) + OBJECT_HEADER.pack(3, 0) + b"\xff\xfe\0"

    with pytest.raises(EphemFormatError, match="UTF-8"):
        decode_binary(payload)


def test_decode_binary_ignores_trailing_bytes(sample_dataset: Dataset) -> None:
    """Bytes after the last declared object are ignored."""
    payload = encode_binary(sample_dataset) + b"extra"

    assert decode_binary(payload) == sample_dataset


def test_write_and_read_binary_file(tmp_path: Path, sample_dataset: Dataset) -> None:
    """Datasets written to a path should read back unchanged."""
    output_path = tmp_path / "ephemeris.bin"

    write_binary(sample_dataset, output_path)

    assert read_binary(output_path) == sample_dataset


def test_write_binary_to_stream_leaves_it_open(sample_dataset: Dataset) -> None:
    """Caller-owned streams should stay open after writing."""
    stream = io.BytesIO()

    write_binary(sample_dataset, stream)

    assert not stream.closed and stream.getvalue() == encode_binary(sample_dataset)


def test_write_binary_raises_on_partial_write(sample_dataset: Dataset) -> None:
    """A sink that accepts fewer bytes than the payload is an IO error."""
    with pytest.raises(EphemIOError):
        write_binary(sample_dataset, _ShortWriteSink())  # type: ignore[arg-type]


def test_write_binary_rejects_missing_destination(sample_dataset: Dataset) -> None:
    """Writing without a destination should be an invalid argument."""
    with pytest.raises(EphemInvalidArgumentError):
        write_binary(sample_dataset, None)  # type: ignore[arg-type]


def test_read_binary_raises_for_missing_file(tmp_path: Path) -> None:
    """Opening a missing path should be an IO error."""
    with pytest.raises(EphemIOError):
        read_binary(tmp_path / "missing.bin")


class _FailingTailStream(io.BytesIO):
    """Binary stream whose reads fail once the payload is exhausted."""

    def read(self, size: int | None = -1) -> bytes:
        if self.tell() >= len(self.getvalue()):
            raise OSError("device detached")
        return super().read(size)


def test_read_binary_maps_trailing_read_failure_to_io_error(sample_dataset: Dataset) -> None:
    """A failing read after the last object is an IO error."""
    stream = _FailingTailStream(encode_binary(sample_dataset))

    with pytest.raises(EphemIOError, match="device detached"):
        read_binary(stream)
