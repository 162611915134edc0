"""File and stream resource helpers for dataset codecs.

This module isolates path-or-stream handling and argument checks.
It keeps each codec focused on its own wire layout.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Iterator, Union

from core.constants import UINT32_MAX
from core.errors import EphemFormatError, EphemInvalidArgumentError, EphemIOError
from core.types import Dataset

PathOrStream = Union[str, Path, IO[Any]]


def require_dataset(dataset: Dataset | None, format_name: str) -> Dataset:
    """Validate that a dataset is present and non-empty before encoding.

    Args:
        dataset: Dataset to encode.
        format_name: Target format label for error context.

    Returns:
        The same dataset.

    Raises:
        EphemInvalidArgumentError: If dataset is missing, empty, or too large.
    """
    if dataset is None:
        raise EphemInvalidArgumentError(
            f"Cannot encode {format_name}: no dataset given. Pass a Dataset instance."
        )
    if len(dataset) <= 0:
        raise EphemInvalidArgumentError(
            f"Cannot encode {format_name}: dataset has no objects. "
            "Add at least one object series."
        )
    if len(dataset) > UINT32_MAX:
        raise EphemInvalidArgumentError(
            f"Cannot encode {format_name}: {len(dataset)} objects exceed the 32-bit count limit."
        )
    return dataset


@contextmanager
def open_resource(
    target: PathOrStream | None,
    mode: str,
    encoding: str | None = None,
) -> Iterator[IO[Any]]:
    """Yield an open handle for a path, or pass an existing stream through.

    Paths are opened for the duration of the block and always closed.
    Streams are left open for the caller.

    Args:
        target: File path or already-open stream.
        mode: Open mode used when ``target`` is a path.
        encoding: Text encoding used when ``target`` is a path.

    Yields:
        Readable or writable handle.

    Raises:
        EphemInvalidArgumentError: If no target is given.
        EphemIOError: If the path cannot be opened.
    """
    if target is None or (isinstance(target, (str, Path)) and not str(target)):
        raise EphemInvalidArgumentError(
            "No file path or stream given. Provide a destination or source."
        )
    if not isinstance(target, (str, Path)):
        yield target
        return
    path = Path(target).expanduser()
    newline = "" if encoding is not None else None
    try:
        handle = open(path, mode, encoding=encoding, newline=newline)
    except OSError as error:
        raise EphemIOError(
            f"Failed to open {path} ({mode}): {error.strerror or error}. "
            "Check the path and file permissions."
        ) from error
    with handle:
        yield handle


def describe_target(target: PathOrStream) -> str:
    """Return a printable label for a path or stream."""
    if isinstance(target, (str, Path)):
        return str(target)
    return str(getattr(target, "name", type(target).__name__))


def write_all(handle: IO[Any], payload: str | bytes, target: PathOrStream) -> None:
    """Write a full payload, treating partial writes as failures.

    Args:
        handle: Writable handle.
        payload: Encoded text or bytes.
        target: Original destination for error context.

    Raises:
        EphemIOError: If the sink rejects or only partially accepts the payload.
    """
    try:
        written = handle.write(payload)
        handle.flush()
    except OSError as error:
        raise EphemIOError(
            f"Failed to write {describe_target(target)}: {error.strerror or error}."
        ) from error
    if written is not None and written != len(payload):
        raise EphemIOError(
            f"Failed to write {describe_target(target)}: "
            f"sink accepted {written} of {len(payload)} units."
        )


def read_all(handle: IO[Any], target: PathOrStream) -> Any:
    """Read the remaining content of a handle.

    Raises:
        EphemIOError: If the read fails.
        EphemFormatError: If text content is not valid UTF-8.
    """
    try:
        return handle.read()
    except UnicodeDecodeError as error:
        raise EphemFormatError(
            f"Failed to decode {describe_target(target)} as UTF-8 text: {error.reason}."
        ) from error
    except OSError as error:
        raise EphemIOError(
            f"Failed to read {describe_target(target)}: {error.strerror or error}."
        ) from error
