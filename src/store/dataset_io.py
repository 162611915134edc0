"""Format dispatch for dataset persistence.

This module maps file suffixes or explicit format names onto codecs.
It powers the SDK load/save helpers and the CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from core.constants import (
    FORMAT_BINARY,
    FORMAT_CSV,
    FORMAT_JSON,
    FORMAT_SUFFIXES,
    SUPPORTED_FORMATS,
)
from core.errors import EphemInvalidArgumentError
from core.logging_config import get_logger
from core.types import Dataset
from store.binary_format import read_binary, write_binary
from store.csv_format import read_csv, write_csv
from store.json_format import read_json, write_json
from store.resource_io import PathOrStream

_LOGGER = get_logger(__name__)

_READERS: dict[str, Callable[[PathOrStream], Dataset]] = {
    FORMAT_BINARY: read_binary,
    FORMAT_CSV: read_csv,
    FORMAT_JSON: read_json,
}
_WRITERS: dict[str, Callable[[Dataset, PathOrStream], None]] = {
    FORMAT_BINARY: write_binary,
    FORMAT_CSV: write_csv,
    FORMAT_JSON: write_json,
}


def supported_formats() -> tuple[str, ...]:
    """Return supported dataset format names."""
    return SUPPORTED_FORMATS


def resolve_format(path: str | Path, format_name: str | None = None) -> str:
    """Resolve the codec for a path.

    Args:
        path: Dataset file path.
        format_name: Optional explicit format that overrides the suffix.

    Returns:
        One of the supported format names.

    Raises:
        EphemInvalidArgumentError: If the format is unknown or cannot be inferred.
    """
    if format_name is not None:
        if format_name not in SUPPORTED_FORMATS:
            raise EphemInvalidArgumentError(
                f"Unsupported dataset format '{format_name}'. "
                f"Supported formats: {', '.join(SUPPORTED_FORMATS)}."
            )
        return format_name
    suffix = Path(path).suffix.lower()
    resolved = FORMAT_SUFFIXES.get(suffix)
    if resolved is None:
        raise EphemInvalidArgumentError(
            f"Cannot infer dataset format from '{path}'. "
            f"Use one of {', '.join(sorted(FORMAT_SUFFIXES))} or pass a format explicitly."
        )
    return resolved


def save_dataset(dataset: Dataset, path: str | Path, format_name: str | None = None) -> str:
    """Persist a dataset in the format chosen by suffix or override.

    Args:
        dataset: Dataset to persist.
        path: Destination file path.
        format_name: Optional explicit format.

    Returns:
        The format name used.
    """
    resolved = resolve_format(path, format_name)
    _WRITERS[resolved](dataset, path)
    _LOGGER.info("dataset_saved", path=str(path), format=resolved)
    return resolved


def load_dataset(path: str | Path, format_name: str | None = None) -> Dataset:
    """Load a dataset in the format chosen by suffix or override.

    Args:
        path: Source file path.
        format_name: Optional explicit format.

    Returns:
        Decoded dataset.
    """
    resolved = resolve_format(path, format_name)
    dataset = _READERS[resolved](path)
    _LOGGER.info("dataset_loaded", path=str(path), format=resolved, object_count=len(dataset))
    return dataset
