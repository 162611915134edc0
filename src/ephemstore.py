"""Public SDK surface for ephemstore.

This module provides a stable import path for library users.
It re-exports the dataset model, codecs, and load/save helpers.
"""

from __future__ import annotations

from core.config import EphemConfig
from core.errors import (
    EphemConfigError,
    EphemError,
    EphemFormatError,
    EphemInvalidArgumentError,
    EphemIOError,
    EphemMemoryError,
    EphemSourceError,
)
from core.types import Dataset, EphemerisRequest, ObjectSeries, ObservationPoint
from ingest.output_parser import parse_source_output
from ingest.pipeline import fetch_dataset
from ingest.request_spec import load_request_spec
from store.binary_format import decode_binary, encode_binary, read_binary, write_binary
from store.csv_format import decode_csv, encode_csv, read_csv, write_csv
from store.dataset_io import load_dataset, resolve_format, save_dataset, supported_formats
from store.json_format import decode_json, encode_json, read_json, write_json

__all__ = [
    "Dataset",
    "EphemConfig",
    "EphemConfigError",
    "EphemError",
    "EphemFormatError",
    "EphemIOError",
    "EphemInvalidArgumentError",
    "EphemMemoryError",
    "EphemSourceError",
    "EphemerisRequest",
    "ObjectSeries",
    "ObservationPoint",
    "decode_binary",
    "decode_csv",
    "decode_json",
    "encode_binary",
    "encode_csv",
    "encode_json",
    "fetch_dataset",
    "load_dataset",
    "load_request_spec",
    "parse_source_output",
    "read_binary",
    "read_csv",
    "read_json",
    "resolve_format",
    "save_dataset",
    "supported_formats",
    "write_binary",
    "write_csv",
    "write_json",
]
