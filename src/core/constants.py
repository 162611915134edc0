"""Core constants used across ephemstore modules.

This module centralizes wire-format and default request values.
Keeping values here avoids magic literals in codec logic.
"""

from __future__ import annotations

BINARY_MAGIC = b"DE43"
BINARY_FORMAT_VERSION = 1
UINT32_MAX = 0xFFFFFFFF

# Capacities include the NUL terminator written by the binary codec.
OBJECT_NAME_CAPACITY = 64
CONSTELLATION_CAPACITY = 32
MAX_OBJECT_NAME_BYTES = OBJECT_NAME_CAPACITY - 1
MAX_CONSTELLATION_BYTES = CONSTELLATION_CAPACITY - 1

CSV_COLUMNS = (
    "object_name",
    "jd",
    "pos_x",
    "pos_y",
    "pos_z",
    "ra",
    "dec",
    "magnitude",
    "phase",
    "angular_size",
    "physical_size",
    "albedo",
    "sun_dist",
    "earth_dist",
    "sun_ang_dist",
    "theta_edo",
    "ecliptic_lng",
    "ecliptic_dist",
    "ecliptic_lat",
    "constellation",
)
CSV_DELIMITER = ","
CSV_FLOAT_PRECISION = 15

JSON_FORMAT_VERSION = 1
JSON_INDENT = 2

FORMAT_BINARY = "binary"
FORMAT_CSV = "csv"
FORMAT_JSON = "json"
SUPPORTED_FORMATS = (FORMAT_BINARY, FORMAT_CSV, FORMAT_JSON)
FORMAT_SUFFIXES = {
    ".bin": FORMAT_BINARY,
    ".de43": FORMAT_BINARY,
    ".csv": FORMAT_CSV,
    ".json": FORMAT_JSON,
}

DEFAULT_JD_MIN = 2451544.5
DEFAULT_JD_MAX = 2451574.5
DEFAULT_JD_STEP = 1.0
DEFAULT_EPOCH = 2451545.0
DEFAULT_OBJECTS = ("jupiter",)
DEFAULT_OUTPUT_FORMAT = 0
SUPPORTED_OUTPUT_FORMATS = (-1, 0, 1, 2, 3)
SOURCE_FIELDS_PER_OBJECT = 17
DEFAULT_SOURCE_COMMAND = "docker run --rm ephemeris-compute-de430:v6 ./bin/ephem.bin"
DEFAULT_SOURCE_TIMEOUT_SECONDS = 600.0
