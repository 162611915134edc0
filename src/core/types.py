"""Shared typed models.

This module defines immutable data models used by the codecs, the
ingest layer, and the SDK to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

from core.constants import (
    DEFAULT_EPOCH,
    DEFAULT_JD_MAX,
    DEFAULT_JD_MIN,
    DEFAULT_JD_STEP,
    DEFAULT_OBJECTS,
    DEFAULT_OUTPUT_FORMAT,
    MAX_CONSTELLATION_BYTES,
    MAX_OBJECT_NAME_BYTES,
)
from core.errors import EphemInvalidArgumentError
from core.field_values import utf8_length


@dataclass(frozen=True)
class ObservationPoint:
    """One sample for one object at one Julian date.

    Attributes:
        julian_date: Sample timestamp as a Julian date.
        position: Cartesian X, Y, Z coordinates.
        ra_dec: Right ascension and declination.
        magnitude: Visual magnitude.
        phase: Illuminated phase.
        angular_size: Apparent angular size.
        physical_size: Physical size.
        albedo: Albedo.
        sun_distance: Distance from the Sun.
        earth_distance: Distance from the Earth.
        sun_angular_distance: Angular distance from the Sun.
        theta_edo: Elongation parameter.
        ecliptic: Ecliptic longitude, distance, latitude.
        constellation: Constellation name without NUL, empty when not provided.
    """

    julian_date: float = 0.0
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    ra_dec: tuple[float, float] = (0.0, 0.0)
    magnitude: float = 0.0
    phase: float = 0.0
    angular_size: float = 0.0
    physical_size: float = 0.0
    albedo: float = 0.0
    sun_distance: float = 0.0
    earth_distance: float = 0.0
    sun_angular_distance: float = 0.0
    theta_edo: float = 0.0
    ecliptic: tuple[float, float, float] = (0.0, 0.0, 0.0)
    constellation: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _float_tuple(self.position, 3, "position"))
        object.__setattr__(self, "ra_dec", _float_tuple(self.ra_dec, 2, "ra_dec"))
        object.__setattr__(self, "ecliptic", _float_tuple(self.ecliptic, 3, "ecliptic"))
        if utf8_length(self.constellation) > MAX_CONSTELLATION_BYTES:
            raise EphemInvalidArgumentError(
                f"Constellation '{self.constellation}' exceeds {MAX_CONSTELLATION_BYTES} "
                "UTF-8 bytes. Shorten the constellation name."
            )
        if "\0" in self.constellation:
            raise EphemInvalidArgumentError(
                f"Constellation {self.constellation!r} contains a NUL character. "
                "Remove it before storing the point."
            )


@dataclass(frozen=True)
class ObjectSeries:
    """One named object's ordered sequence of observation points.

    Attributes:
        name: Object name, non-empty, NUL-free and at most 63 UTF-8 bytes.
        points: Points in input order.
    """

    name: str
    points: tuple[ObservationPoint, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name:
            raise EphemInvalidArgumentError(
                "Object series name is empty. Provide a non-empty object name."
            )
        if utf8_length(self.name) > MAX_OBJECT_NAME_BYTES:
            raise EphemInvalidArgumentError(
                f"Object name '{self.name}' exceeds {MAX_OBJECT_NAME_BYTES} UTF-8 bytes. "
                "Shorten the object name."
            )
        if "\0" in self.name:
            raise EphemInvalidArgumentError(
                f"Object name {self.name!r} contains a NUL character. "
                "Remove it before storing the series."
            )
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class Dataset:
    """Ordered collection of object series handled by one codec call.

    Attributes:
        objects: Object series in dataset order.
    """

    objects: tuple[ObjectSeries, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[ObjectSeries]:
        return iter(self.objects)

    @property
    def object_names(self) -> tuple[str, ...]:
        """Object names in dataset order."""
        return tuple(series.name for series in self.objects)

    @property
    def total_points(self) -> int:
        """Number of points across all objects."""
        return sum(len(series.points) for series in self.objects)

    def find_object(self, name: str) -> ObjectSeries | None:
        """Return the first series named ``name``, if any."""
        for series in self.objects:
            if series.name == name:
                return series
        return None


@dataclass(frozen=True)
class EphemerisRequest:
    """Ephemeris source request options.

    Attributes:
        jd_min: Start Julian date.
        jd_max: End Julian date.
        jd_step: Step size in days.
        jd_list: Explicit Julian dates; overrides the range when non-empty.
        latitude: Observer latitude in degrees.
        longitude: Observer longitude in degrees.
        enable_topocentric: Apply topocentric correction.
        epoch: Epoch for coordinates.
        objects: Object names in source output order.
        output_format: Source output format selector.
        use_orbital_elements: Ask the source to use orbital elements.
        output_constellations: Ask the source to append constellations.
    """

    jd_min: float = DEFAULT_JD_MIN
    jd_max: float = DEFAULT_JD_MAX
    jd_step: float = DEFAULT_JD_STEP
    jd_list: tuple[float, ...] = ()
    latitude: float = 0.0
    longitude: float = 0.0
    enable_topocentric: bool = False
    epoch: float = DEFAULT_EPOCH
    objects: tuple[str, ...] = DEFAULT_OBJECTS
    output_format: int = DEFAULT_OUTPUT_FORMAT
    use_orbital_elements: bool = False
    output_constellations: bool = False


def _float_tuple(values: Sequence[float], length: int, field_name: str) -> tuple[float, ...]:
    if len(values) != length:
        raise EphemInvalidArgumentError(
            f"Field '{field_name}' expects {length} values, got {len(values)}."
        )
    return tuple(float(value) for value in values)
