"""Unit tests for ephemeris source output parsing."""

from __future__ import annotations

from core.types import EphemerisRequest
from ingest.output_parser import parse_source_output
from tests.fixture_paths import fixture_path


def _fixture_lines() -> list[str]:
    return fixture_path("source_output.txt").read_text(encoding="utf-8").splitlines()


def test_parse_source_output_builds_series_in_request_order() -> None:
    """One series per requested object, in request order."""
    request = EphemerisRequest(objects=("jupiter", "mars"), output_constellations=True)

    dataset = parse_source_output(_fixture_lines(), request)

    assert dataset.object_names == ("jupiter", "mars")
    assert [len(series) for series in dataset] == [2, 2]


def test_parse_source_output_maps_fields_positionally() -> None:
    """Fields should map to position, ra/dec, scalars, and ecliptic in order."""
    request = EphemerisRequest(objects=("jupiter", "mars"), output_constellations=True)

    mars_point = parse_source_output(_fixture_lines(), request).objects[1].points[0]

    assert mars_point.julian_date == 2451544.5
    assert mars_point.position == (1.25, -0.5, -0.25)
    assert mars_point.earth_distance == 1.84
    assert mars_point.ecliptic == (0.125, 1.84, 0.01)
    assert mars_point.constellation == "Psc"


def test_parse_source_output_zero_fills_short_lines() -> None:
    """Missing trailing fields should decode as zeros."""
    request = EphemerisRequest(objects=("venus",), output_constellations=True)

    point = parse_source_output(["2451544.5 1.0 2.0"], request).objects[0].points[0]

    assert point.position == (1.0, 2.0, 0.0) and point.constellation == ""


def test_parse_source_output_without_constellations_reads_next_object() -> None:
    """Without constellations each object occupies exactly 17 fields."""
    values = " ".join(str(float(index)) for index in range(34))
    request = EphemerisRequest(objects=("venus", "mars"))

    dataset = parse_source_output([f"2451544.5 {values}"], request)

    assert dataset.objects[1].points[0].position == (17.0, 18.0, 19.0)


def test_parse_source_output_skips_blank_lines() -> None:
    """Blank lines produce no points."""
    request = EphemerisRequest(objects=("venus",))

    dataset = parse_source_output(["", "   ", "2451544.5"], request)

    assert dataset.total_points == 1


def test_parse_source_output_defaults_unparsable_tokens() -> None:
    """Non-numeric tokens should decode as zero."""
    request = EphemerisRequest(objects=("venus",))

    point = parse_source_output(["2451544.5 nope 2.0"], request).objects[0].points[0]

    assert point.position[:2] == (0.0, 2.0)
