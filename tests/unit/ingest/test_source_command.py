"""Unit tests for ephemeris source invocation and the fetch pipeline."""

from __future__ import annotations

import subprocess
from typing import Any

import pytest

from core.config import EphemConfig
from core.errors import EphemSourceError
from core.types import EphemerisRequest
from ingest import pipeline, source_command
from ingest.pipeline import fetch_dataset
from ingest.source_command import build_source_arguments, run_source
from tests.fixture_paths import fixture_path

_CONFIG = EphemConfig(source_command=("ephem.bin",), source_timeout_seconds=5.0)


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> Any:
    def _fake_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr=stderr)

    return _fake_run


def test_build_source_arguments_renders_range() -> None:
    """Range requests should render min, max, and step with 15 decimals."""
    arguments = build_source_arguments(EphemerisRequest(jd_min=1.0, jd_max=2.0, jd_step=0.5))

    assert arguments[:6] == [
        "--jd_min",
        "1.000000000000000",
        "--jd_max",
        "2.000000000000000",
        "--jd_step",
        "0.500000000000000",
    ]


def test_build_source_arguments_prefers_jd_list() -> None:
    """Explicit date lists replace the range arguments."""
    arguments = build_source_arguments(EphemerisRequest(jd_list=(1.0, 2.5)))

    assert arguments[:2] == ["--jd_list", "1.000000000000000,2.500000000000000"]
    assert "--jd_min" not in arguments


def test_build_source_arguments_adds_topocentric_observer() -> None:
    """Topocentric requests should pass observer coordinates."""
    request = EphemerisRequest(enable_topocentric=True, latitude=52.2, longitude=0.1)

    arguments = build_source_arguments(request)

    assert arguments[arguments.index("--latitude") + 1] == "52.200000"
    assert arguments[arguments.index("--enable_topocentric_correction") + 1] == "1"


def test_build_source_arguments_joins_objects_and_flags() -> None:
    """Objects should be comma-joined and flags rendered as 0 or 1."""
    request = EphemerisRequest(objects=("jupiter", "mars"), output_constellations=True)

    arguments = build_source_arguments(request)

    assert arguments[arguments.index("--objects") + 1] == "jupiter,mars"
    assert arguments[-2:] == ["--output_constellations", "1"]


def test_run_source_returns_output_lines(monkeypatch: pytest.MonkeyPatch) -> None:
    """Standard output should be returned line by line."""
    monkeypatch.setattr(source_command.subprocess, "run", _completed(0, stdout="a\nb\n"))

    assert run_source(EphemerisRequest(), _CONFIG) == ["a", "b"]


def test_run_source_raises_on_non_zero_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    """A failing source should surface its stderr tail."""
    monkeypatch.setattr(source_command.subprocess, "run", _completed(2, stderr="kernel missing"))

    with pytest.raises(EphemSourceError, match="kernel missing"):
        run_source(EphemerisRequest(), _CONFIG)


def test_run_source_raises_on_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """A source that exceeds the timeout should fail."""

    def _timeout(command: list[str], **kwargs: Any) -> None:
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr(source_command.subprocess, "run", _timeout)

    with pytest.raises(EphemSourceError, match="timed out"):
        run_source(EphemerisRequest(), _CONFIG)


def test_run_source_raises_when_command_is_missing() -> None:
    """A command that cannot be started should fail."""
    config = EphemConfig(source_command=("/nonexistent/ephem.bin",), source_timeout_seconds=5.0)

    with pytest.raises(EphemSourceError, match="Failed to start"):
        run_source(EphemerisRequest(), config)


def test_fetch_dataset_parses_source_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """The pipeline should turn source lines into a dataset."""
    lines = fixture_path("source_output.txt").read_text(encoding="utf-8").splitlines()
    monkeypatch.setattr(pipeline, "run_source", lambda request, config: lines)
    request = EphemerisRequest(objects=("jupiter", "mars"), output_constellations=True)

    dataset = fetch_dataset(request, _CONFIG)

    assert dataset.object_names == ("jupiter", "mars") and dataset.total_points == 4
