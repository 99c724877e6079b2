from dataclasses import FrozenInstanceError, is_dataclass
from pathlib import Path

import pytest

from artifetch.kernel.artifacts import ArtifactHandle, ArtifactSpec, OutputLocation
from artifetch.kernel.errors import InvalidPinError

COMMIT = "3203c51cf4473d30991b522062ac0df2e045c2f2"


def test_artifact_spec_is_dataclass():
    assert is_dataclass(ArtifactSpec)


def test_artifact_spec_defaults_series_to_image():
    spec = ArtifactSpec(name="npuzone", repo="softnpu", commit=COMMIT)
    assert spec.series == "image"
    assert spec.ref == f"softnpu@{COMMIT}:npuzone"


def test_artifact_spec_is_immutable():
    spec = ArtifactSpec(name="npuzone", repo="softnpu", commit=COMMIT)
    with pytest.raises(FrozenInstanceError):
        spec.commit = "deadbeef"


def test_artifact_spec_accepts_short_pin():
    assert ArtifactSpec(name="npuzone", repo="softnpu", commit="3203c51c").commit == "3203c51c"


@pytest.mark.parametrize(
    "field, invalid_value, error_msg_regex",
    [
        ("name", "", "name cannot be empty"),
        ("repo", "", "repo cannot be empty"),
        ("commit", "", "commit cannot be empty"),
        ("series", "", "series cannot be empty"),
        ("name", "../npuzone", "plain file name"),
        ("name", "bin/npuzone", "plain file name"),
        ("name", "..", "plain file name"),
        ("commit", "latest", "pinned revision hash"),
        ("commit", "HEAD", "pinned revision hash"),
        ("commit", "main", "pinned revision hash"),
        ("commit", "abc12", "pinned revision hash"),
    ],
)
def test_artifact_spec_invalid_inputs_fail_loudly(field, invalid_value, error_msg_regex):
    kwargs = {"name": "npuzone", "repo": "softnpu", "commit": COMMIT, "series": "image"}
    kwargs[field] = invalid_value
    with pytest.raises(ValueError, match=error_msg_regex):
        ArtifactSpec(**kwargs)


def test_output_location_for_spec(tmp_path):
    spec = ArtifactSpec(name="npuzone", repo="softnpu", commit=COMMIT)
    location = OutputLocation.for_spec(spec, tmp_path / "out" / "npuzone")
    assert location.filename == "npuzone"
    assert location.path == tmp_path / "out" / "npuzone" / "npuzone"


def test_artifact_handle_exposes_path():
    spec = ArtifactSpec(name="npuzone", repo="softnpu", commit=COMMIT)
    location = OutputLocation(directory=Path("out/npuzone"), filename="npuzone")
    handle = ArtifactHandle(spec=spec, location=location, is_available=False)
    assert handle.path == Path("out/npuzone/npuzone")


@pytest.mark.parametrize(
    "field, invalid_value",
    [
        ("repo", "../evil/x"),
        ("repo", "evil/x"),
        ("repo", ".."),
        ("repo", "."),
        ("series", "image/../x"),
        ("series", ".."),
    ],
)
def test_repo_and_series_must_be_single_segments(field, invalid_value):
    kwargs = {"name": "npuzone", "repo": "softnpu", "commit": COMMIT, "series": "image"}
    kwargs[field] = invalid_value
    with pytest.raises(ValueError, match="single path segment"):
        ArtifactSpec(**kwargs)


@pytest.mark.parametrize("commit", ["3203c51c\n", " 3203c51c", "3203c51c ", "latest"])
def test_malformed_pin_raises_invalid_pin_error(commit):
    with pytest.raises(InvalidPinError, match="pinned revision hash"):
        ArtifactSpec(name="npuzone", repo="softnpu", commit=commit)


def test_invalid_pin_error_is_a_value_error():
    assert issubclass(InvalidPinError, ValueError)
