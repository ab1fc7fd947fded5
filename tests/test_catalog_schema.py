"""Tests for catalog field schemas."""

from datetime import UTC, datetime

import pytest

from film_gallery.domain.catalog import (
    CAMERA_SCHEMA,
    FILMSTOCK_SCHEMA,
    camera_image_deletable,
    filmstock_image_deletable,
    max_length,
    to_int,
    validate_iso,
    validate_year,
)
from film_gallery.domain.errors import ValidationError
from film_gallery.domain.moderation import FieldInput, FieldState
from tests.conftest import ADMIN, MEMBER, OTHER_MEMBER, make_camera, make_filmstock


def test_field_input_distinguishes_absent_cleared_and_set() -> None:
    assert FieldInput.parse(None).state is FieldState.ABSENT
    assert FieldInput.parse("   ").state is FieldState.CLEARED
    entry = FieldInput.parse("  SLR ")
    assert entry.state is FieldState.SET
    assert entry.value == "SLR"


def test_validate_year_bounds() -> None:
    assert validate_year("1800")
    assert validate_year(str(datetime.now(tz=UTC).year))
    assert not validate_year("1799")
    assert not validate_year(str(datetime.now(tz=UTC).year + 1))
    assert not validate_year("19x9")
    assert not validate_year("-1976")


def test_validate_iso_bounds() -> None:
    assert validate_iso("1")
    assert validate_iso("100000")
    assert not validate_iso("0")
    assert not validate_iso("100001")
    assert not validate_iso("400.5")


def test_max_length_validator() -> None:
    check = max_length(3)
    assert check("abc")
    assert not check("abcd")


def test_to_int_is_lenient() -> None:
    assert to_int("1976") == 1976
    assert to_int(400) == 400
    assert to_int("abc") is None
    assert to_int(None) is None
    assert to_int(True) is None


def test_parse_fields_skips_absent_and_blank_values() -> None:
    parsed = CAMERA_SCHEMA.parse_fields(
        {"camera_type": "SLR", "format": "", "mount_type": "  ", "year": "1976"}
    )

    assert parsed == {"camera_type": "SLR", "year": 1976}


def test_parse_fields_rejects_unknown_field() -> None:
    with pytest.raises(ValidationError) as excinfo:
        CAMERA_SCHEMA.parse_fields({"shutter": "1/1000"})

    assert excinfo.value.message == "Unknown field: shutter"
    assert excinfo.value.status_code == 400


def test_parse_fields_rejects_invalid_numeric_value() -> None:
    with pytest.raises(ValidationError) as excinfo:
        FILMSTOCK_SCHEMA.parse_fields({"iso": "0"})

    assert excinfo.value.message == "Invalid iso value"
    assert excinfo.value.field == "iso"


def test_parse_fields_rejects_long_description() -> None:
    with pytest.raises(ValidationError):
        CAMERA_SCHEMA.parse_fields({"description": "x" * 2001})


def test_merge_edits_overrides_only_proposed_keys() -> None:
    final = FILMSTOCK_SCHEMA.merge_edits(
        {"film_type": "B&W", "iso": 400},
        {"film_type": "Black & White", "process": "E-6"},
    )

    assert final == {"film_type": "Black & White", "iso": 400}


def test_merge_edits_clears_blank_overrides_and_coerces_numbers() -> None:
    final = CAMERA_SCHEMA.merge_edits(
        {"camera_type": "SLR", "year": 1976, "format": "35mm"},
        {"camera_type": "", "year": "1977"},
    )

    assert final == {"camera_type": None, "year": 1977, "format": "35mm"}


def test_merge_edits_clears_null_overrides() -> None:
    final = FILMSTOCK_SCHEMA.merge_edits(
        {"film_type": "Slide", "iso": 100}, {"film_type": None}
    )

    assert final == {"film_type": None, "iso": 100}


def test_merge_edits_turns_unparseable_numbers_into_none() -> None:
    final = FILMSTOCK_SCHEMA.merge_edits({"iso": 400}, {"iso": "fast"})

    assert final == {"iso": None}


def test_camera_image_can_be_deleted_by_owner_or_admin() -> None:
    camera = make_camera(owner_id=MEMBER.id)

    assert camera_image_deletable(camera, MEMBER)
    assert camera_image_deletable(camera, ADMIN)
    assert not camera_image_deletable(camera, OTHER_MEMBER)


def test_filmstock_image_can_be_deleted_by_uploader_or_admin() -> None:
    film = make_filmstock(image_uploaded_by=MEMBER.id)

    assert filmstock_image_deletable(film, MEMBER)
    assert filmstock_image_deletable(film, ADMIN)
    assert not filmstock_image_deletable(film, OTHER_MEMBER)
    assert not filmstock_image_deletable(make_filmstock(image_uploaded_by=None), MEMBER)
