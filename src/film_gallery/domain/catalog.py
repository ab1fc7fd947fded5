"""Per-kind field schemas, validators and permission policies."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from film_gallery.domain.errors import ValidationError
from film_gallery.domain.models import Actor
from film_gallery.domain.moderation import FieldInput, FieldState
from film_gallery.domain.resources import Resource, ResourceType

MAX_DESCRIPTION_LENGTH = 2000
MAX_CUSTOM_FIELD_LENGTH = 100
YEAR_MIN = 1800
ISO_MIN = 1
ISO_MAX = 100_000

_DIGITS = re.compile(r"[0-9]+")

Validator = Callable[[str], bool]
PermissionCheck = Callable[[Resource, Actor], bool]


def validate_year(value: str) -> bool:
    """Accept whole years between 1800 and the current year."""
    if not _DIGITS.fullmatch(value):
        return False
    return YEAR_MIN <= int(value) <= datetime.now(tz=UTC).year


def validate_iso(value: str) -> bool:
    """Accept whole ISO speeds between 1 and 100000."""
    if not _DIGITS.fullmatch(value):
        return False
    return ISO_MIN <= int(value) <= ISO_MAX


def max_length(limit: int) -> Validator:
    """Build a validator that caps string length."""

    def _validate(value: str) -> bool:
        return len(value) <= limit

    return _validate


def to_int(value: object | None) -> int | None:
    """Coerce a stored or submitted value to int, or None when impossible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def community_edit(resource: Resource, actor: Actor) -> bool:
    """Any signed-in user may suggest catalog edits."""
    return True


def camera_image_deletable(resource: Resource, actor: Actor) -> bool:
    """Camera images can be removed by the camera's owner or an admin."""
    return actor.is_admin or resource.owner_id == actor.id


def filmstock_image_deletable(resource: Resource, actor: Actor) -> bool:
    """Film stock images can be removed by an admin or their uploader."""
    return actor.is_admin or (
        resource.image_uploaded_by is not None
        and resource.image_uploaded_by == actor.id
    )


@dataclass(frozen=True)
class ResourceSchema:
    """Describes how one resource kind is edited and moderated."""

    resource_type: ResourceType
    display_name: str
    storage_folder: str
    categorization_fields: tuple[str, ...]
    numeric_fields: frozenset[str]
    can_delete_image: PermissionCheck
    can_edit: PermissionCheck = community_edit
    validators: Mapping[str, Validator] = field(default_factory=dict)

    @property
    def editable_fields(self) -> tuple[str, ...]:
        return ("description", *self.categorization_fields)

    def parse_fields(self, raw: Mapping[str, object | None]) -> dict[str, object]:
        """Validate submitted form values and return the ones that were set.

        Empty strings are treated like fields that were never sent.
        """
        unknown = sorted(set(raw) - set(self.editable_fields))
        if unknown:
            raise ValidationError(f"Unknown field: {unknown[0]}", field=unknown[0])
        parsed: dict[str, object] = {}
        for name in self.editable_fields:
            entry = FieldInput.parse(raw.get(name))
            if entry.state is not FieldState.SET or entry.value is None:
                continue
            validator = self.validators.get(name)
            if validator is not None and not validator(entry.value):
                raise ValidationError(f"Invalid {name} value", field=name)
            parsed[name] = self.coerce(name, entry.value)
        return parsed

    def merge_edits(
        self,
        proposed: Mapping[str, object],
        edited: Mapping[str, object | None] | None = None,
    ) -> dict[str, object | None]:
        """Apply reviewer overrides to proposed data.

        Only keys already present in the proposal can be overridden. A blank
        or null override clears the field; numeric fields that fail to parse
        become None.
        """
        final: dict[str, object | None] = dict(proposed)
        for name in proposed:
            if edited is None or name not in edited:
                continue
            raw = edited[name]
            entry = FieldInput.parse(raw)
            if raw is None or entry.state is FieldState.CLEARED:
                final[name] = None
            elif entry.state is FieldState.SET:
                final[name] = entry.value
        return {name: self.coerce(name, value) for name, value in final.items()}

    def coerce(self, name: str, value: object | None) -> object | None:
        if name in self.numeric_fields:
            return to_int(value)
        return value


_TEXT_LIMIT = max_length(MAX_CUSTOM_FIELD_LENGTH)

CAMERA_SCHEMA = ResourceSchema(
    resource_type=ResourceType.CAMERA,
    display_name="Camera",
    storage_folder="cameras",
    categorization_fields=("camera_type", "format", "mount_type", "year"),
    numeric_fields=frozenset({"year"}),
    can_delete_image=camera_image_deletable,
    validators={
        "description": max_length(MAX_DESCRIPTION_LENGTH),
        "camera_type": _TEXT_LIMIT,
        "format": _TEXT_LIMIT,
        "mount_type": _TEXT_LIMIT,
        "year": validate_year,
    },
)

FILMSTOCK_SCHEMA = ResourceSchema(
    resource_type=ResourceType.FILMSTOCK,
    display_name="Film Stock",
    storage_folder="filmstocks",
    categorization_fields=("film_type", "format", "process", "exposures", "iso"),
    numeric_fields=frozenset({"iso"}),
    can_delete_image=filmstock_image_deletable,
    validators={
        "description": max_length(MAX_DESCRIPTION_LENGTH),
        "film_type": _TEXT_LIMIT,
        "format": _TEXT_LIMIT,
        "process": _TEXT_LIMIT,
        "exposures": _TEXT_LIMIT,
        "iso": validate_iso,
    },
)

SCHEMAS: dict[ResourceType, ResourceSchema] = {
    ResourceType.CAMERA: CAMERA_SCHEMA,
    ResourceType.FILMSTOCK: FILMSTOCK_SCHEMA,
}
