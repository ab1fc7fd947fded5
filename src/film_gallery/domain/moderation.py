"""Domain models and change detection for moderation submissions."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from film_gallery.domain.resources import ResourceType

IMAGE_CHANGE = "image"


class SubmissionStatus(StrEnum):
    """Lifecycle of a submission. Anything but pending is terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewAction(StrEnum):
    """Decisions an admin can take on a pending submission."""

    APPROVE = "approve"
    REJECT = "reject"


class FieldState(StrEnum):
    """How a submitted form field was filled in."""

    ABSENT = "absent"
    CLEARED = "cleared"
    SET = "set"


@dataclass(frozen=True)
class FieldInput:
    """A single raw form value parsed into one of three states."""

    state: FieldState
    value: str | None = None

    @classmethod
    def parse(cls, raw: object | None) -> "FieldInput":
        if raw is None:
            return cls(FieldState.ABSENT)
        trimmed = str(raw).strip()
        if not trimmed:
            return cls(FieldState.CLEARED)
        return cls(FieldState.SET, trimmed)


@dataclass(frozen=True)
class NewSubmission:
    """An unsaved pending submission."""

    resource_type: ResourceType
    resource_id: str
    submitted_by: str
    proposed_image: str | None
    proposed_data: dict[str, object]
    original_image: str | None
    original_data: dict[str, object]


@dataclass(frozen=True)
class ModerationSubmission:
    """A persisted proposal to change a catalog resource."""

    id: str
    resource_type: ResourceType
    resource_id: str
    submitted_by: str
    status: SubmissionStatus
    proposed_image: str | None
    proposed_data: dict[str, object]
    original_image: str | None
    original_data: dict[str, object]
    created_at: datetime
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == SubmissionStatus.PENDING


@dataclass(frozen=True)
class AdminNotification:
    """Payload for the new-submission email sent to admins."""

    resource_type: ResourceType
    resource_id: str
    resource_name: str
    resource_brand: str | None
    submitter_name: str
    submission_id: str


def is_field_changed(original: object | None, proposed: object | None) -> bool:
    """Return true when a proposed value counts as a change."""
    if proposed is None or proposed == "":
        return False
    return proposed != original


def is_image_changed(original_image: str | None, proposed_image: str | None) -> bool:
    """Return true when a proposed image replaces the original one."""
    return bool(proposed_image) and proposed_image != original_image


def changed_fields(
    original_data: Mapping[str, object], proposed_data: Mapping[str, object]
) -> dict[str, object]:
    """Return the proposed fields that differ from the original snapshot."""
    return {
        name: value
        for name, value in proposed_data.items()
        if is_field_changed(original_data.get(name), value)
    }


def describe_changes(
    original_data: Mapping[str, object],
    proposed_data: Mapping[str, object],
    original_image: str | None = None,
    proposed_image: str | None = None,
) -> list[str]:
    """List changed field names, with the image first when it changed."""
    names = list(changed_fields(original_data, proposed_data))
    if is_image_changed(original_image, proposed_image):
        names.insert(0, IMAGE_CHANGE)
    return names


def submission_changes(submission: ModerationSubmission) -> list[str]:
    """List the changes carried by a stored submission."""
    return describe_changes(
        submission.original_data,
        submission.proposed_data,
        submission.original_image,
        submission.proposed_image,
    )
