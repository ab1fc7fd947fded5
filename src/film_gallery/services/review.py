"""Pending-submission queue for the admin review page."""

from collections.abc import Mapping
from dataclasses import dataclass

from film_gallery.domain.models import UserProfile
from film_gallery.domain.moderation import ModerationSubmission, submission_changes
from film_gallery.domain.resources import Resource, ResourceType
from film_gallery.services.catalog import ResourceKind
from film_gallery.services.moderation import SubmissionRepository
from film_gallery.services.users import UserService

_QUEUE_KEYS = {
    ResourceType.CAMERA: "cameras",
    ResourceType.FILMSTOCK: "film_stocks",
}


@dataclass
class ReviewService:
    """Builds the grouped list of submissions waiting for review."""

    kinds: Mapping[ResourceType, ResourceKind]
    submission_repository: SubmissionRepository
    user_service: UserService

    def list_pending(self) -> dict[str, object]:
        """Return pending submissions grouped by resource type."""
        pending = sorted(
            self.submission_repository.list_pending(),
            key=lambda submission: submission.created_at,
            reverse=True,
        )
        profiles = self.user_service.profiles(
            [submission.submitted_by for submission in pending]
        )
        queue: dict[str, list[dict[str, object]]] = {
            key: [] for key in _QUEUE_KEYS.values()
        }
        for submission in pending:
            kind = self.kinds.get(submission.resource_type)
            if kind is None:
                continue
            resource = kind.repository.get_resource(submission.resource_id)
            queue[_QUEUE_KEYS[submission.resource_type]].append(
                _serialize_pending(
                    submission, resource, profiles.get(submission.submitted_by)
                )
            )
        return {**queue, "total": len(pending)}


def _serialize_pending(
    submission: ModerationSubmission,
    resource: Resource | None,
    profile: UserProfile | None,
) -> dict[str, object]:
    changes = submission_changes(submission)
    return {
        "submission_id": submission.id,
        "resource_id": submission.resource_id,
        "resource_type": submission.resource_type.value,
        "name": resource.name if resource else "Unknown",
        "brand": resource.brand if resource else None,
        "proposed_image": submission.proposed_image,
        "original_image": submission.original_image,
        "description": submission.proposed_data.get("description"),
        "proposed_data": submission.proposed_data,
        "original_data": submission.original_data,
        "submitted_at": submission.created_at.isoformat(),
        "changed_fields": changes,
        "changes_count": len(changes),
        "submitter": _serialize_profile(submission.submitted_by, profile),
    }


def _serialize_profile(user_id: str, profile: UserProfile | None) -> dict[str, object]:
    if profile is None:
        return {"id": user_id, "username": "Unknown", "name": None, "avatar": None}
    return {
        "id": profile.id,
        "username": profile.username,
        "name": profile.name,
        "avatar": profile.avatar,
    }
