"""Supabase-backed moderation submission store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from film_gallery.domain.moderation import (
    ModerationSubmission,
    NewSubmission,
    SubmissionStatus,
)
from film_gallery.domain.resources import ResourceType
from film_gallery.services.moderation import SubmissionRepository

SUBMISSIONS_TABLE = "moderation_submissions"


@dataclass
class SupabaseSubmissionRepository(SubmissionRepository):
    """Supabase implementation for moderation submissions."""

    client: Client

    def create_submission(self, submission: NewSubmission) -> ModerationSubmission:
        """Insert a pending submission row and return it."""
        response = (
            self.client.table(SUBMISSIONS_TABLE)
            .insert(
                {
                    "resource_type": submission.resource_type.value,
                    "resource_id": submission.resource_id,
                    "submitted_by": submission.submitted_by,
                    "status": SubmissionStatus.PENDING.value,
                    "proposed_image": submission.proposed_image,
                    "proposed_data": submission.proposed_data,
                    "original_image": submission.original_image,
                    "original_data": submission.original_data,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create moderation submission")
        return _parse_submission(response.data[0])

    def get_submission(self, submission_id: str) -> ModerationSubmission | None:
        """Return a submission by id, if present."""
        response = (
            self.client.table(SUBMISSIONS_TABLE)
            .select("*")
            .eq("id", submission_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_submission(response.data[0])

    def list_pending(
        self,
        resource_type: ResourceType | None = None,
        resource_id: str | None = None,
    ) -> list[ModerationSubmission]:
        """Return pending submissions, newest first."""
        query = (
            self.client.table(SUBMISSIONS_TABLE)
            .select("*")
            .eq("status", SubmissionStatus.PENDING.value)
        )
        if resource_type is not None:
            query = query.eq("resource_type", resource_type.value)
        if resource_id is not None:
            query = query.eq("resource_id", resource_id)
        response = query.order("created_at", desc=True).execute()
        return [_parse_submission(row) for row in response.data or []]

    def transition_status(
        self,
        submission_id: str,
        status: SubmissionStatus,
        reviewed_by: str | None,
        reviewed_at: datetime,
    ) -> ModerationSubmission | None:
        """Conditionally move a pending submission to a terminal status."""
        response = (
            self.client.table(SUBMISSIONS_TABLE)
            .update(
                {
                    "status": status.value,
                    "reviewed_by": reviewed_by,
                    "reviewed_at": reviewed_at.isoformat(),
                }
            )
            .eq("id", submission_id)
            .eq("status", SubmissionStatus.PENDING.value)
            .execute()
        )
        if not response.data:
            return None
        return _parse_submission(response.data[0])


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_submission(row: dict[str, object]) -> ModerationSubmission:
    """Parse a submission row into a domain model."""
    return ModerationSubmission(
        id=str(row["id"]),
        resource_type=ResourceType(row["resource_type"]),
        resource_id=str(row["resource_id"]),
        submitted_by=str(row["submitted_by"]),
        status=SubmissionStatus(row["status"]),
        proposed_image=row.get("proposed_image"),
        proposed_data=dict(row.get("proposed_data") or {}),
        original_image=row.get("original_image"),
        original_data=dict(row.get("original_data") or {}),
        created_at=_parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
        reviewed_by=row.get("reviewed_by"),
        reviewed_at=_parse_timestamp(row.get("reviewed_at")),
    )
