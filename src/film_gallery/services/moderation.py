"""Community moderation of catalog cameras and film stocks.

Any signed-in user can propose a new image, description or categorization
values for a resource. Admin edits are applied immediately; everyone else's
are stored as pending submissions that an admin later approves or rejects.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from film_gallery.domain.errors import (
    Forbidden,
    InternalError,
    NotFoundError,
    Unauthorized,
    ValidationError,
)
from film_gallery.domain.models import Actor
from film_gallery.domain.moderation import (
    AdminNotification,
    ModerationSubmission,
    NewSubmission,
    ReviewAction,
    SubmissionStatus,
    changed_fields,
)
from film_gallery.domain.resources import ImageStatus, Resource, ResourceType
from film_gallery.services.audit import AuditService
from film_gallery.services.catalog import ResourceKind
from film_gallery.services.storage import (
    ImageTransform,
    ObjectStore,
    canonical_image_key,
    extract_key_from_url,
    staging_image_key,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_IMAGE_SIZE_MB = 10
ADMIN_SAVED_MESSAGE = "Changes saved and approved."
QUEUED_MESSAGE = "Changes submitted successfully. Waiting for admin review."
NO_CHANGES_MESSAGE = "No changes detected. Please modify at least one field."
ALREADY_PROCESSED_MESSAGE = "Submission already processed"


class SubmissionRepository(Protocol):
    """Persistence interface for moderation submissions."""

    def create_submission(self, submission: NewSubmission) -> ModerationSubmission:
        """Persist a pending submission and return it."""

    def get_submission(self, submission_id: str) -> ModerationSubmission | None:
        """Return a submission by id, if present."""

    def list_pending(
        self,
        resource_type: ResourceType | None = None,
        resource_id: str | None = None,
    ) -> list[ModerationSubmission]:
        """Return pending submissions, newest first."""

    def transition_status(
        self,
        submission_id: str,
        status: SubmissionStatus,
        reviewed_by: str | None,
        reviewed_at: datetime,
    ) -> ModerationSubmission | None:
        """Move a pending submission to a terminal status.

        Returns None when the submission was no longer pending.
        """


class AdminNotifier(Protocol):
    """Sends new-submission alerts to administrators."""

    async def notify(self, notification: AdminNotification) -> None:
        """Deliver a notification."""


@dataclass(frozen=True)
class ImageUpload:
    """Raw image file attached to an edit."""

    content: bytes
    content_type: str
    filename: str | None = None


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a submitted edit."""

    applied: bool
    message: str
    resource: Resource | None = None
    submission: ModerationSubmission | None = None


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of an admin review."""

    message: str
    submission: ModerationSubmission
    resource: Resource | None = None


@dataclass
class ModerationService:
    """Validates, diffs and applies or queues community edits."""

    kinds: Mapping[ResourceType, ResourceKind]
    submission_repository: SubmissionRepository
    object_store: ObjectStore
    image_transform: ImageTransform
    notifier: AdminNotifier
    audit_service: AuditService | None = None
    max_image_size_mb: int = DEFAULT_MAX_IMAGE_SIZE_MB
    _notification_tasks: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    async def submit(  # noqa: PLR0913
        self,
        resource_type: ResourceType,
        resource_id: str,
        actor: Actor,
        proposed_fields: Mapping[str, object | None],
        image: ImageUpload | None = None,
    ) -> SubmitResult:
        """Apply an admin's edit directly or queue anyone else's for review."""
        kind = self._kind(resource_type)
        schema = kind.schema
        resource = self._load_resource(kind, resource_id)
        if not schema.can_edit(resource, actor):
            raise Forbidden(
                f"You don't have permission to edit this "
                f"{schema.display_name.lower()}"
            )

        proposed = schema.parse_fields(proposed_fields)
        if image is not None:
            self._validate_image(image)

        original_data = resource.snapshot(schema.editable_fields)
        changes = changed_fields(original_data, proposed)
        if image is None and not changes:
            raise ValidationError(NO_CHANGES_MESSAGE)

        image_url = None
        if image is not None:
            image_url = await self._store_image(
                kind, resource.id, image, staged=not actor.is_admin
            )

        if actor.is_admin:
            updated = self._apply_changes(
                kind,
                resource,
                changes,
                image_url=image_url,
                image_uploaded_by=actor.id,
                audit_user_id=actor.id,
                event_type="admin_edit",
            )
            return SubmitResult(
                applied=True, message=ADMIN_SAVED_MESSAGE, resource=updated
            )

        try:
            submission = self.submission_repository.create_submission(
                NewSubmission(
                    resource_type=schema.resource_type,
                    resource_id=resource.id,
                    submitted_by=actor.id,
                    proposed_image=image_url,
                    proposed_data=changes,
                    original_image=resource.image_url,
                    original_data=original_data,
                )
            )
        except Exception as exc:
            logger.exception(
                "Failed to store moderation submission",
                extra={"resource_id": resource.id},
            )
            self._delete_object_quietly(image_url)
            raise InternalError("Failed to save changes. Please try again.") from exc

        self._supersede_pending(submission)
        self._dispatch_notification(
            AdminNotification(
                resource_type=schema.resource_type,
                resource_id=resource.id,
                resource_name=resource.name,
                resource_brand=resource.brand,
                submitter_name=actor.display_name,
                submission_id=submission.id,
            )
        )
        return SubmitResult(
            applied=False, message=QUEUED_MESSAGE, submission=submission
        )

    async def review(  # noqa: PLR0913
        self,
        submission_id: str,
        reviewer: Actor,
        action: ReviewAction,
        edited_fields: Mapping[str, object | None] | None = None,
        resource_type: ResourceType | None = None,
    ) -> ReviewResult:
        """Approve or reject a pending submission exactly once."""
        if not reviewer.is_admin:
            raise Unauthorized("Admin access required")
        submission = self.submission_repository.get_submission(submission_id)
        if submission is None or (
            resource_type is not None and submission.resource_type != resource_type
        ):
            raise NotFoundError("Submission not found")
        if not submission.is_pending:
            raise ValidationError(ALREADY_PROCESSED_MESSAGE)

        kind = self._kind(submission.resource_type)
        if action == ReviewAction.APPROVE:
            return self._approve(kind, submission, reviewer, edited_fields)
        return self._reject(kind, submission, reviewer)

    def get_resource(self, resource_type: ResourceType, resource_id: str) -> Resource:
        """Return a resource or raise NotFoundError."""
        return self._load_resource(self._kind(resource_type), resource_id)

    def delete_image(
        self, resource_type: ResourceType, resource_id: str, actor: Actor
    ) -> Resource:
        """Remove a resource's image if the actor may do so."""
        kind = self._kind(resource_type)
        resource = self._load_resource(kind, resource_id)
        if not kind.schema.can_delete_image(resource, actor):
            raise Forbidden("You don't have permission to delete this image")

        self._delete_object_quietly(resource.image_url)
        updated = kind.repository.update_resource(
            resource.id,
            {
                "image_url": None,
                "image_status": ImageStatus.NONE,
                "image_uploaded_by": None,
                "image_uploaded_at": None,
            },
        )
        self._record_audit(actor.id, resource, updated, "image_deleted")
        logger.info(
            "Deleted catalog image",
            extra={"resource_type": resource_type.value, "resource_id": resource.id},
        )
        return updated

    async def wait_for_notifications(self) -> None:
        """Wait for in-flight admin notifications to finish."""
        if self._notification_tasks:
            await asyncio.gather(*self._notification_tasks, return_exceptions=True)

    def _approve(
        self,
        kind: ResourceKind,
        submission: ModerationSubmission,
        reviewer: Actor,
        edited_fields: Mapping[str, object | None] | None,
    ) -> ReviewResult:
        resource = self._load_resource(kind, submission.resource_id)
        final_data = kind.schema.merge_edits(submission.proposed_data, edited_fields)
        claimed = self._claim(submission, SubmissionStatus.APPROVED, reviewer.id)
        try:
            updated = self._apply_changes(
                kind,
                resource,
                final_data,
                image_url=submission.proposed_image,
                image_uploaded_by=submission.submitted_by,
                audit_user_id=reviewer.id,
                event_type="submission_approved",
            )
        except Exception as exc:
            # The submission is already approved; the resource needs a manual fix.
            logger.exception(
                "Approved submission could not be applied",
                extra={
                    "submission_id": submission.id,
                    "resource_id": submission.resource_id,
                },
            )
            raise InternalError("Failed to apply approved changes") from exc
        return ReviewResult(
            message=f"{kind.schema.display_name} edit approved and changes applied.",
            submission=claimed,
            resource=updated,
        )

    def _reject(
        self, kind: ResourceKind, submission: ModerationSubmission, reviewer: Actor
    ) -> ReviewResult:
        claimed = self._claim(submission, SubmissionStatus.REJECTED, reviewer.id)
        self._delete_object_quietly(submission.proposed_image)
        return ReviewResult(
            message=(
                f"{kind.schema.display_name} edit rejected. Original data preserved."
            ),
            submission=claimed,
        )

    def _claim(
        self,
        submission: ModerationSubmission,
        status: SubmissionStatus,
        reviewer_id: str | None,
    ) -> ModerationSubmission:
        claimed = self.submission_repository.transition_status(
            submission.id,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=datetime.now(tz=UTC),
        )
        if claimed is None:
            raise ValidationError(ALREADY_PROCESSED_MESSAGE)
        return claimed

    def _apply_changes(  # noqa: PLR0913
        self,
        kind: ResourceKind,
        resource: Resource,
        changes: Mapping[str, object | None],
        *,
        image_url: str | None,
        image_uploaded_by: str,
        audit_user_id: str,
        event_type: str,
    ) -> Resource:
        payload: dict[str, object] = dict(changes)
        if image_url:
            if resource.image_url != image_url:
                self._delete_object_quietly(resource.image_url)
            payload["image_url"] = image_url
            payload["image_uploaded_by"] = image_uploaded_by
            payload["image_uploaded_at"] = datetime.now(tz=UTC)
        payload["image_status"] = ImageStatus.APPROVED
        updated = kind.repository.update_resource(resource.id, payload)
        self._record_audit(audit_user_id, resource, updated, event_type)
        return updated

    def _supersede_pending(self, latest: ModerationSubmission) -> None:
        """Retire older pending submissions so only the newest stays actionable."""
        pending = self.submission_repository.list_pending(
            latest.resource_type, latest.resource_id
        )
        for older in pending:
            if older.id == latest.id or older.created_at >= latest.created_at:
                continue
            retired = self.submission_repository.transition_status(
                older.id,
                status=SubmissionStatus.REJECTED,
                reviewed_by=None,
                reviewed_at=datetime.now(tz=UTC),
            )
            if retired is None:
                continue
            if older.proposed_image != latest.proposed_image:
                self._delete_object_quietly(older.proposed_image)
            logger.info(
                "Superseded pending submission",
                extra={"submission_id": older.id, "superseded_by": latest.id},
            )

    async def _store_image(
        self,
        kind: ResourceKind,
        resource_id: str,
        image: ImageUpload,
        *,
        staged: bool,
    ) -> str:
        if staged:
            key = staging_image_key(kind.schema.resource_type, resource_id)
        else:
            key = canonical_image_key(kind.schema.storage_folder, resource_id)
        try:
            processed = await asyncio.to_thread(
                self.image_transform.normalize, image.content
            )
            return self.object_store.put(processed, key)
        except Exception as exc:
            logger.exception(
                "Image processing failed",
                extra={"resource_id": resource_id, "key": key},
            )
            raise InternalError("Failed to process image") from exc

    def _validate_image(self, image: ImageUpload) -> None:
        if not image.content_type.startswith("image/"):
            raise ValidationError("File must be an image", field="image")
        if len(image.content) > self.max_image_size_mb * 1024 * 1024:
            raise ValidationError(
                f"Image must be smaller than {self.max_image_size_mb}MB",
                field="image",
            )

    def _delete_object_quietly(self, url: str | None) -> None:
        """Delete a stored object; failures only leave an orphan behind."""
        key = extract_key_from_url(url)
        if key is None:
            return
        try:
            self.object_store.delete(key)
        except Exception:
            logger.exception("Failed to delete stored image", extra={"key": key})

    def _dispatch_notification(self, notification: AdminNotification) -> None:
        task = asyncio.get_running_loop().create_task(
            self._notify_quietly(notification)
        )
        self._notification_tasks.add(task)
        task.add_done_callback(self._notification_tasks.discard)

    async def _notify_quietly(self, notification: AdminNotification) -> None:
        try:
            await self.notifier.notify(notification)
        except Exception:
            logger.exception(
                "Failed to send admin notification",
                extra={"submission_id": notification.submission_id},
            )

    def _record_audit(
        self, user_id: str, before: Resource, after: Resource, event_type: str
    ) -> None:
        if self.audit_service is None:
            return
        try:
            self.audit_service.record_change(user_id, event_type, before, after)
        except Exception:
            logger.exception(
                "Failed to record audit event", extra={"resource_id": before.id}
            )

    def _kind(self, resource_type: ResourceType) -> ResourceKind:
        kind = self.kinds.get(resource_type)
        if kind is None:
            raise NotFoundError(f"Unknown resource type: {resource_type}")
        return kind

    @staticmethod
    def _load_resource(kind: ResourceKind, resource_id: str) -> Resource:
        resource = kind.repository.get_resource(resource_id)
        if resource is None:
            raise NotFoundError(f"{kind.schema.display_name} not found")
        return resource
