"""Audit trail for catalog changes."""

from dataclasses import dataclass
from typing import Protocol

from film_gallery.domain.resources import Resource


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def create_event(  # noqa: PLR0913
        self,
        user_id: str,
        resource_type: str,
        resource_id: str,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""


@dataclass
class AuditService:
    """Records before/after snapshots whenever a resource is changed."""

    repository: AuditRepository

    def record_change(
        self, user_id: str, event_type: str, before: Resource, after: Resource
    ) -> None:
        """Persist a change to a camera or film stock."""
        self.repository.create_event(
            user_id=user_id,
            resource_type=before.resource_type.value,
            resource_id=before.id,
            event_type=event_type,
            before=resource_state(before),
            after=resource_state(after),
        )


def resource_state(resource: Resource) -> dict[str, object]:
    """Return the moderated fields of a resource as JSON-ready values."""
    return {
        "description": resource.description,
        "image_url": resource.image_url,
        "image_status": resource.image_status.value,
        **resource.attributes,
    }
