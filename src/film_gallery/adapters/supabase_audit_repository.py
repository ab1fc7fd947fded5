"""Supabase repository for catalog audit events."""

from dataclasses import dataclass

from supabase import Client

from film_gallery.services.audit import AuditRepository

AUDIT_TABLE = "catalog_audit_events"


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository."""

    client: Client

    def create_event(  # noqa: PLR0913
        self,
        user_id: str,
        resource_type: str,
        resource_id: str,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Insert one audit row with JSON snapshots."""
        self.client.table(AUDIT_TABLE).insert(
            {
                "user_id": user_id,
                "resource_type": resource_type,
                "resource_id": resource_id,
                "event_type": event_type,
                "before_json": before,
                "after_json": after,
            }
        ).execute()
