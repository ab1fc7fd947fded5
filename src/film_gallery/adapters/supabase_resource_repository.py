"""Supabase-backed camera and film stock repositories."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from supabase import Client

from film_gallery.domain.catalog import ResourceSchema
from film_gallery.domain.resources import ImageStatus, Resource
from film_gallery.services.catalog import ResourceRepository

CAMERAS_TABLE = "cameras"
FILM_STOCKS_TABLE = "film_stocks"


@dataclass
class SupabaseResourceRepository(ResourceRepository):
    """Supabase implementation for one catalog table."""

    client: Client
    table: str
    schema: ResourceSchema
    owner_column: str | None = None

    def get_resource(self, resource_id: str) -> Resource | None:
        """Return a resource by id, if present."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", resource_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._parse_resource(response.data[0])

    def update_resource(self, resource_id: str, payload: dict[str, object]) -> Resource:
        """Update resource columns and return the stored row."""
        response = (
            self.client.table(self.table)
            .update({key: _to_column(value) for key, value in payload.items()})
            .eq("id", resource_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to update {self.table} row {resource_id}")
        return self._parse_resource(response.data[0])

    def _parse_resource(self, row: dict[str, object]) -> Resource:
        uploaded_raw = row.get("image_uploaded_at")
        owner = row.get(self.owner_column) if self.owner_column else None
        return Resource(
            id=str(row["id"]),
            resource_type=self.schema.resource_type,
            name=str(row.get("name", "")),
            brand=row.get("brand"),
            description=row.get("description"),
            image_url=row.get("image_url"),
            image_status=ImageStatus(row.get("image_status") or ImageStatus.NONE),
            image_uploaded_by=row.get("image_uploaded_by"),
            image_uploaded_at=datetime.fromisoformat(uploaded_raw)
            if isinstance(uploaded_raw, str) and uploaded_raw
            else None,
            owner_id=str(owner) if owner else None,
            attributes={
                name: row.get(name) for name in self.schema.categorization_fields
            },
        )


def _to_column(value: object) -> object:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
