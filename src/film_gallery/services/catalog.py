"""Resource repository interface and per-kind wiring."""

from dataclasses import dataclass
from typing import Protocol

from film_gallery.domain.catalog import ResourceSchema
from film_gallery.domain.resources import Resource


class ResourceRepository(Protocol):
    """Persistence interface for one kind of catalog resource."""

    def get_resource(self, resource_id: str) -> Resource | None:
        """Return a resource by id, if present."""

    def update_resource(self, resource_id: str, payload: dict[str, object]) -> Resource:
        """Update resource columns and return the stored row."""


@dataclass(frozen=True)
class ResourceKind:
    """Schema and repository for one moderatable resource kind."""

    schema: ResourceSchema
    repository: ResourceRepository
