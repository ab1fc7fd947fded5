"""Domain models for moderatable catalog resources."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class ResourceType(StrEnum):
    """Kinds of catalog entries that go through moderation."""

    CAMERA = "camera"
    FILMSTOCK = "filmstock"


class ImageStatus(StrEnum):
    """Moderation state of a resource's image and description."""

    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Resource:
    """A camera or film stock row in the shared catalog."""

    id: str
    resource_type: ResourceType
    name: str
    brand: str | None
    description: str | None
    image_url: str | None
    image_status: ImageStatus
    image_uploaded_by: str | None
    image_uploaded_at: datetime | None
    owner_id: str | None = None
    attributes: dict[str, object] = field(default_factory=dict)

    def value_of(self, field_name: str) -> object | None:
        """Return the current value of an editable field."""
        if field_name == "description":
            return self.description
        return self.attributes.get(field_name)

    def snapshot(self, field_names: tuple[str, ...]) -> dict[str, object]:
        """Return the current values of the given editable fields."""
        return {name: self.value_of(name) for name in field_names}


def public_view(resource: Resource) -> dict[str, object]:
    """Serialize a resource for anonymous readers.

    Image and description are only shown once approved.
    """
    approved = resource.image_status == ImageStatus.APPROVED
    return {
        "id": resource.id,
        "type": resource.resource_type.value,
        "name": resource.name,
        "brand": resource.brand,
        "description": resource.description if approved else None,
        "image_url": resource.image_url if approved else None,
        **resource.attributes,
    }


def serialize_resource(resource: Resource) -> dict[str, object]:
    """Serialize the full resource state for privileged callers."""
    return {
        "id": resource.id,
        "type": resource.resource_type.value,
        "name": resource.name,
        "brand": resource.brand,
        "description": resource.description,
        "image_url": resource.image_url,
        "image_status": resource.image_status.value,
        "image_uploaded_by": resource.image_uploaded_by,
        "image_uploaded_at": resource.image_uploaded_at.isoformat()
        if resource.image_uploaded_at
        else None,
        "owner_id": resource.owner_id,
        **resource.attributes,
    }
