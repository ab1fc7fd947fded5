"""Object storage and image transform interfaces plus key helpers."""

from datetime import UTC, datetime
from typing import Protocol
from urllib.parse import unquote, urlparse

from film_gallery.domain.resources import ResourceType

STAGING_FOLDER = "moderation"
_PUBLIC_OBJECT_MARKER = "/storage/v1/object/public/"


class ObjectStore(Protocol):
    """Interface for the bucket holding catalog images."""

    def put(self, data: bytes, key: str, content_type: str = "image/webp") -> str:
        """Store bytes under a key and return the public URL."""

    def delete(self, key: str) -> None:
        """Delete the object stored under a key."""


class ImageTransform(Protocol):
    """Interface for normalizing uploaded catalog images."""

    def normalize(self, raw: bytes) -> bytes:
        """Return the processed image bytes."""


def _timestamp_ms(now: datetime | None) -> int:
    moment = now or datetime.now(tz=UTC)
    return int(moment.timestamp() * 1000)


def canonical_image_key(
    folder: str, resource_id: str, now: datetime | None = None
) -> str:
    """Return the key for an image linked directly to a resource."""
    return f"{folder}/{resource_id}-{_timestamp_ms(now)}.webp"


def staging_image_key(
    resource_type: ResourceType, resource_id: str, now: datetime | None = None
) -> str:
    """Return the key for an image waiting on review."""
    return (
        f"{STAGING_FOLDER}/{resource_type.value}/"
        f"{resource_id}-{_timestamp_ms(now)}.webp"
    )


def extract_key_from_url(url: str | None, bucket: str | None = None) -> str | None:
    """Recover the object key from a public URL.

    Supabase public URLs carry the bucket after ``/storage/v1/object/public/``;
    any other URL falls back to its path.
    """
    if not url:
        return None
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return None
    path = unquote(parsed.path)
    if _PUBLIC_OBJECT_MARKER in path:
        remainder = path.split(_PUBLIC_OBJECT_MARKER, maxsplit=1)[1]
        object_bucket, _, key = remainder.partition("/")
        if bucket is not None and object_bucket != bucket:
            return None
        return key or None
    return path.lstrip("/") or None
