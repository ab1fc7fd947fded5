"""Supabase Storage bucket used for catalog images."""

from dataclasses import dataclass

from supabase import Client

from film_gallery.services.storage import ObjectStore


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Stores catalog images in a public Supabase Storage bucket."""

    client: Client
    bucket: str

    def put(self, data: bytes, key: str, content_type: str = "image/webp") -> str:
        """Upload bytes under a key, overwriting, and return the public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(
            path=key,
            file=data,
            file_options={"content-type": content_type, "upsert": "true"},
        )
        return bucket.get_public_url(key)

    def delete(self, key: str) -> None:
        """Remove the object stored under a key."""
        self.client.storage.from_(self.bucket).remove([key])
