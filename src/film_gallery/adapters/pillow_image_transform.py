"""Pillow implementation of the catalog image pipeline."""

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps

from film_gallery.services.storage import ImageTransform


@dataclass
class PillowImageTransform(ImageTransform):
    """Trims transparent margins, pads, shrinks and re-encodes as WebP."""

    max_size: int = 1200
    padding: int = 40
    alpha_threshold: int = 10
    quality: int = 90

    def normalize(self, raw: bytes) -> bytes:
        """Return the processed WebP bytes for an uploaded image."""
        with Image.open(BytesIO(raw)) as source:
            image = ImageOps.exif_transpose(source).convert("RGBA")

        mask = image.getchannel("A").point(
            lambda alpha: 255 if alpha > self.alpha_threshold else 0
        )
        bbox = mask.getbbox()
        if bbox:
            image = image.crop(bbox)

        image = ImageOps.expand(image, border=self.padding, fill=(0, 0, 0, 0))
        # thumbnail never enlarges
        image.thumbnail((self.max_size, self.max_size), Image.Resampling.LANCZOS)

        buffer = BytesIO()
        image.save(buffer, format="WEBP", quality=self.quality)
        return buffer.getvalue()
