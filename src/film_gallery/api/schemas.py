"""Request models for the HTTP API."""

from pydantic import BaseModel

from film_gallery.domain.moderation import ReviewAction


class ReviewRequest(BaseModel):
    """Admin decision on a pending submission."""

    action: ReviewAction
    edited_data: dict[str, str | int | None] | None = None


def success_response(
    message: str, data: dict[str, object] | None = None
) -> dict[str, object]:
    """Build the envelope returned by mutating endpoints."""
    return {"success": True, "message": message, "data": data}


def error_response(message: str) -> dict[str, object]:
    """Build the envelope returned for failed requests."""
    return {"success": False, "error": message}
