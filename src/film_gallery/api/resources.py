"""Catalog resource endpoints: public reads and community edits."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from film_gallery.api.auth import require_actor
from film_gallery.api.schemas import success_response
from film_gallery.domain.models import Actor  # noqa: TC001
from film_gallery.domain.resources import (
    ResourceType,
    public_view,
    serialize_resource,
)
from film_gallery.services.moderation import ImageUpload

if TYPE_CHECKING:
    from starlette.datastructures import FormData

    from film_gallery.containers import AppContainer

router = APIRouter(prefix="/resources", tags=["resources"])

IMAGE_FIELD = "image"


@router.get("/{resource_type}/{resource_id}")
async def get_resource(
    resource_type: ResourceType, resource_id: str, request: Request
) -> dict[str, object]:
    """Return the public view of a camera or film stock."""
    container: AppContainer = request.app.state.container
    resource = container.moderation_service.get_resource(resource_type, resource_id)
    return public_view(resource)


@router.post("/{resource_type}/{resource_id}/image")
async def submit_edit(
    resource_type: ResourceType,
    resource_id: str,
    request: Request,
    actor: Actor = Depends(require_actor),
) -> dict[str, object]:
    """Submit an image and/or field edit for a camera or film stock."""
    container: AppContainer = request.app.state.container
    form = await request.form()
    try:
        image = await _read_image(form)
        fields = {
            key: value
            for key, value in form.multi_items()
            if key != IMAGE_FIELD and isinstance(value, str)
        }
    finally:
        await form.close()

    result = await container.moderation_service.submit(
        resource_type,
        resource_id,
        actor,
        proposed_fields=fields,
        image=image,
    )
    if result.resource is not None:
        return success_response(result.message, serialize_resource(result.resource))
    submission_id = result.submission.id if result.submission else None
    return success_response(result.message, {"submission_id": submission_id})


@router.delete("/{resource_type}/{resource_id}/image")
async def delete_image(
    resource_type: ResourceType,
    resource_id: str,
    request: Request,
    actor: Actor = Depends(require_actor),
) -> dict[str, object]:
    """Remove the image from a camera or film stock."""
    container: AppContainer = request.app.state.container
    resource = container.moderation_service.delete_image(
        resource_type, resource_id, actor
    )
    return success_response("Image deleted successfully", serialize_resource(resource))


async def _read_image(form: FormData) -> ImageUpload | None:
    """Return the uploaded image part, ignoring empty file inputs."""
    part = form.get(IMAGE_FIELD)
    if not isinstance(part, UploadFile):
        return None
    content = await part.read()
    if not content and not part.filename:
        return None
    return ImageUpload(
        content=content,
        content_type=part.content_type or "",
        filename=part.filename,
    )
