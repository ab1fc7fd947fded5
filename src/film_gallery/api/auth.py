"""Request authentication dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, Request

from film_gallery.domain.errors import Unauthorized
from film_gallery.domain.models import Actor  # noqa: TC001

if TYPE_CHECKING:
    from film_gallery.containers import AppContainer


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_actor(
    request: Request, authorization: str | None = Header(default=None)
) -> Actor:
    """Resolve the signed-in user or reject the request."""
    container: AppContainer = request.app.state.container
    actor = container.user_service.authenticate(_bearer_token(authorization))
    if actor is None:
        raise Unauthorized("Unauthorized")
    return actor


async def require_admin(actor: Actor = Depends(require_actor)) -> Actor:
    """Ensure the signed-in user is an administrator."""
    if not actor.is_admin:
        raise Unauthorized("Admin access required")
    return actor
