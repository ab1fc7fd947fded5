"""User lookup and request authentication."""

from dataclasses import dataclass
from typing import Protocol

from film_gallery.domain.models import Actor, UserProfile


class TokenVerifier(Protocol):
    """Verifies access tokens issued by the identity provider."""

    def verify(self, token: str) -> str | None:
        """Return the user id for a valid token, otherwise None."""


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_actor(self, user_id: str) -> Actor | None:
        """Return the user with its role flags, if present."""

    def list_profiles(self, user_ids: list[str]) -> dict[str, UserProfile]:
        """Return public profiles keyed by user id."""


@dataclass
class UserService:
    """Application service for resolving request actors."""

    repository: UserRepository
    token_verifier: TokenVerifier

    def authenticate(self, token: str | None) -> Actor | None:
        """Return the actor behind a bearer token, if it is valid."""
        if not token:
            return None
        user_id = self.token_verifier.verify(token)
        if user_id is None:
            return None
        return self.repository.get_actor(user_id)

    def profiles(self, user_ids: list[str]) -> dict[str, UserProfile]:
        """Return public profiles for the given ids."""
        unique_ids = sorted(set(user_ids))
        if not unique_ids:
            return {}
        return self.repository.list_profiles(unique_ids)
