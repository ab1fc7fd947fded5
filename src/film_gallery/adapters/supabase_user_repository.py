"""Supabase-backed user repository and token verification."""

import logging
from dataclasses import dataclass

from supabase import Client

from film_gallery.domain.models import Actor, UserProfile
from film_gallery.services.users import TokenVerifier, UserRepository

logger = logging.getLogger(__name__)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user lookups."""

    client: Client

    def get_actor(self, user_id: str) -> Actor | None:
        """Return the user with its admin flag, if present."""
        response = (
            self.client.table("users")
            .select("id, username, email, is_admin")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Actor(
            id=str(row["id"]),
            is_admin=bool(row.get("is_admin")),
            username=row.get("username"),
            email=row.get("email"),
        )

    def list_profiles(self, user_ids: list[str]) -> dict[str, UserProfile]:
        """Return public profiles keyed by user id."""
        response = (
            self.client.table("users")
            .select("id, username, name, avatar")
            .in_("id", user_ids)
            .execute()
        )
        profiles = {}
        for row in response.data or []:
            profile = UserProfile(
                id=str(row["id"]),
                username=row.get("username") or "Unknown",
                name=row.get("name"),
                avatar=row.get("avatar"),
            )
            profiles[profile.id] = profile
        return profiles


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Verifies access tokens with Supabase Auth."""

    client: Client

    def verify(self, token: str) -> str | None:
        """Return the user id for a valid access token."""
        try:
            response = self.client.auth.get_user(token)
        except Exception:
            logger.warning("Rejected access token")
            return None
        if response is None or response.user is None:
            return None
        return str(response.user.id)
