"""Domain models for gallery users."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """The authenticated user behind a request."""

    id: str
    is_admin: bool
    username: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.username or self.email or "Unknown"


@dataclass(frozen=True)
class UserProfile:
    """Public profile fields shown next to a submission."""

    id: str
    username: str
    name: str | None
    avatar: str | None
