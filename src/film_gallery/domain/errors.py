"""Error taxonomy shared by services and the HTTP layer."""


class GalleryError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(GalleryError):
    """Missing or invalid session, or a non-admin calling an admin action."""

    status_code = 401


class Forbidden(GalleryError):
    """Authenticated actor lacks permission for a gated action."""

    status_code = 403


class NotFoundError(GalleryError):
    """A resource or submission id did not resolve."""

    status_code = 404


class ValidationError(GalleryError):
    """Bad input, failed field validator, no-op or already-processed request."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InternalError(GalleryError):
    """Storage, transform or other plumbing failure."""

    status_code = 500
