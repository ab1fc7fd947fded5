"""Admin notification senders."""

import logging
from dataclasses import dataclass
from html import escape

import httpx

from film_gallery.domain.moderation import AdminNotification
from film_gallery.domain.resources import ResourceType
from film_gallery.services.moderation import AdminNotifier

logger = logging.getLogger(__name__)

MAILTRAP_SEND_URL = "https://send.api.mailtrap.io/api/send"
_KIND_LABELS = {
    ResourceType.CAMERA: "camera",
    ResourceType.FILMSTOCK: "film stock",
}


@dataclass
class HttpxMailtrapNotifier(AdminNotifier):
    """Emails administrators through the Mailtrap send API."""

    api_key: str
    sender: str
    recipients: list[str]
    site_url: str
    http_client: httpx.AsyncClient
    api_url: str = MAILTRAP_SEND_URL
    sender_name: str = "Film Gallery"

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        sender: str,
        recipients: list[str],
        site_url: str,
        api_url: str = MAILTRAP_SEND_URL,
    ) -> "HttpxMailtrapNotifier":
        """Create a notifier with a managed httpx session."""
        return cls(
            api_key=api_key,
            sender=sender,
            recipients=recipients,
            site_url=site_url,
            http_client=httpx.AsyncClient(),
            api_url=api_url,
        )

    async def notify(self, notification: AdminNotification) -> None:
        """Send the new-submission email to every configured admin."""
        if not self.recipients:
            logger.warning(
                "No admin recipients configured",
                extra={"submission_id": notification.submission_id},
            )
            return
        payload = {
            "from": {"email": self.sender, "name": self.sender_name},
            "to": [{"email": email} for email in self.recipients],
            "subject": _subject(notification),
            "html": _render_html(notification, self.site_url),
        }
        response = await self.http_client.post(
            self.api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=10,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()


@dataclass
class LoggingNotifier(AdminNotifier):
    """Logs notifications when no email provider is configured."""

    async def notify(self, notification: AdminNotification) -> None:
        logger.info(
            "New moderation submission",
            extra={
                "submission_id": notification.submission_id,
                "resource_type": notification.resource_type.value,
                "resource_id": notification.resource_id,
            },
        )


def _display_name(notification: AdminNotification) -> str:
    if notification.resource_brand:
        return f"{notification.resource_brand} {notification.resource_name}"
    return notification.resource_name


def _subject(notification: AdminNotification) -> str:
    label = _KIND_LABELS[notification.resource_type]
    return f"New {label} edit pending review: {_display_name(notification)}"


def _render_html(notification: AdminNotification, site_url: str) -> str:
    review_url = f"{site_url.rstrip('/')}/admin/moderation"
    label = _KIND_LABELS[notification.resource_type]
    return (
        "<p>"
        f"{escape(notification.submitter_name)} suggested changes to the "
        f"{label} <strong>{escape(_display_name(notification))}</strong>."
        "</p>"
        f'<p><a href="{escape(review_url)}">Review pending submissions</a></p>'
        f"<p>Submission id: {escape(notification.submission_id)}</p>"
    )
