"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from film_gallery.adapters.email_notifier import HttpxMailtrapNotifier, LoggingNotifier
from film_gallery.adapters.pillow_image_transform import PillowImageTransform
from film_gallery.adapters.supabase_audit_repository import SupabaseAuditRepository
from film_gallery.adapters.supabase_object_store import SupabaseObjectStore
from film_gallery.adapters.supabase_resource_repository import (
    CAMERAS_TABLE,
    FILM_STOCKS_TABLE,
    SupabaseResourceRepository,
)
from film_gallery.adapters.supabase_submission_repository import (
    SupabaseSubmissionRepository,
)
from film_gallery.adapters.supabase_user_repository import (
    SupabaseTokenVerifier,
    SupabaseUserRepository,
)
from film_gallery.config import Settings, parse_email_list
from film_gallery.domain.catalog import CAMERA_SCHEMA, FILMSTOCK_SCHEMA
from film_gallery.domain.resources import ResourceType
from film_gallery.services.audit import AuditService
from film_gallery.services.catalog import ResourceKind
from film_gallery.services.moderation import AdminNotifier, ModerationService
from film_gallery.services.review import ReviewService
from film_gallery.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    moderation_service: ModerationService
    review_service: ReviewService
    kinds: dict[ResourceType, ResourceKind]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    kinds = {
        ResourceType.CAMERA: ResourceKind(
            schema=CAMERA_SCHEMA,
            repository=SupabaseResourceRepository(
                supabase_client, CAMERAS_TABLE, CAMERA_SCHEMA, owner_column="user_id"
            ),
        ),
        ResourceType.FILMSTOCK: ResourceKind(
            schema=FILMSTOCK_SCHEMA,
            repository=SupabaseResourceRepository(
                supabase_client, FILM_STOCKS_TABLE, FILMSTOCK_SCHEMA
            ),
        ),
    }
    submission_repository = SupabaseSubmissionRepository(supabase_client)
    user_service = UserService(
        repository=SupabaseUserRepository(supabase_client),
        token_verifier=SupabaseTokenVerifier(supabase_client),
    )

    mail_notifier: HttpxMailtrapNotifier | None = None
    notifier: AdminNotifier
    if resolved_settings.mailtrap_api_key:
        mail_notifier = HttpxMailtrapNotifier.create(
            api_key=resolved_settings.mailtrap_api_key,
            sender=resolved_settings.notification_sender,
            recipients=parse_email_list(resolved_settings.admin_notification_emails),
            site_url=resolved_settings.site_url,
            api_url=resolved_settings.mailtrap_api_url,
        )
        notifier = mail_notifier
    else:
        notifier = LoggingNotifier()

    moderation_service = ModerationService(
        kinds=kinds,
        submission_repository=submission_repository,
        object_store=SupabaseObjectStore(
            supabase_client, resolved_settings.storage_bucket
        ),
        image_transform=PillowImageTransform(),
        notifier=notifier,
        audit_service=AuditService(SupabaseAuditRepository(supabase_client)),
        max_image_size_mb=resolved_settings.max_image_size_mb,
    )
    review_service = ReviewService(
        kinds=kinds,
        submission_repository=submission_repository,
        user_service=user_service,
    )

    async def close_resources() -> None:
        await moderation_service.wait_for_notifications()
        if mail_notifier is not None:
            await mail_notifier.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        moderation_service=moderation_service,
        review_service=review_service,
        kinds=kinds,
        close_resources=close_resources,
    )
