# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# The submission pipeline (and the rate-limit store inside it) is built once
# by the application lifespan and kept on app.state; every request gets that
# same instance. Tests replace it through app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings, settings
from core.services.notification_service import NotificationService
from core.services.rate_limiter import build_rate_limit_store
from core.services.storage_service import StorageService
from core.services.submission_pipeline import SubmissionPipeline
from core.services.supplier_service import SupplierService
from lib.email_client import ResendEmailClient


def build_notification_service(config: Settings = settings) -> NotificationService:
    """Notification service backed by Resend."""
    client = ResendEmailClient(
        api_key=config.RESEND_API_KEY,
        api_url=config.RESEND_API_URL,
        timeout=config.EMAIL_TIMEOUT_SECONDS,
    )
    return NotificationService(
        notifier=client,
        sender=config.EMAIL_FROM,
        internal_recipients=config.notify_recipients_list,
    )


def build_submission_pipeline(config: Settings = settings) -> SubmissionPipeline:
    """
    Wire the pipeline to Supabase, Resend and the configured rate-limit store.

    Called once at startup. No network calls happen here; clients connect
    on first use.
    """
    return SubmissionPipeline(
        rate_limiter=build_rate_limit_store(config),
        storage=StorageService(),
        suppliers=SupplierService(),
        notifications=build_notification_service(config),
        settings=config,
    )


def get_submission_pipeline(request: Request) -> SubmissionPipeline:
    """Get the pipeline created at startup."""
    return request.app.state.submission_pipeline


# Type alias for dependency injection
PipelineDep = Annotated[SubmissionPipeline, Depends(get_submission_pipeline)]
