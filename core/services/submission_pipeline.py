# =============================================================================
# core/services/submission_pipeline.py - Supplier Submission Pipeline
# =============================================================================
# Processes one registration from raw request body to saved record:
#
#   1. Rate-limit gate      -> RateLimitedError
#   2. Parse + validate     -> SubmissionValidationError
#   3. Logo upload          \
#   4. Product images       |-> FileRejectedError / StorageUploadError
#   5. Catalog (file only)  /
#   6. Persist record       -> PersistenceError
#   7. Internal notice      (failure logged, ignored)
#   8. Submitter confirm    (failure logged, ignored)
#
# Steps run strictly in order with a single attempt each. Files uploaded
# before a later failure are not deleted; their keys are logged.
# =============================================================================

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.exceptions import (
    RateLimitedError,
    StorageUploadError,
    SubmissionValidationError,
    SupplierRegistrationException,
    UnexpectedSubmissionError,
)
from core.models.supplier import FieldError, FileCatalog, SupplierSubmission
from core.services.file_inspector import (
    CATALOG_SLOT,
    LOGO_SLOT,
    UploadSlot,
    build_storage_key,
    inspect_file,
    product_image_slot,
)
from core.services.notification_service import NotificationService
from core.services.rate_limiter import RateLimitStore
from core.services.storage_service import BlobStore
from core.services.supplier_service import SupplierRepository, UploadedFiles, build_record
from core.services.validation import BODY_FIELD, field_label, validate_submission

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_LOGO_NAME = "logo"


@dataclass
class SubmissionReceipt:
    """Outcome of an accepted submission."""

    supplier_id: str
    uploads: UploadedFiles
    internal_notified: bool
    submitter_notified: bool


class SubmissionPipeline:
    """
    Orchestrates validation, uploads, persistence and notification.

    Collaborators are injected so the same pipeline runs against Supabase
    and Resend in production and against fakes in tests.
    """

    def __init__(
        self,
        rate_limiter: RateLimitStore,
        storage: BlobStore,
        suppliers: SupplierRepository,
        notifications: NotificationService,
        settings: Settings,
    ):
        self.rate_limiter = rate_limiter
        self.storage = storage
        self.suppliers = suppliers
        self.notifications = notifications
        self.settings = settings

    # -------------------------------------------------------------------------
    # Entry Point
    # -------------------------------------------------------------------------

    def process(self, body: bytes | str, client_id: str) -> SubmissionReceipt:
        """
        Run one submission through every step.

        Args:
            body: Raw request body (JSON)
            client_id: Rate-limit key for the caller

        Returns:
            SubmissionReceipt with the new supplier id

        Raises:
            RateLimitedError: Client is over its limit; nothing else was done
            SubmissionValidationError: Payload invalid; nothing else was done
            FileRejectedError: A file failed size/type/encoding checks
            StorageUploadError: The blob store refused a file
            PersistenceError: The record could not be saved
            UnexpectedSubmissionError: Anything else before the record was saved
        """
        if not self.rate_limiter.check_and_increment(client_id):
            logger.warning(f"Rate limit exceeded for client: {client_id}")
            raise RateLimitedError(client_id)

        uploaded_keys: list[str] = []
        try:
            submission = self._parse(body)
            logger.info(f"Received supplier submission for: {submission.business_name}")

            uploads = self._upload_files(submission, uploaded_keys)
            record = build_record(submission, uploads)
            supplier_id = self.suppliers.insert(record)

        except SubmissionValidationError as e:
            logger.info(f"Submission rejected: invalid fields {', '.join(err.field for err in e.field_errors)}")
            raise
        except SupplierRegistrationException as e:
            self._log_abort(e.message, uploaded_keys)
            raise
        except Exception as e:
            logger.exception(f"Unexpected error processing submission: {e}")
            self._log_abort(str(e), uploaded_keys)
            raise UnexpectedSubmissionError(str(e)) from e

        internal_notified = self.notifications.notify_internal(submission, uploads)
        submitter_notified = self.notifications.confirm_submitter(submission)

        return SubmissionReceipt(
            supplier_id=supplier_id,
            uploads=uploads,
            internal_notified=internal_notified,
            submitter_notified=submitter_notified,
        )

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _parse(self, body: bytes | str) -> SupplierSubmission:
        try:
            raw = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise SubmissionValidationError([
                FieldError(
                    field=BODY_FIELD,
                    label=field_label(BODY_FIELD),
                    message="Request body must be valid JSON",
                )
            ])
        return validate_submission(raw, max_product_images=self.settings.MAX_PRODUCT_IMAGES)

    def _upload_files(self, submission: SupplierSubmission, uploaded_keys: list[str]) -> UploadedFiles:
        uploads = UploadedFiles()

        if submission.logo_file:
            uploads.logo_url = self._upload(
                submission.logo_file,
                submission.logo_file_name or DEFAULT_LOGO_NAME,
                LOGO_SLOT,
                self.settings.LOGO_BUCKET,
                uploaded_keys,
            )

        if submission.product_images:
            images = submission.product_images
            for index, (payload, filename) in enumerate(zip(images.files, images.file_names), start=1):
                uploads.product_image_urls.append(
                    self._upload(
                        payload,
                        filename,
                        product_image_slot(index),
                        self.settings.PRODUCTS_BUCKET,
                        uploaded_keys,
                    )
                )

        catalog = submission.product_catalog
        if isinstance(catalog, FileCatalog):
            uploads.catalog_url = self._upload(
                catalog.file,
                catalog.file_name,
                CATALOG_SLOT,
                self.settings.CATALOG_BUCKET,
                uploaded_keys,
            )

        return uploads

    def _upload(
        self,
        payload: str,
        filename: str,
        slot: UploadSlot,
        bucket: str,
        uploaded_keys: list[str],
    ) -> str:
        """Inspect one file, then store it. Returns its public URL."""
        attachment = inspect_file(payload, filename, slot, self.settings.max_file_size_bytes)
        key = build_storage_key(attachment.filename, index=slot.index)

        logger.info(f"Uploading {slot}: {bucket}/{key}")
        try:
            url = self.storage.upload(bucket, key, attachment.data, attachment.mime_type)
        except Exception as e:
            raise StorageUploadError(str(slot), str(e)) from e

        uploaded_keys.append(f"{bucket}/{key}")
        return url

    def _log_abort(self, reason: str, uploaded_keys: list[str]) -> None:
        logger.error(f"Submission aborted: {reason}")
        if uploaded_keys:
            logger.warning(f"Orphaned uploads left in storage: {', '.join(uploaded_keys)}")
