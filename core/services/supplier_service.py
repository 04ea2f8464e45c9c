# =============================================================================
# core/services/supplier_service.py - Supplier Persistence
# =============================================================================
# Builds the supplier row from a validated submission and writes it to
# the suppliers table. This insert is the single commit point of a
# submission: nothing before it counts as saved.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.config import settings
from app.exceptions import PersistenceError
from core.models.supplier import (
    DriveLinkCatalog,
    FileCatalog,
    SupplierRecord,
    SupplierStatus,
    SupplierSubmission,
    TextCatalog,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


@dataclass
class UploadedFiles:
    """Public URLs resolved while uploading a submission's files."""

    logo_url: str | None = None
    product_image_urls: list[str] = field(default_factory=list)
    catalog_url: str | None = None


class SupplierRepository(Protocol):
    """Anything that can persist a supplier record and return its id."""

    def insert(self, record: SupplierRecord) -> str:
        ...


def build_record(submission: SupplierSubmission, uploads: UploadedFiles) -> SupplierRecord:
    """
    Map a submission plus its uploaded file URLs to the persisted row.

    Empty optional strings are stored as NULL. Only the payload of the
    chosen catalog variant is kept.
    """
    catalog = submission.product_catalog
    catalog_text = None
    catalog_url = None
    if isinstance(catalog, TextCatalog):
        catalog_text = catalog.text
    elif isinstance(catalog, FileCatalog):
        catalog_url = uploads.catalog_url
    elif isinstance(catalog, DriveLinkCatalog):
        catalog_url = catalog.link

    return SupplierRecord(
        business_name=submission.business_name,
        company_id=submission.company_id or None,
        contact_name=submission.contact_name,
        phone=submission.phone,
        email=submission.email,
        about=submission.about,
        categories=submission.categories,
        activity_areas=submission.activity_areas,
        website=submission.website or None,
        instagram=submission.instagram or None,
        main_address=submission.main_address,
        logo_url=uploads.logo_url,
        product_images_url=uploads.product_image_urls or None,
        product_catalog_type=catalog.type if catalog else None,
        product_catalog_text=catalog_text,
        product_catalog_url=catalog_url,
        status=SupplierStatus.PENDING,
    )


class SupplierService:
    """
    Writes supplier registrations to Supabase.

    Records are only ever inserted here; moderation updates the status
    elsewhere.
    """

    def __init__(self, client: Any | None = None, table: str | None = None):
        self._client = client
        self.table = table or settings.SUPPLIERS_TABLE

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def insert(self, record: SupplierRecord) -> str:
        """
        Insert a supplier record.

        Returns:
            The generated supplier id

        Raises:
            PersistenceError: If the insert fails or returns no row
        """
        try:
            response = (
                self.client.table(self.table)
                .insert(record.to_row())
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to insert supplier: {e}")
            raise PersistenceError(str(e))

        if not response.data:
            raise PersistenceError("Insert returned no data")

        supplier_id = str(response.data[0]["id"])
        logger.info(f"Supplier saved to database: {supplier_id}")
        return supplier_id
