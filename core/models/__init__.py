# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - supplier.py: registration payload, persisted record, API responses
#
# These models define the "contract" between API and clients.
# =============================================================================

from .supplier import (
    ACTIVITY_AREAS,
    CATALOG_TYPES,
    CATEGORIES,
    DriveLinkCatalog,
    FieldError,
    FileCatalog,
    FormOptionsResponse,
    ProductCatalog,
    ProductImages,
    SubmissionResponse,
    SupplierRecord,
    SupplierStatus,
    SupplierSubmission,
    TextCatalog,
)

__all__ = [
    "ACTIVITY_AREAS",
    "CATALOG_TYPES",
    "CATEGORIES",
    "DriveLinkCatalog",
    "FieldError",
    "FileCatalog",
    "FormOptionsResponse",
    "ProductCatalog",
    "ProductImages",
    "SubmissionResponse",
    "SupplierRecord",
    "SupplierStatus",
    "SupplierSubmission",
    "TextCatalog",
]
