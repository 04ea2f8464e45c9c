# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .notification_service import NotificationService
from .rate_limiter import InMemoryRateLimitStore, RateLimitStore, RedisRateLimitStore
from .storage_service import StorageService
from .submission_pipeline import SubmissionPipeline, SubmissionReceipt
from .supplier_service import SupplierService, UploadedFiles
from .validation import validate_submission

__all__ = [
    "InMemoryRateLimitStore",
    "NotificationService",
    "RateLimitStore",
    "RedisRateLimitStore",
    "StorageService",
    "SubmissionPipeline",
    "SubmissionReceipt",
    "SupplierService",
    "UploadedFiles",
    "validate_submission",
]
