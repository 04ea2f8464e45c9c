# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides in-memory fakes for storage, persistence and email
# - Provides a valid registration payload and data-URL helpers
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("RESEND_API_KEY", "test-resend-key")
os.environ.setdefault("NOTIFY_RECIPIENTS", "team@example.com, ops@example.com")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from app.config import settings
from core.models.supplier import SupplierRecord
from core.services.notification_service import NotificationService
from core.services.rate_limiter import InMemoryRateLimitStore
from core.services.submission_pipeline import SubmissionPipeline


# =============================================================================
# Helpers
# =============================================================================

def make_data_url(mime_type: str = "image/png", decoded_bytes: int = 300) -> str:
    """
    Build a data URL whose decoded size is about `decoded_bytes`.

    The payload is all "A" characters, which is valid base64 (zero bytes).
    """
    encoded_len = -(-decoded_bytes * 4 // 3)
    encoded_len += -encoded_len % 4
    return f"data:{mime_type};base64," + "A" * encoded_len


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStorage:
    """Blob store that keeps uploads in a list. Fails on the n-th upload if asked."""

    def __init__(self, fail_on: int | None = None):
        self.uploads: list[dict] = []
        self.fail_on = fail_on
        self.calls = 0

    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        self.calls += 1
        if self.fail_on is not None and self.calls == self.fail_on:
            raise RuntimeError("storage unavailable")
        self.uploads.append(
            {"bucket": bucket, "key": key, "data": data, "content_type": content_type}
        )
        return self.get_public_url(bucket, key)

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"https://cdn.example.com/{bucket}/{key}"


class FakeSuppliers:
    """Supplier repository that stores records in memory."""

    def __init__(self, error: Exception | None = None):
        self.records: list[SupplierRecord] = []
        self.error = error

    def insert(self, record: SupplierRecord) -> str:
        if self.error is not None:
            raise self.error
        self.records.append(record)
        return f"supplier-{len(self.records)}"


class FakeEmailClient:
    """Email client that records messages; can fail for chosen recipients."""

    def __init__(self, fail_for: set[str] | None = None):
        self.sent: list[dict] = []
        self.fail_for = fail_for or set()

    def send(self, sender: str, to: list[str], subject: str, html: str) -> dict:
        if self.fail_for & set(to):
            raise RuntimeError("email provider unreachable")
        self.sent.append({"from": sender, "to": to, "subject": subject, "html": html})
        return {"id": f"email-{len(self.sent)}"}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def valid_payload():
    """A minimal valid registration (no files)."""
    return {
        "businessName": "מאפיית הכרמל",
        "contactName": "Dana Levi",
        "phone": "050-1234567",
        "email": "dana@example.com",
        "about": "Artisan bakery supplying cafes in the north.",
        "categories": ["לחמים ומאפים", "מתוקים וקינוחים"],
        "activityAreas": ["צפון"],
        "website": "",
        "instagram": "",
        "mainAddress": "Haifa, Herzl 10",
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    return InMemoryRateLimitStore(max_requests=3, window_seconds=3600, clock=clock)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def suppliers():
    return FakeSuppliers()


@pytest.fixture
def email_client():
    return FakeEmailClient()


@pytest.fixture
def notifications(email_client):
    return NotificationService(
        notifier=email_client,
        sender=settings.EMAIL_FROM,
        internal_recipients=settings.notify_recipients_list,
    )


@pytest.fixture
def pipeline(rate_limiter, storage, suppliers, notifications):
    return SubmissionPipeline(
        rate_limiter=rate_limiter,
        storage=storage,
        suppliers=suppliers,
        notifications=notifications,
        settings=settings,
    )
