# =============================================================================
# tests/test_notifications.py - Email Tests
# =============================================================================
# Tests for:
# - HTML escaping of every user-supplied value
# - Internal notice / submitter confirmation recipients
# - Send failures being swallowed
# - The Resend client (httpx mocked)
# =============================================================================

from html import unescape
from unittest.mock import MagicMock, patch

import httpx
import pytest

from core.services.notification_service import (
    CONFIRMATION_SUBJECT,
    NotificationService,
    build_confirmation_html,
    build_internal_html,
)
from core.services.supplier_service import UploadedFiles
from core.services.validation import validate_submission
from lib.email_client import EmailClientError, ResendEmailClient
from tests.conftest import FakeEmailClient

HOSTILE = "<script>alert(\"x\")</script> & 'quotes'"


@pytest.fixture
def submission(valid_payload):
    return validate_submission(valid_payload)


# =============================================================================
# Templates
# =============================================================================

class TestTemplates:
    """Generated email HTML."""

    def test_internal_html_escapes_free_text(self, valid_payload):
        valid_payload.update(
            businessName=HOSTILE,
            contactName=HOSTILE,
            about=HOSTILE,
            mainAddress=HOSTILE,
            website="https://x.example/?a=1&b=<2>",
            productCatalog={"type": "text", "text": HOSTILE},
        )
        submission = validate_submission(valid_payload)

        html = build_internal_html(submission, UploadedFiles())

        assert "<script>" not in html
        assert "'quotes'" not in html
        assert "&lt;script&gt;" in html
        assert "a=1&amp;b=&lt;2&gt;" in html

    @pytest.mark.parametrize(
        "field, value",
        [
            ("businessName", HOSTILE),
            ("companyId", "<i>51</i>"),
            ("contactName", HOSTILE),
            ("phone", "<b>050</b>"),
            ("email", "<x>@example.com"),
            ("about", HOSTILE),
            ("instagram", "@bakery<script>"),
            ("mainAddress", HOSTILE),
        ],
    )
    def test_every_field_is_escaped(self, valid_payload, field, value):
        valid_payload[field] = value
        submission = validate_submission(valid_payload)

        html = build_internal_html(submission, UploadedFiles())

        assert value not in html
        assert value in unescape(html)

    def test_link_cannot_break_out_of_href(self, valid_payload):
        link = 'https://drive.example/x"><script>alert(1)</script>'
        valid_payload["productCatalog"] = {"type": "drive-link", "link": link}
        submission = validate_submission(valid_payload)

        html = build_internal_html(submission, UploadedFiles())

        assert "<script>" not in html
        assert '"><' not in html
        assert link in unescape(html)

    def test_internal_html_lists_uploads(self, submission):
        uploads = UploadedFiles(
            logo_url="https://cdn.example.com/supplier-logos/1-logo.png",
            product_image_urls=[
                "https://cdn.example.com/supplier-products/1-1-a.png",
                "https://cdn.example.com/supplier-products/1-2-b.png",
            ],
        )

        html = build_internal_html(submission, uploads)

        assert uploads.logo_url in html
        for url in uploads.product_image_urls:
            assert url in html

    def test_internal_html_skips_empty_optional_fields(self, submission):
        html = build_internal_html(submission, UploadedFiles())

        assert "אתר" not in html
        assert "לוגו" not in html

    def test_drive_link_catalog(self, valid_payload):
        valid_payload["productCatalog"] = {"type": "drive-link", "link": "https://drive.google.com/abc"}
        submission = validate_submission(valid_payload)

        html = build_internal_html(submission, UploadedFiles())

        assert 'href="https://drive.google.com/abc"' in html

    def test_confirmation_html_escapes_names(self, valid_payload):
        valid_payload["contactName"] = "<b>Dana</b>"
        submission = validate_submission(valid_payload)

        html = build_confirmation_html(submission)

        assert "&lt;b&gt;Dana&lt;/b&gt;" in html
        assert "<b>Dana</b>" not in html


# =============================================================================
# Service
# =============================================================================

class TestNotificationService:
    """Sending and failure handling."""

    def test_internal_notice_goes_to_team(self, submission):
        client = FakeEmailClient()
        service = NotificationService(client, "Hasapakia <a@b.co>", ["team@example.com"])

        assert service.notify_internal(submission, UploadedFiles()) is True

        sent = client.sent[0]
        assert sent["to"] == ["team@example.com"]
        assert sent["from"] == "Hasapakia <a@b.co>"
        assert submission.business_name in sent["subject"]

    def test_confirmation_goes_to_submitter(self, submission):
        client = FakeEmailClient()
        service = NotificationService(client, "Hasapakia <a@b.co>", ["team@example.com"])

        assert service.confirm_submitter(submission) is True

        assert client.sent[0]["to"] == ["dana@example.com"]
        assert client.sent[0]["subject"] == CONFIRMATION_SUBJECT

    def test_failure_is_logged_not_raised(self, submission, caplog):
        client = FakeEmailClient(fail_for={"team@example.com"})
        service = NotificationService(client, "Hasapakia <a@b.co>", ["team@example.com"])

        assert service.notify_internal(submission, UploadedFiles()) is False

        assert "Failed to send internal email" in caplog.text

    def test_no_recipients_skips_internal_notice(self, submission):
        client = FakeEmailClient()
        service = NotificationService(client, "Hasapakia <a@b.co>", [])

        assert service.notify_internal(submission, UploadedFiles()) is False
        assert client.sent == []


# =============================================================================
# Resend Client
# =============================================================================

class TestResendEmailClient:
    """HTTP calls to the Resend API."""

    def test_send_posts_message(self):
        response = MagicMock(status_code=200)
        response.json.return_value = {"id": "email-123"}
        client = ResendEmailClient(api_key="re_test", api_url="https://api.resend.test/")

        with patch("lib.email_client.httpx.post", return_value=response) as post:
            result = client.send("from@x.co", ["to@x.co"], "Hi", "<p>Hi</p>")

        assert result == {"id": "email-123"}
        url = post.call_args.args[0]
        kwargs = post.call_args.kwargs
        assert url == "https://api.resend.test/emails"
        assert kwargs["headers"]["Authorization"] == "Bearer re_test"
        assert kwargs["json"] == {"from": "from@x.co", "to": ["to@x.co"], "subject": "Hi", "html": "<p>Hi</p>"}

    def test_error_status_raises(self):
        response = MagicMock(status_code=422, text="invalid from address")
        client = ResendEmailClient(api_key="re_test")

        with patch("lib.email_client.httpx.post", return_value=response):
            with pytest.raises(EmailClientError) as exc_info:
                client.send("bad", ["to@x.co"], "Hi", "<p>Hi</p>")

        assert exc_info.value.status_code == 422

    def test_transport_error_raises(self):
        client = ResendEmailClient(api_key="re_test")

        with patch("lib.email_client.httpx.post", side_effect=httpx.ConnectError("down")):
            with pytest.raises(EmailClientError):
                client.send("from@x.co", ["to@x.co"], "Hi", "<p>Hi</p>")
