# =============================================================================
# tests/test_file_inspector.py - Uploaded File Check Tests
# =============================================================================
# Tests for:
# - Decoded size estimation and the 5MB ceiling
# - MIME allow-lists per slot (images vs catalog)
# - Size checked before type
# - Filename sanitization and storage keys
# =============================================================================

import base64
import re

import pytest

from app.exceptions import (
    FileSizeExceededError,
    InvalidFileEncodingError,
    InvalidFileTypeError,
)
from core.services.file_inspector import (
    CATALOG_SLOT,
    LOGO_SLOT,
    build_storage_key,
    decoded_size,
    inspect_file,
    parse_mime_type,
    product_image_slot,
    sanitize_filename,
)
from tests.conftest import make_data_url

FIVE_MB = 5 * 1024 * 1024
SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


# =============================================================================
# Payload Helpers
# =============================================================================

class TestPayloadHelpers:
    """Size and MIME parsing from data URLs."""

    def test_decoded_size(self):
        payload = "data:image/png;base64," + base64.b64encode(b"x" * 300).decode()

        assert decoded_size(payload) == 300

    def test_decoded_size_without_comma(self):
        assert decoded_size("garbage") == 0

    def test_parse_mime_type(self):
        assert parse_mime_type("data:image/webp;base64,AAAA") == "image/webp"
        assert parse_mime_type("data:application/pdf;base64,AAAA") == "application/pdf"

    @pytest.mark.parametrize("payload", ["AAAA", "data:image/png,AAAA", "image/png;base64,AAAA", ""])
    def test_parse_mime_type_missing_header(self, payload):
        assert parse_mime_type(payload) is None


# =============================================================================
# Inspection
# =============================================================================

class TestInspectFile:
    """Size, type and encoding checks."""

    def test_valid_image(self):
        payload = "data:image/png;base64," + base64.b64encode(b"\x89PNG-data").decode()

        attachment = inspect_file(payload, "logo.png", LOGO_SLOT)

        assert attachment.data == b"\x89PNG-data"
        assert attachment.mime_type == "image/png"
        assert attachment.filename == "logo.png"
        assert attachment.size == len(b"\x89PNG-data")

    def test_just_under_limit_is_accepted(self):
        # 6990504 base64 chars decode to 5242878 bytes, just under 5MB
        payload = "data:image/jpeg;base64," + "A" * 6990504

        attachment = inspect_file(payload, "big.jpg", LOGO_SLOT, max_bytes=FIVE_MB)

        assert attachment.size <= FIVE_MB

    def test_oversized_file_rejected(self):
        payload = make_data_url("image/png", 6 * 1024 * 1024)

        with pytest.raises(FileSizeExceededError) as exc_info:
            inspect_file(payload, "huge.png", LOGO_SLOT, max_bytes=FIVE_MB)

        assert exc_info.value.slot == "logo"
        assert "5MB" in exc_info.value.public_message

    def test_size_checked_before_type(self):
        payload = make_data_url("application/x-msdownload", 6 * 1024 * 1024)

        with pytest.raises(FileSizeExceededError):
            inspect_file(payload, "evil.exe", LOGO_SLOT, max_bytes=FIVE_MB)

    def test_size_error_names_product_image_index(self):
        payload = make_data_url("image/png", 6 * 1024 * 1024)

        with pytest.raises(FileSizeExceededError) as exc_info:
            inspect_file(payload, "p.png", product_image_slot(3), max_bytes=FIVE_MB)

        assert exc_info.value.slot == "product image 3"
        assert exc_info.value.field_error.field == "productImages.files"

    @pytest.mark.parametrize(
        "mime_type",
        ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"],
    )
    def test_image_types_allowed_for_logo(self, mime_type):
        inspect_file(make_data_url(mime_type), "logo", LOGO_SLOT)

    def test_pdf_rejected_for_images(self):
        with pytest.raises(InvalidFileTypeError) as exc_info:
            inspect_file(make_data_url("application/pdf"), "doc.pdf", product_image_slot(1))

        assert "image/png" in exc_info.value.public_message
        assert "application/pdf" not in exc_info.value.details["allowed_types"]

    def test_pdf_allowed_for_catalog(self):
        attachment = inspect_file(make_data_url("application/pdf"), "catalog.pdf", CATALOG_SLOT)

        assert attachment.mime_type == "application/pdf"

    def test_svg_rejected_for_catalog(self):
        with pytest.raises(InvalidFileTypeError) as exc_info:
            inspect_file(make_data_url("image/svg+xml"), "c.svg", CATALOG_SLOT)

        assert exc_info.value.slot == "catalog file"

    def test_missing_header_is_invalid_type(self):
        with pytest.raises(InvalidFileTypeError):
            inspect_file("AAAA", "logo.png", LOGO_SLOT)

    def test_malformed_base64(self):
        with pytest.raises(InvalidFileEncodingError):
            inspect_file("data:image/png;base64,@@@@", "logo.png", LOGO_SLOT)

    def test_errors_are_client_facing(self):
        with pytest.raises(InvalidFileTypeError) as exc_info:
            inspect_file(make_data_url("text/html"), "x.html", LOGO_SLOT)

        assert exc_info.value.status_code == 400
        assert exc_info.value.to_dict()["fields"][0]["field"] == "logoFile"


# =============================================================================
# Filenames and Keys
# =============================================================================

class TestStorageKeys:
    """Filename sanitization and key construction."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("logo.png", "logo.png"),
            ("my logo (1).png", "my_logo__1_.png"),
            ("../../etc/passwd", ".._.._etc_passwd"),
            ("לוגו.jpg", "____.jpg"),
            ("a-b.c", "a-b.c"),
            ("", "file"),
        ],
    )
    def test_sanitize(self, filename, expected):
        assert sanitize_filename(filename) == expected

    @pytest.mark.parametrize("filename", ["my logo.png", "קטלוג 2024.pdf", "a&b<c>.gif", "x"])
    def test_sanitize_is_idempotent(self, filename):
        once = sanitize_filename(filename)

        assert sanitize_filename(once) == once

    @pytest.mark.parametrize("filename", ["my logo.png", "קטלוג 2024.pdf", "emoji 🍞.webp", "a/b\\c.gif"])
    def test_keys_are_safe(self, filename):
        assert SAFE_KEY.match(build_storage_key(filename))
        assert SAFE_KEY.match(build_storage_key(filename, index=2))

    def test_key_format(self):
        assert build_storage_key("logo.png", timestamp_ms=1700000000000) == "1700000000000-logo.png"
        assert build_storage_key("a b.png", index=2, timestamp_ms=1700000000000) == "1700000000000-2-a_b.png"
