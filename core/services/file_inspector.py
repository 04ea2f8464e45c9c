# =============================================================================
# core/services/file_inspector.py - Uploaded File Checks
# =============================================================================
# Files arrive as data URLs: "data:<mime-type>;base64,<encoded-bytes>".
#
# Before anything is decoded or uploaded, each file must pass:
# 1. Size check  - decoded size (encoded length * 3/4) within the ceiling
# 2. MIME check  - declared type present and allowed for the slot
# Only then are the bytes decoded.
# =============================================================================

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum

from app.exceptions import (
    FileSizeExceededError,
    InvalidFileEncodingError,
    InvalidFileTypeError,
)
from core.services.validation import field_label
from lib.utils import now_ms

IMAGE_MIME_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
)

CATALOG_MIME_TYPES: tuple[str, ...] = IMAGE_MIME_TYPES + ("application/pdf",)

DEFAULT_MAX_FILE_BYTES = 5 * 1024 * 1024

_DATA_URL_HEADER = re.compile(r"^data:([^;]+);base64,")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]")


class SlotKind(str, Enum):
    """Named upload positions in the form."""
    LOGO = "logo"
    PRODUCT_IMAGE = "product image"
    CATALOG = "catalog"


_SLOT_FIELDS = {
    SlotKind.LOGO: "logoFile",
    SlotKind.PRODUCT_IMAGE: "productImages.files",
    SlotKind.CATALOG: "productCatalog.file",
}


@dataclass(frozen=True)
class UploadSlot:
    """
    One upload position, e.g. the logo or product image 3.

    `index` is 1-based and only set for product images.
    """

    kind: SlotKind
    index: int | None = None

    @property
    def allowed_types(self) -> tuple[str, ...]:
        if self.kind is SlotKind.CATALOG:
            return CATALOG_MIME_TYPES
        return IMAGE_MIME_TYPES

    @property
    def field(self) -> str:
        return _SLOT_FIELDS[self.kind]

    def __str__(self) -> str:
        if self.kind is SlotKind.PRODUCT_IMAGE and self.index is not None:
            return f"product image {self.index}"
        if self.kind is SlotKind.CATALOG:
            return "catalog file"
        return self.kind.value


LOGO_SLOT = UploadSlot(SlotKind.LOGO)
CATALOG_SLOT = UploadSlot(SlotKind.CATALOG)


def product_image_slot(index: int) -> UploadSlot:
    """Slot for the index-th (1-based) product image."""
    return UploadSlot(SlotKind.PRODUCT_IMAGE, index)


@dataclass
class FileAttachment:
    """A file that passed inspection and is ready to upload."""

    data: bytes
    mime_type: str
    filename: str
    size: int


# =============================================================================
# Payload Helpers
# =============================================================================

def _encoded_part(payload: str) -> str:
    """Everything after the first comma; empty when there is none."""
    _, _, encoded = payload.partition(",")
    return encoded


def decoded_size(payload: str) -> int:
    """Approximate decoded byte length of a data URL (encoded length * 3/4)."""
    return len(_encoded_part(payload)) * 3 // 4


def parse_mime_type(payload: str) -> str | None:
    """Declared content type of a data URL, or None if the header is missing."""
    match = _DATA_URL_HEADER.match(payload)
    return match.group(1) if match else None


def sanitize_filename(filename: str) -> str:
    """
    Make a filename safe for use in a storage key.

    Every character outside [A-Za-z0-9.-] becomes an underscore. Applying it
    twice gives the same result.

    Example:
        sanitize_filename("my logo (1).png")  # "my_logo__1_.png"
    """
    return _UNSAFE_FILENAME_CHARS.sub("_", filename) or "file"


def build_storage_key(filename: str, index: int | None = None, timestamp_ms: int | None = None) -> str:
    """
    Unique storage key for an upload.

    Format: "<ms>-<name>" or "<ms>-<index>-<name>" for multi-file slots.
    """
    ms = now_ms() if timestamp_ms is None else timestamp_ms
    safe_name = sanitize_filename(filename)
    if index is None:
        return f"{ms}-{safe_name}"
    return f"{ms}-{index}-{safe_name}"


# =============================================================================
# Inspection
# =============================================================================

def inspect_file(
    payload: str,
    filename: str,
    slot: UploadSlot,
    max_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> FileAttachment:
    """
    Check a data URL against the slot's rules and decode it.

    Args:
        payload: "data:<mime>;base64,<data>"
        filename: Original filename from the client
        slot: Which upload position this file fills
        max_bytes: Size ceiling for the decoded file

    Returns:
        FileAttachment with the decoded bytes

    Raises:
        FileSizeExceededError: Decoded size above max_bytes (checked first)
        InvalidFileTypeError: Missing or disallowed MIME type
        InvalidFileEncodingError: Payload is not valid base64
    """
    label = field_label(slot.field)

    size = decoded_size(payload)
    if size > max_bytes:
        raise FileSizeExceededError(str(slot), slot.field, label, max_bytes // (1024 * 1024))

    mime_type = parse_mime_type(payload)
    if mime_type is None or mime_type not in slot.allowed_types:
        raise InvalidFileTypeError(str(slot), slot.field, label, list(slot.allowed_types))

    try:
        data = base64.b64decode(_encoded_part(payload), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidFileEncodingError(str(slot), slot.field, label)

    return FileAttachment(data=data, mime_type=mime_type, filename=filename, size=len(data))
