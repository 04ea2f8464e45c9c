# =============================================================================
# core/services/validation.py - Submission Validation
# =============================================================================
# Turns a raw JSON payload into a SupplierSubmission, or raises
# SubmissionValidationError listing every violated field.
#
# Pydantic already collects all errors in one pass; this module folds them
# to exactly one entry per field path and rewrites the messages into
# something a form can show next to the field.
# =============================================================================

import logging
import re
from typing import Any

from pydantic import ValidationError

from app.exceptions import SubmissionValidationError
from core.models.supplier import (
    CATALOG_TYPES,
    DEFAULT_MAX_PRODUCT_IMAGES,
    FieldError,
    SupplierSubmission,
)

logger = logging.getLogger(__name__)

BODY_FIELD = "body"

# Display labels shown next to each field in the form
FIELD_LABELS: dict[str, str] = {
    "body": "גוף הבקשה",
    "businessName": "שם העסק",
    "companyId": "ח.פ / עוסק מורשה",
    "contactName": "שם איש קשר",
    "phone": "טלפון",
    "email": "אימייל",
    "about": "אודות העסק",
    "categories": "קטגוריות",
    "activityAreas": "אזורי פעילות",
    "website": "אתר",
    "instagram": "אינסטגרם",
    "mainAddress": "כתובת מרכזית",
    "logoFile": "לוגו",
    "logoFileName": "שם קובץ הלוגו",
    "productImages": "תמונות מוצרים",
    "productImages.files": "תמונות מוצרים",
    "productImages.fileNames": "שמות קבצי תמונות המוצרים",
    "productCatalog": "קטלוג מוצרים",
    "productCatalog.type": "סוג קטלוג",
    "productCatalog.text": "טקסט קטלוג",
    "productCatalog.file": "קובץ קטלוג",
    "productCatalog.fileName": "שם קובץ הקטלוג",
    "productCatalog.link": "קישור לקטלוג",
}


def field_label(field: str) -> str:
    """Display label for a field path, falling back to the path itself."""
    return FIELD_LABELS.get(field, field)


def _humanize(field: str) -> str:
    """'productCatalog.fileName' -> 'File name'."""
    leaf = field.rsplit(".", 1)[-1]
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", leaf).lower()
    return words[:1].upper() + words[1:]


def _field_path(loc: tuple[Any, ...]) -> str:
    """
    Build the dotted field path for an error location.

    List indices and discriminated-union tags are dropped so that every
    error of a field shares one path.
    """
    parts: list[str] = []
    previous: Any = None
    for part in loc:
        is_union_tag = previous == "productCatalog" and part in CATALOG_TYPES
        previous = part
        if isinstance(part, int) or is_union_tag:
            continue
        parts.append(str(part))
    return ".".join(parts) or BODY_FIELD


def _message_for(field: str, error: dict[str, Any]) -> str:
    """Rewrite a pydantic error into a form-friendly message."""
    kind = error["type"]
    ctx = error.get("ctx") or {}
    name = _humanize(field)

    if field == BODY_FIELD:
        return "Request body must be a JSON object"
    if kind == "missing" or kind == "string_too_short":
        return f"{name} is required"
    if kind == "string_too_long":
        return f"{name} too long (max {ctx.get('max_length')} characters)"
    if kind == "string_pattern_mismatch":
        if field == "email":
            return "Invalid email address"
        if field == "productCatalog.link":
            return "Link must start with http:// or https://"
        return f"Invalid {name.lower()}"
    if kind == "too_short":
        return f"{name}: select at least one"
    if kind == "too_long":
        return f"{name}: too many entries (max {ctx.get('max_length')})"
    if kind in ("union_tag_invalid", "union_tag_not_found"):
        return f"Catalog type must be one of: {', '.join(CATALOG_TYPES)}"
    if kind == "value_error":
        return str(ctx.get("error") or error["msg"])
    return f"Invalid {name.lower()}: {error['msg']}"


def collect_field_errors(exc: ValidationError) -> list[FieldError]:
    """Fold pydantic errors to one FieldError per field path (first wins)."""
    field_errors: dict[str, FieldError] = {}
    for error in exc.errors():
        field = _field_path(tuple(error["loc"]))
        if field in field_errors:
            continue
        field_errors[field] = FieldError(
            field=field,
            label=field_label(field),
            message=_message_for(field, error),
        )
    return list(field_errors.values())


def validate_submission(
    raw: Any,
    max_product_images: int = DEFAULT_MAX_PRODUCT_IMAGES,
) -> SupplierSubmission:
    """
    Validate a decoded JSON payload.

    Args:
        raw: Decoded request body (any JSON value)
        max_product_images: Upper bound for productImages.files

    Returns:
        The trimmed, typed submission

    Raises:
        SubmissionValidationError: With one entry per violated field
    """
    if not isinstance(raw, dict):
        raise SubmissionValidationError([
            FieldError(
                field=BODY_FIELD,
                label=field_label(BODY_FIELD),
                message="Request body must be a JSON object",
            )
        ])

    try:
        return SupplierSubmission.model_validate(
            raw,
            context={"max_product_images": max_product_images},
        )
    except ValidationError as e:
        field_errors = collect_field_errors(e)
        logger.info(f"Validation failed for fields: {[fe.field for fe in field_errors]}")
        raise SubmissionValidationError(field_errors) from e
