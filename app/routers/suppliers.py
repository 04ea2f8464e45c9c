# =============================================================================
# app/routers/suppliers.py - Supplier Registration Endpoints
# =============================================================================
# Public endpoints used by the registration form:
# - POST    /submit-supplier : register a supplier
# - OPTIONS /submit-supplier : CORS preflight
# - GET     /form-options    : choices and limits the form should enforce
# =============================================================================

import logging

from fastapi import APIRouter, Request, Response
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.dependencies import PipelineDep
from core.models.supplier import (
    ACTIVITY_AREAS,
    CATALOG_TYPES,
    CATEGORIES,
    FormOptionsResponse,
    SubmissionResponse,
)
from core.services.file_inspector import CATALOG_MIME_TYPES, IMAGE_MIME_TYPES
from lib.utils import client_identifier

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


# =============================================================================
# Endpoints
# =============================================================================

@router.options("/submit-supplier", include_in_schema=False)
async def submit_supplier_preflight():
    """CORS handshake: headers only, no body."""
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post(
    "/submit-supplier",
    response_model=SubmissionResponse,
    response_model_by_alias=True,
)
async def submit_supplier(request: Request, pipeline: PipelineDep):
    """
    Register a supplier.

    The JSON body is validated, files are checked and uploaded, the record
    is saved as pending, and the team and the supplier are emailed.

    Responses:
    - 200: {"success": true, "message": ..., "supplierId": ...}
    - 400: invalid fields or files, with per-field details
    - 429: too many submissions from this client
    - 500: processing failed
    """
    body = await request.body()
    client_id = client_identifier(request.headers)

    # Storage, database and email calls block; keep them off the event loop
    receipt = await run_in_threadpool(pipeline.process, body, client_id)

    return SubmissionResponse(supplier_id=receipt.supplier_id)


@router.get("/form-options", response_model=FormOptionsResponse, response_model_by_alias=True)
async def form_options():
    """
    Choices and limits for the registration form.

    The form should use these rather than its own copies, so client-side
    checks match what the server enforces.
    """
    return FormOptionsResponse(
        categories=list(CATEGORIES),
        activity_areas=list(ACTIVITY_AREAS),
        image_types=list(IMAGE_MIME_TYPES),
        catalog_types=list(CATALOG_TYPES),
        catalog_file_types=list(CATALOG_MIME_TYPES),
        max_file_size_mb=settings.MAX_FILE_SIZE_MB,
        max_product_images=settings.MAX_PRODUCT_IMAGES,
    )
