# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# - GET /health       : process is up, with version and environment
# - GET /health/live  : liveness check for restarts
# - GET /health/ready : can a submission be stored right now?
#
# Readiness answers 503 unless the suppliers table answers a query and every
# upload bucket exists, so a load balancer stops routing registrations to an
# instance that would fail them after the rate-limit slot is spent.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from app.config import API_VERSION, settings
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

OK = "ok"
MISSING = "missing"


class ServiceStatus(BaseModel):
    status: str
    version: str
    environment: str
    timestamp: str


class StorageReadiness(BaseModel):
    """Result of the storage checks: the table plus one entry per bucket."""
    status: str
    suppliers_table: str
    buckets: dict[str, str]
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _upload_buckets() -> list[str]:
    return [settings.LOGO_BUCKET, settings.PRODUCTS_BUCKET, settings.CATALOG_BUCKET]


def check_suppliers_table(client: Any) -> str:
    """Run a one-row select against the suppliers table."""
    try:
        client.table(settings.SUPPLIERS_TABLE).select("id").limit(1).execute()
    except Exception as e:
        logger.warning(f"Suppliers table check failed: {e}")
        return f"unreachable: {str(e)[:80]}"
    return OK


def check_upload_buckets(client: Any) -> dict[str, str]:
    """Map each upload bucket to "ok", "missing" or the listing error."""
    try:
        existing = {bucket.name for bucket in client.storage.list_buckets()}
    except Exception as e:
        logger.warning(f"Bucket listing failed: {e}")
        error = f"unreachable: {str(e)[:80]}"
        return {name: error for name in _upload_buckets()}

    return {name: OK if name in existing else MISSING for name in _upload_buckets()}


@router.get("/health", response_model=ServiceStatus)
async def health_check():
    return ServiceStatus(
        status="healthy",
        version=API_VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=ServiceStatus)
async def liveness_check():
    return ServiceStatus(
        status="alive",
        version=API_VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=_now(),
    )


@router.get("/health/ready", response_model=StorageReadiness)
def readiness_check(response: Response):
    """
    Check everything a submission writes to.

    Runs in the threadpool since the Supabase client blocks.
    """
    try:
        client = SupabaseClient.get_client()
    except Exception as e:
        error = f"unreachable: {str(e)[:80]}"
        table = error
        buckets = {name: error for name in _upload_buckets()}
    else:
        table = check_suppliers_table(client)
        buckets = check_upload_buckets(client)

    ready = table == OK and all(state == OK for state in buckets.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return StorageReadiness(
        status="ready" if ready else "not_ready",
        suppliers_table=table,
        buckets=buckets,
        timestamp=_now(),
    )
