"""
Debug endpoint exposing raw Moveware responses for a job.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quote_portal.core.dependencies import get_db, get_moveware_client_factory
from quote_portal.core.exceptions import NotFound, ValidationFailed
from quote_portal.modules.moveware.client import ClientFactory
from quote_portal.modules.moveware.credentials import get_credentials

router = APIRouter(prefix="/api/debug", tags=["Debug"])


@router.get("/mw-raw")
async def moveware_raw(
    job_id: Optional[str] = Query(None, alias="jobId"),
    co_id: Optional[str] = Query(None, alias="coId"),
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    """
    Fetch quotation, options and inventory side by side.

    A failed branch appears as `<name>Error`; the others still come back.
    """
    if not job_id or not co_id:
        raise ValidationFailed("jobId and coId query params are required")

    creds = get_credentials(db, co_id)
    if not creds:
        raise NotFound(
            f"No Moveware API credentials found for coId={co_id}. "
            "Configure them in Settings > Companies > API Credentials."
        )

    async with client_factory(creds) as mw:
        bundle = await mw.fetch_job_bundle(job_id)

    return {"coId": co_id, "jobId": job_id, "baseUrl": creds.base_url, **bundle}
