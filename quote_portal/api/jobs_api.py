"""
Job endpoints backing the customer quote and review pages.

Each route resolves the tenant's Moveware credentials from `coId`, calls the
API and normalizes the answer. Routes that have demo data fall back to it
when credentials are missing or the call fails; the others answer 404 or 500.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quote_portal.core.dependencies import get_db, get_moveware_client_factory
from quote_portal.core.exceptions import MovewareError, NotFound, PortalException, ValidationFailed
from quote_portal.core.schemas import envelope
from quote_portal.modules.companies.service import CompanyService
from quote_portal.modules.moveware.client import ClientFactory
from quote_portal.modules.moveware.credentials import get_credentials
from quote_portal.modules.moveware.mock_data import MOCK_COSTINGS, MOCK_INVENTORY, MOCK_JOB_ID, MOCK_JOBS
from quote_portal.modules.moveware.models import Branding
from quote_portal.modules.moveware.normalizer import (
    adapt_inventory,
    adapt_job,
    adapt_options,
    adapt_quotation_measurements,
    adapt_quotation_options,
    normalize_questions,
)
from quote_portal.modules.observability.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])


def _require_job_id(job_id: str) -> str:
    job_id = job_id.strip()
    if not job_id:
        raise ValidationFailed("Job ID is required")
    return job_id


def _dump(models):
    return [m.model_dump(by_alias=True) for m in models]


@router.get("/{job_id}")
async def get_job(
    job_id: str,
    co_id: Optional[str] = Query(None, alias="coId"),
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    """Job details with the tenant's branding attached."""
    job_id = _require_job_id(job_id)
    branding = CompanyService(db).branding_for_tenant(co_id) or Branding()

    creds = get_credentials(db, co_id)
    if creds:
        try:
            async with client_factory(creds) as mw:
                raw = await mw.fetch_job(job_id)
            job = adapt_job(raw, branding)
            return envelope(job.model_dump(by_alias=True), source="moveware")
        except MovewareError as e:
            logger.error(f"[Jobs] job fetch failed for coId={co_id} job={job_id}, using mock: {e}")

    mock_job = MOCK_JOBS.get(job_id)
    if not mock_job:
        raise NotFound(f"Job {job_id} not found. Only mock job {MOCK_JOB_ID} is available.")

    job = mock_job.model_copy(update={"branding": branding})
    return envelope(job.model_dump(by_alias=True), source="mock")


@router.post("/{job_id}/sync")
async def sync_job(job_id: str, co_id: Optional[str] = Query(None, alias="coId")):
    job_id = _require_job_id(job_id)
    # TODO: pull the live job and persist it locally once jobs are stored
    logger.info(f"[Sync] Job {job_id} sync requested for coId={co_id} (mock mode, no upstream call)")
    return envelope(source="mock", message=f"Job {job_id} is up to date (mock data mode).")


@router.get("/{job_id}/inventory")
async def get_inventory(
    job_id: str,
    co_id: Optional[str] = Query(None, alias="coId"),
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    job_id = _require_job_id(job_id)

    creds = get_credentials(db, co_id)
    if creds:
        try:
            async with client_factory(creds) as mw:
                raw = await mw.fetch_inventory(job_id)
            items = adapt_inventory(raw)
            return envelope(_dump(items), source="moveware", count=len(items))
        except MovewareError as e:
            logger.error(f"[Jobs] inventory fetch failed for coId={co_id} job={job_id}, using mock: {e}")

    items = MOCK_INVENTORY.get(job_id)
    if items is None:
        raise NotFound(
            f"No inventory found for job {job_id}. Only mock job {MOCK_JOB_ID} is available "
            "when no API credentials are configured."
        )
    return envelope(_dump(items), source="mock", count=len(items))


@router.get("/{job_id}/quotations/{quote_id}")
async def get_quotation(
    job_id: str,
    quote_id: str,
    co_id: Optional[str] = Query(None, alias="coId"),
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    """
    Pricing options and measurements from one quotation payload.

    Measurements are returned beside the costings array, never inside it.
    """
    job_id = _require_job_id(job_id)
    if not quote_id.strip():
        raise ValidationFailed("jobId and quoteId are required")

    creds = get_credentials(db, co_id)
    if creds:
        try:
            async with client_factory(creds) as mw:
                raw = await mw.fetch_quotation_options(job_id, quote_id)
            costings = adapt_quotation_options(raw)
            measurements = adapt_quotation_measurements(raw)
            return envelope(
                _dump(costings),
                source="moveware",
                count=len(costings),
                measurements=measurements.model_dump(by_alias=True),
            )
        except MovewareError as e:
            logger.error(f"[Jobs] quotation fetch failed for coId={co_id} job={job_id} quote={quote_id}: {e}")

    raise NotFound(
        f"No data found for job {job_id} quotation {quote_id}. "
        "Configure Moveware API credentials in Settings to load live data."
    )


@router.get("/{job_id}/costings")
async def get_costings(
    job_id: str,
    co_id: Optional[str] = Query(None, alias="coId"),
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    """Costings from the older /options?include=charges endpoint."""
    job_id = _require_job_id(job_id)

    creds = get_credentials(db, co_id)
    if creds:
        try:
            async with client_factory(creds) as mw:
                raw = await mw.fetch_options(job_id)
            costings = adapt_options(raw)
            return envelope(_dump(costings), source="moveware", count=len(costings))
        except MovewareError as e:
            logger.error(f"[Jobs] options fetch failed for coId={co_id} job={job_id}, using mock: {e}")

    costings = MOCK_COSTINGS.get(job_id)
    if costings is None:
        raise NotFound(f"No costings found for job {job_id}")
    return envelope(_dump(costings), source="mock", count=len(costings))


@router.get("/{job_id}/questions")
async def get_questions(
    job_id: str,
    co_id: Optional[str] = Query(None, alias="coId"),
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    job_id = _require_job_id(job_id)

    creds = get_credentials(db, co_id)
    if not creds:
        raise NotFound("No credentials found for coId")

    try:
        async with client_factory(creds) as mw:
            raw = await mw.fetch_questions(job_id)
    except MovewareError as e:
        logger.error(f"[Jobs] questions fetch failed for coId={co_id} job={job_id}: {e}")
        raise PortalException("Failed to fetch questions") from e

    questions = normalize_questions(raw)
    return envelope(_dump(questions), source="moveware", count=len(questions))


@router.get("/{job_id}/reviews")
async def get_reviews(
    job_id: str,
    co_id: Optional[str] = Query(None, alias="coId"),
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    """Review records exactly as Moveware returns them."""
    job_id = _require_job_id(job_id)

    creds = get_credentials(db, co_id)
    if not creds:
        raise NotFound("No credentials found for coId")

    try:
        async with client_factory(creds) as mw:
            raw = await mw.fetch_reviews(job_id)
    except MovewareError as e:
        logger.error(f"[Jobs] reviews fetch failed for coId={co_id} job={job_id}: {e}")
        raise PortalException("Failed to fetch reviews") from e

    return envelope(raw, source="moveware")
