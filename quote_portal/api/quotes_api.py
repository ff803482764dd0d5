"""
Online quote acceptance.
"""

import asyncio
import time
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quote_portal.core.dependencies import get_db, get_moveware_client_factory
from quote_portal.core.exceptions import ValidationFailed
from quote_portal.core.schemas import envelope
from quote_portal.modules.companies.database import QuoteAcceptance
from quote_portal.modules.moveware.acceptance import QuoteAcceptanceRequest, build_acceptance_notes
from quote_portal.modules.moveware.client import ClientFactory, JobActivity
from quote_portal.modules.moveware.credentials import get_credentials
from quote_portal.modules.observability.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])


@router.post("/accept")
async def accept_quote(
    request: QuoteAcceptanceRequest,
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    """
    Record a signed quote.

    Moveware gets a diary activity and, when a quoteId is given, the
    quotation is marked Accepted. Both calls run concurrently and neither
    failure blocks the customer: errors come back as `mwErrors`.
    """
    missing = request.missing_fields()
    if missing:
        raise ValidationFailed(f"Missing required fields: {', '.join(missing)}")
    if not request.agreed_to_terms:
        raise ValidationFailed("You must agree to the terms and conditions")

    job_id = request.job_id
    co_id = request.co_id
    quote_number = request.quote_number or job_id
    signature_name = request.signature_name or request.customer_name or "Accepted"
    accepted_at = datetime.now()
    logger.info(f"[Accept] Quote acceptance for coId={co_id} job={job_id} quote={request.quote_id or '-'}")

    mw_errors = []
    creds = get_credentials(db, co_id) if co_id and job_id else None

    if creds:
        activity = JobActivity(
            job_id=job_id,
            branch_code=request.branch_code,
            accepted_at=accepted_at,
            accepted_options_summary=build_acceptance_notes(request),
        )

        async with client_factory(creds) as mw:
            calls = {"Activity POST": mw.post_job_activity(job_id, activity)}
            if request.quote_id:
                calls["Quotation PATCH"] = mw.patch_quote_acceptance(
                    job_id, request.quote_id, accepted_at.strftime("%Y-%m-%d")
                )
            else:
                logger.warning(f"[Accept] No quoteId for job={job_id}; skipping quotation PATCH")

            outcomes = await asyncio.gather(*calls.values(), return_exceptions=True)

        for label, outcome in zip(calls, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"[Accept] Moveware {label} failed for coId={co_id} job={job_id}: {outcome}")
                mw_errors.append(f"{label}: {outcome}")
            else:
                logger.info(f"[Accept] Moveware {label} succeeded for job={job_id}")
    elif co_id and job_id:
        logger.warning(f"[Accept] No Moveware credentials for coId={co_id}; skipping write-back")
    else:
        logger.warning("[Accept] Missing coId/jobId; skipping Moveware write-back")

    local_id = f"mw-{job_id}-{int(time.time() * 1000)}"
    try:
        record = QuoteAcceptance(
            job_id=job_id or quote_number,
            quote_id=request.quote_id or None,
            co_id=co_id or None,
            signature_name=signature_name,
            selected_option_id=request.selected_costing.id if request.selected_costing else None,
            notes=build_acceptance_notes(request),
            accepted_at=accepted_at,
        )
        db.add(record)
        db.commit()
        local_id = record.id
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"[Accept] Local save failed for job={job_id} (non-blocking): {e}")

    return envelope({"id": local_id}, message="Quote accepted successfully", mwErrors=mw_errors or None)
