"""
Customer review submission.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quote_portal.core.dependencies import get_db, get_moveware_client_factory
from quote_portal.core.exceptions import MovewareError, ValidationFailed
from quote_portal.core.schemas import ReviewSubmitRequest, envelope
from quote_portal.modules.companies.database import ReviewSubmission
from quote_portal.modules.moveware.client import ClientFactory
from quote_portal.modules.moveware.credentials import get_credentials
from quote_portal.modules.observability.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/review", tags=["Reviews"])


@router.post("/submit")
async def submit_review(
    request: ReviewSubmitRequest,
    db: Session = Depends(get_db),
    client_factory: ClientFactory = Depends(get_moveware_client_factory),
):
    """
    Save a review locally, then copy it to Moveware.

    The Moveware write-back is best effort: a failure is reported as
    `mwError` next to a successful response.
    """
    if not request.token or not request.answers:
        raise ValidationFailed("Missing required fields: token and answers")

    submission = ReviewSubmission(
        job_id=request.job_id,
        token=request.token,
        company_id=request.company_id,
        answers=request.answers,
    )
    db.add(submission)
    db.commit()

    answers_count = len(request.answers) if isinstance(request.answers, (list, dict)) else 1
    logger.info(f"[Review] Saved {submission.id} for job={request.job_id} ({answers_count} answers)")

    mw_error = None
    if request.job_id and request.company_id:
        creds = get_credentials(db, request.company_id)
        if creds:
            payload = {
                "reviewTypes": request.review_types,
                "answers": request.answers,
                "token": request.token,
                "submittedAt": submission.submitted_at.isoformat(),
            }
            try:
                async with client_factory(creds) as mw:
                    await mw.post_review(request.job_id, payload)
                logger.info(f"[Review] Moveware write-back succeeded for coId={request.company_id} job={request.job_id}")
            except MovewareError as e:
                mw_error = e.message
                logger.error(f"[Review] Moveware write-back failed for coId={request.company_id} job={request.job_id}: {e}")
        else:
            logger.warning(f"[Review] No Moveware credentials for coId={request.company_id}")

    return envelope(submissionId=submission.id, message="Review submitted successfully", mwError=mw_error)
