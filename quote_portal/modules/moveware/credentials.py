"""
Per-tenant Moveware credential lookup.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quote_portal.core.config import get_settings
from quote_portal.modules.companies.database import Company
from quote_portal.modules.observability.logging_config import get_logger

from .models import Credentials

logger = get_logger(__name__)


def get_credentials(db: Session, co_id: Optional[str]) -> Optional[Credentials]:
    """
    Resolve Moveware credentials for the company whose tenant id is `co_id`.

    Returns None when the tenant is unknown, has no credentials configured, or
    the lookup itself fails. Callers treat None as "no live data available".
    """
    if not co_id:
        return None

    try:
        company = db.query(Company).filter(Company.tenant_id == co_id).first()
    except SQLAlchemyError as e:
        logger.error(f"[Credentials] lookup failed for coId={co_id}: {e}")
        return None

    settings = company.branding_settings if company else None
    if not settings or not settings.mw_username or not settings.mw_password:
        return None

    return Credentials(
        co_id=company.tenant_id,
        username=settings.mw_username,
        password=settings.mw_password,
        base_url=get_settings().MOVEWARE_API_BASE_URL,
    )
