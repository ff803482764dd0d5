"""
Company management endpoints.

Listing and creating are scoped to the tenant named in the X-Tenant-Id header.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from quote_portal.core.dependencies import get_db
from quote_portal.core.exceptions import Unauthorized
from quote_portal.core.schemas import BrandingUpdate, CompanyCreate, CompanyUpdate, envelope
from quote_portal.modules.companies.service import DEFAULT_PAGE_SIZE, CompanyService

router = APIRouter(prefix="/api/companies", tags=["Companies"])


def require_tenant(x_tenant_id: Optional[str] = Header(None)) -> str:
    if not x_tenant_id or not x_tenant_id.strip():
        raise Unauthorized("Unauthorized: Tenant ID is required")
    return x_tenant_id.strip()


@router.get("")
async def list_companies(
    page: int = Query(1),
    limit: int = Query(DEFAULT_PAGE_SIZE),
    tenant_id: str = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    """Companies for the tenant, active first, at most 100 per page."""
    return envelope(CompanyService(db).list_companies(tenant_id, page, limit), source="local")


@router.post("", status_code=201)
async def create_company(
    payload: CompanyCreate,
    tenant_id: str = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    company = CompanyService(db).create_company(tenant_id, payload.model_dump())
    return envelope(company.to_dict(), source="local")


@router.get("/{company_id}")
async def get_company(company_id: str, db: Session = Depends(get_db)):
    company = CompanyService(db).get_company(company_id)
    data = company.to_dict()
    data["brandingSettings"] = company.branding_settings.to_dict() if company.branding_settings else None
    return envelope(data, source="local")


@router.put("/{company_id}")
async def update_company(company_id: str, payload: CompanyUpdate, db: Session = Depends(get_db)):
    company = CompanyService(db).update_company(company_id, payload.model_dump(exclude_unset=True))
    return envelope(company.to_dict(), source="local")


@router.delete("/{company_id}")
async def delete_company(company_id: str, db: Session = Depends(get_db)):
    CompanyService(db).delete_company(company_id)
    return envelope(message="Company deleted successfully")


@router.get("/{company_id}/settings")
async def get_company_settings(company_id: str, db: Session = Depends(get_db)):
    return envelope(CompanyService(db).get_branding(company_id), source="local")


@router.put("/{company_id}/settings")
async def update_company_settings(company_id: str, payload: BrandingUpdate, db: Session = Depends(get_db)):
    """Moveware credentials can be set here but are never echoed back."""
    data = CompanyService(db).update_branding(company_id, payload.model_dump(exclude_unset=True))
    return envelope(data, source="local")
