"""
Company Service

Tenant-scoped CRUD for companies and their branding settings.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from quote_portal.core.exceptions import NotFound, ValidationFailed
from quote_portal.modules.moveware.models import Branding
from quote_portal.modules.observability.logging_config import get_logger

from .database import BrandingSettings, Company
from .validation import format_validation_errors, validate_color, validate_company_data, validate_logo_url

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

COMPANY_FIELDS = (
    "name",
    "brand_code",
    "primary_color",
    "secondary_color",
    "tertiary_color",
    "logo_url",
    "hero_content",
    "copy_content",
    "is_active",
)

BRANDING_FIELDS = (
    "logo_url",
    "hero_banner_url",
    "footer_image_url",
    "primary_color",
    "secondary_color",
    "font_family",
    "inventory_weight_unit",
    "footer_bg_color",
    "footer_text_color",
    "footer_address_line1",
    "footer_address_line2",
    "footer_phone",
    "footer_email",
    "footer_abn",
    "mw_username",
    "mw_password",
)

DEFAULT_BRANDING = {
    "logoUrl": None,
    "primaryColor": "#2563eb",
    "secondaryColor": "#1e40af",
    "fontFamily": "Inter",
    "inventoryWeightUnit": "kg",
    "hasMovewareCredentials": False,
}


def clamp_pagination(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    """page >= 1, 1 <= limit <= 100."""
    page = max(1, page if page is not None else 1)
    limit = min(MAX_PAGE_SIZE, max(1, limit if limit is not None else DEFAULT_PAGE_SIZE))
    return page, limit


def _raise_if_invalid(errors: List[Dict[str, str]]):
    if errors:
        formatted = format_validation_errors(errors)
        raise ValidationFailed(formatted["message"], {"fields": formatted["fields"]})


class CompanyService:
    """Company and branding persistence for one database session."""

    def __init__(self, db: Session):
        self.db = db

    # Companies

    def list_companies(self, tenant_id: str, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
        """
        List a tenant's companies, active first then by name.

        Returns:
            {"companies": [...], "pagination": {page, limit, total, totalPages}}
        """
        page, limit = clamp_pagination(page, limit)
        query = self.db.query(Company).filter(Company.tenant_id == tenant_id.strip())

        total = query.count()
        companies = (
            query.order_by(Company.is_active.desc(), Company.name.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return {
            "companies": [c.to_dict() for c in companies],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": (total + limit - 1) // limit,
            },
        }

    def get_company(self, company_id: str) -> Company:
        company = self.db.query(Company).filter(Company.id == company_id).first()
        if not company:
            raise NotFound("Company not found")
        return company

    def _brand_code_taken(self, brand_code: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Company).filter(func.lower(Company.brand_code) == brand_code.strip().lower())
        if exclude_id:
            query = query.filter(Company.id != exclude_id)
        return query.first() is not None

    def create_company(self, tenant_id: str, data: Dict[str, Any]) -> Company:
        _raise_if_invalid(validate_company_data(data))

        if self._brand_code_taken(data["brand_code"]):
            raise ValidationFailed("A company with this brand code already exists")

        values = {
            k: v.strip() if isinstance(v, str) else v
            for k, v in data.items()
            if k in COMPANY_FIELDS and v is not None
        }
        company = Company(tenant_id=tenant_id.strip(), **values)
        self.db.add(company)
        self.db.commit()
        logger.info(f"[Companies] Created {company.id} ({company.brand_code}) for tenant {company.tenant_id}")
        return company

    def update_company(self, company_id: str, data: Dict[str, Any]) -> Company:
        company = self.get_company(company_id)
        _raise_if_invalid(validate_company_data(data, partial=True))

        if data.get("brand_code") and self._brand_code_taken(data["brand_code"], exclude_id=company.id):
            raise ValidationFailed("A company with this brand code already exists")

        for key, value in data.items():
            if key in COMPANY_FIELDS:
                setattr(company, key, value.strip() if isinstance(value, str) else value)

        self.db.commit()
        logger.info(f"[Companies] Updated {company.id}")
        return company

    def delete_company(self, company_id: str):
        company = self.get_company(company_id)
        self.db.delete(company)
        self.db.commit()
        logger.info(f"[Companies] Deleted {company_id}")

    # Branding settings

    def get_branding(self, company_id: str) -> Dict[str, Any]:
        """Stored settings, or defaults when the company has none yet."""
        company = self.get_company(company_id)
        if not company.branding_settings:
            return {"companyId": company.id, **DEFAULT_BRANDING}
        return company.branding_settings.to_dict()

    def update_branding(self, company_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or update a company's branding settings.

        Only keys present in `data` are written. Moveware credentials are
        accepted here but never returned.
        """
        company = self.get_company(company_id)

        errors = []
        for color_field in ("primary_color", "secondary_color", "footer_bg_color", "footer_text_color"):
            errors.extend(validate_color(data.get(color_field), color_field))
        for url_field in ("logo_url", "hero_banner_url", "footer_image_url"):
            errors.extend(validate_logo_url(data.get(url_field), url_field))
        unit = data.get("inventory_weight_unit")
        if unit is not None and unit not in ("kg", "lbs"):
            errors.append({"field": "inventory_weight_unit", "message": "Weight unit must be kg or lbs"})
        _raise_if_invalid(errors)

        settings = company.branding_settings
        if settings is None:
            settings = BrandingSettings(company_id=company.id, font_family="Inter", inventory_weight_unit="kg")
            company.branding_settings = settings

        for key, value in data.items():
            if key in BRANDING_FIELDS:
                setattr(settings, key, value)

        self.db.commit()
        logger.info(f"[Companies] Updated branding for {company.id}")
        return settings.to_dict()

    def branding_for_tenant(self, co_id: Optional[str]) -> Optional[Branding]:
        """Branding block for the job page of tenant `co_id`, if configured."""
        if not co_id:
            return None

        company = self.db.query(Company).filter(Company.tenant_id == co_id).first()
        if not company:
            return None

        settings = company.branding_settings
        values = {
            "company_name": company.name,
            "logo_url": (settings.logo_url if settings else None) or company.logo_url,
            "primary_color": (settings.primary_color if settings else None) or company.primary_color,
            "secondary_color": (settings.secondary_color if settings else None) or company.secondary_color,
        }
        if settings:
            values.update({
                "hero_banner_url": settings.hero_banner_url,
                "footer_image_url": settings.footer_image_url,
                "font_family": settings.font_family,
                "inventory_weight_unit": settings.inventory_weight_unit,
                "footer_bg_color": settings.footer_bg_color,
                "footer_text_color": settings.footer_text_color,
                "footer_address_line1": settings.footer_address_line1,
                "footer_address_line2": settings.footer_address_line2,
                "footer_phone": settings.footer_phone,
                "footer_email": settings.footer_email,
                "footer_abn": settings.footer_abn,
            })

        return Branding(**{k: v for k, v in values.items() if v})
