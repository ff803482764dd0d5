"""
Database layer for tenants, branding and customer submissions.

SQLite by default (DATABASE_URL); any SQLAlchemy URL works.
"""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from quote_portal.core.config import get_settings
from quote_portal.modules.observability.logging_config import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class Company(Base):
    """A tenant. tenant_id is the Moveware coId."""
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(100), index=True)
    name = Column(String(255), nullable=False)
    brand_code = Column(String(50), nullable=False, unique=True)
    primary_color = Column(String(7), default="#2563eb")
    secondary_color = Column(String(7), default="#1e40af")
    tertiary_color = Column(String(7), default="#60a5fa")
    logo_url = Column(String(500))
    hero_content = Column(Text)
    copy_content = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    branding_settings = relationship(
        "BrandingSettings",
        back_populates="company",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "tenantId": self.tenant_id,
            "name": self.name,
            "brandCode": self.brand_code,
            "primaryColor": self.primary_color,
            "secondaryColor": self.secondary_color,
            "tertiaryColor": self.tertiary_color,
            "logoUrl": self.logo_url,
            "heroContent": self.hero_content,
            "copyContent": self.copy_content,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class BrandingSettings(Base):
    """Theme and Moveware credentials for one company."""
    __tablename__ = "branding_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(String(36), ForeignKey("companies.id"), unique=True, nullable=False)
    logo_url = Column(String(500))
    hero_banner_url = Column(String(500))
    footer_image_url = Column(String(500))
    primary_color = Column(String(7))
    secondary_color = Column(String(7))
    font_family = Column(String(100))
    inventory_weight_unit = Column(String(3), default="kg")
    footer_bg_color = Column(String(7))
    footer_text_color = Column(String(7))
    footer_address_line1 = Column(String(255))
    footer_address_line2 = Column(String(255))
    footer_phone = Column(String(50))
    footer_email = Column(String(255))
    footer_abn = Column(String(50))
    mw_username = Column(String(255))
    mw_password = Column(String(500))
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = relationship("Company", back_populates="branding_settings")

    def to_dict(self):
        # credentials are write-only; only report whether they are configured
        return {
            "companyId": self.company_id,
            "logoUrl": self.logo_url,
            "heroBannerUrl": self.hero_banner_url,
            "footerImageUrl": self.footer_image_url,
            "primaryColor": self.primary_color,
            "secondaryColor": self.secondary_color,
            "fontFamily": self.font_family,
            "inventoryWeightUnit": self.inventory_weight_unit or "kg",
            "footerBgColor": self.footer_bg_color,
            "footerTextColor": self.footer_text_color,
            "footerAddressLine1": self.footer_address_line1,
            "footerAddressLine2": self.footer_address_line2,
            "footerPhone": self.footer_phone,
            "footerEmail": self.footer_email,
            "footerAbn": self.footer_abn,
            "hasMovewareCredentials": bool(self.mw_username and self.mw_password),
        }


class ReviewSubmission(Base):
    __tablename__ = "review_submissions"

    id = Column(String(36), primary_key=True, default=_uuid)
    job_id = Column(String(50), index=True)
    token = Column(String(255), nullable=False)
    company_id = Column(String(100))
    answers = Column(JSON, nullable=False)
    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class QuoteAcceptance(Base):
    __tablename__ = "quote_acceptances"

    id = Column(String(36), primary_key=True, default=_uuid)
    job_id = Column(String(50), index=True)
    quote_id = Column(String(50))
    co_id = Column(String(100))
    signature_name = Column(String(255))
    selected_option_id = Column(String(100))
    notes = Column(Text)
    accepted_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class DatabaseManager:
    """Owns the engine and session factory."""

    def __init__(self, database_url: Optional[str] = None):
        if database_url is None:
            database_url = get_settings().DATABASE_URL

        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            Path(database_url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)

        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.database_url = database_url
        self.engine = create_engine(database_url, connect_args=connect_args)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.info(f"[DB] Connected: {self.engine.url.render_as_string(hide_password=True)}")

    def get_session(self):
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def set_db_manager(manager: Optional[DatabaseManager]):
    """Swap the global manager (tests point it at a temporary database)."""
    global _db_manager
    _db_manager = manager
