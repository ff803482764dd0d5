from .database import (
    BrandingSettings,
    Company,
    DatabaseManager,
    QuoteAcceptance,
    ReviewSubmission,
    get_db_manager,
    set_db_manager,
)
from .service import CompanyService

__all__ = [
    "BrandingSettings",
    "Company",
    "DatabaseManager",
    "QuoteAcceptance",
    "ReviewSubmission",
    "get_db_manager",
    "set_db_manager",
    "CompanyService",
]
