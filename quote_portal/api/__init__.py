"""
API route handlers.
"""

from .health_api import router as health_router
from .jobs_api import router as jobs_router
from .debug_api import router as debug_router
from .bot_api import router as bot_router
from .companies_api import router as companies_router
from .review_api import router as review_router
from .quotes_api import router as quotes_router

__all__ = [
    "health_router",
    "jobs_router",
    "debug_router",
    "bot_router",
    "companies_router",
    "review_router",
    "quotes_router",
]
