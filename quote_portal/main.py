"""
FastAPI application entry point.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from quote_portal.api import (
    bot_router,
    companies_router,
    debug_router,
    health_router,
    jobs_router,
    quotes_router,
    review_router,
)
from quote_portal.core.config import get_settings
from quote_portal.core.exceptions import PortalException
from quote_portal.core.schemas import error_envelope
from quote_portal.modules.assistant.workflow import get_workflow_service
from quote_portal.modules.companies.database import get_db_manager
from quote_portal.modules.observability.logging_config import get_logger, setup_logging

settings = get_settings()

# Initialize logging
setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Moveware Quote Portal Backend - Moveware API proxy, tenant branding and chat bot",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalException)
async def portal_exception_handler(request: Request, exc: PortalException):
    if exc.status_code >= 500:
        logger.error(f"[API] {request.method} {request.url.path} failed: {exc.message}")
    fields = exc.details.get("fields") if isinstance(exc.details, dict) else None
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message, fields=fields))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query params answer 400 with a field -> message map."""
    fields = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        fields[".".join(loc) or "request"] = error.get("msg", "Invalid value")
    logger.warning(f"[API] {request.method} {request.url.path} rejected: {fields}")
    return JSONResponse(status_code=400, content=error_envelope("Invalid request", fields=fields))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[API] {request.method} {request.url.path} crashed: {exc}")
    return JSONResponse(status_code=500, content=error_envelope("Internal server error"))


app.include_router(health_router)
app.include_router(jobs_router)
app.include_router(debug_router)
app.include_router(bot_router)
app.include_router(companies_router)
app.include_router(review_router)
app.include_router(quotes_router)


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.on_event("startup")
async def startup_event():
    print(f"[{settings.APP_NAME}] Starting up...")
    print(f"  Version: {settings.APP_VERSION}")
    print(f"  Environment: {settings.ENVIRONMENT}")
    print(f"  Debug: {settings.DEBUG}")
    print(f"  Host: {settings.HOST}:{settings.PORT}")
    print(f"  Moveware API: {settings.MOVEWARE_API_BASE_URL}")

    get_db_manager()
    get_workflow_service()

    print(f"[{settings.APP_NAME}] Ready!")


@app.on_event("shutdown")
async def shutdown_event():
    print(f"[{settings.APP_NAME}] Shutting down...")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "quote_portal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
