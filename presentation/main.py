import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# --- Core Application Imports ---
from app.config import settings
from app.exceptions import BaseAppException
from infrastructure.utils.logging_config import logger
from infrastructure.middleware.logging_middleware import LoggingMiddleware, RequestIdLogFilter
from infrastructure.database.session import close_db_connections, create_db_and_tables
from infrastructure.external_services.factory import close_all_external_clients

# --- API Router Imports ---
from features.audio.presentation.api.v1.audio_api import router as audio_router
from features.favorites.presentation.api.v1.favorites_api import router as favorites_router

for _handler in logger.handlers:
    _handler.addFilter(RequestIdLogFilter())


# --- Application Lifespan Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles application startup and shutdown events."""
    logger.info(f"Starting up {settings.PROJECT_NAME} v{settings.VERSION} (Env: {settings.ENVIRONMENT})...")
    # Migrations own the schema in production; create_all is a no-op for existing tables.
    await create_db_and_tables()
    logger.info("Application startup sequence finished.")
    yield
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await close_all_external_clients()
    await close_db_connections()
    logger.info("Application shutdown complete.")


# --- FastAPI App Instance ---
openapi_url = f"{settings.API_PREFIX}/openapi.json" if settings.ENVIRONMENT != 'production' else None
docs_url = "/docs" if settings.ENVIRONMENT != 'production' else None
redoc_url = "/redoc" if settings.ENVIRONMENT != 'production' else None

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Searchable, paginated audio catalog with upload ingest to object storage.",
    version=settings.VERSION,
    openapi_url=openapi_url,
    docs_url=docs_url,
    redoc_url=redoc_url,
    lifespan=lifespan,
)

# --- Middleware Configuration (Order matters!) ---

# 1. CORS Middleware
if settings.CORS_ORIGINS_LIST:
    logger.info(f"Configuring CORS for origins: {settings.CORS_ORIGINS_LIST}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS_LIST,
        allow_credentials="*" not in settings.CORS_ORIGINS_LIST,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    logger.warning("CORS is not configured (CORS_ORIGINS not set). Cross-origin requests may be blocked.")

# 2. Logging Middleware (Adds request ID, logs summary)
app.add_middleware(LoggingMiddleware)

# 3. GZip Middleware (Compresses large responses)
app.add_middleware(GZipMiddleware, minimum_size=500)


# --- Custom Exception Handlers ---
# Every error body has the same envelope: {"success": false, "error": "<message>"}

def _error_response(status_code: int, message: Any, headers: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


@app.exception_handler(BaseAppException)
async def base_app_exception_handler(request: Request, exc: BaseAppException):
    req_id = getattr(request.state, 'request_id', None)
    lvl = logging.INFO if exc.status_code < 500 else logging.ERROR
    logger.log(lvl, f"Handled App Exception: {type(exc).__name__}({exc.status_code}) - {exc.detail}", extra={"request_id": req_id})
    return _error_response(exc.status_code, exc.detail, getattr(exc, 'headers', None))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    req_id = getattr(request.state, 'request_id', None)
    lvl = logging.WARNING if 400 <= exc.status_code < 500 else logging.ERROR
    logger.log(lvl, f"HTTPException: {exc.status_code} - {exc.detail}", extra={"request_id": req_id})
    return _error_response(exc.status_code, exc.detail, getattr(exc, 'headers', None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    req_id = getattr(request.state, 'request_id', None)
    error_summary = [{"loc": str(err.get("loc")), "msg": err.get("msg"), "type": err.get("type")} for err in exc.errors()]
    logger.warning("Request validation failed", extra={"request_id": req_id, "url": str(request.url), "method": request.method, "errors_summary": error_summary})
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form"))
        messages.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return _error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request")


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, 'request_id', None)
    logger.exception(f"Unhandled Server Exception (ID: {req_id})", exc_info=exc, extra={"request_id": req_id, "url": str(request.url), "method": request.method})
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# --- API Router Includes ---
app.include_router(audio_router, prefix=settings.API_PREFIX)
app.include_router(favorites_router, prefix=settings.API_PREFIX)


# --- Root Endpoint & Health Check ---
@app.get("/", tags=["_Service"], include_in_schema=False)
async def root_endpoint():
    """Redirects root path to API documentation (if enabled)."""
    if docs_url:
        return RedirectResponse(url=docs_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API!"}


@app.get("/health", tags=["_Service"], status_code=status.HTTP_200_OK)
async def health_check_endpoint() -> Dict[str, str]:
    return {"status": "ok", "version": settings.VERSION, "environment": settings.ENVIRONMENT}


# --- Main execution block (for development server) ---
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Uvicorn directly for development...")
    uvicorn.run(
        "presentation.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=(settings.ENVIRONMENT == "development"),
        log_config=None,
    )
