"""FastAPI application exposing scrapeability checks over HTTP."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from playwright.async_api import Browser
from pydantic import BaseModel, Field, ValidationError

from .. import __version__
from ..config import get_settings
from ..core import BrowserManager, InvalidUrlError, check_page_scrapeability, resolve_check_url
from ..models.schemas import CheckResult, DetectionToggles

logger = logging.getLogger(__name__)

# Shared browser; every check still opens its own page
browser_manager: Optional[BrowserManager] = None
_browser_lock = asyncio.Lock()
_check_semaphore: Optional[asyncio.Semaphore] = None


class CheckRequest(BaseModel):
    """API request to check one URL."""
    url: str = Field(..., description="URL to check (https:// is added if missing)")
    timeout: Optional[int] = Field(None, description="Navigation timeout in ms")
    screenshot_enabled: Optional[bool] = Field(None, description="Capture a screenshot")
    check_console_errors: Optional[bool] = Field(None, description="Capture console errors")
    detections: Optional[DetectionToggles] = Field(None, description="Detectors to run")


def _configure_logging() -> None:
    settings = get_settings()
    handlers = [logging.StreamHandler()]
    log_file = settings.get_log_file_path()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )


async def get_browser() -> Browser:
    """Return the shared browser, launching it on first use."""
    global browser_manager
    async with _browser_lock:
        if browser_manager is None:
            browser_manager = BrowserManager()
        return await browser_manager.start()


def get_check_semaphore() -> asyncio.Semaphore:
    """Bound the number of pages open at once."""
    global _check_semaphore
    if _check_semaphore is None:
        _check_semaphore = asyncio.Semaphore(get_settings().max_concurrent_checks)
    return _check_semaphore


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    global browser_manager

    _configure_logging()
    logger.info("Starting Scrapeability API...")

    yield

    logger.info("Shutting down Scrapeability API...")
    if browser_manager is not None:
        await browser_manager.close()
        browser_manager = None
    logger.info("Scrapeability API shut down complete")


app = FastAPI(
    title="Scrapeability",
    description="Check whether a web page can be reliably scraped",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Scrapeability",
        "version": __version__,
        "description": "Check whether a web page can be reliably scraped",
        "docs": "/docs",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "browser_running": browser_manager is not None and browser_manager.is_running,
    }


@app.get("/config", response_model=Dict[str, Any])
async def get_config():
    """Effective check configuration."""
    settings = get_settings()
    return {
        "check_options": settings.get_check_options().model_dump(mode="json"),
        "server": settings.get_server_config(),
        "logging": {
            "log_level": settings.log_level,
            "log_file": settings.log_file,
        },
    }


@app.post("/check", response_model=CheckResult, response_model_exclude_none=True)
async def check_url(request: CheckRequest):
    """
    Check one URL and return the full result.

    Navigation failures are reported in the result body with
    ``success: false``; only invalid input produces an error status.
    """
    try:
        url = resolve_check_url(request.url)
    except InvalidUrlError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        options = get_settings().get_check_options(
            timeout=request.timeout,
            screenshot_enabled=request.screenshot_enabled,
            check_console_errors=request.check_console_errors,
            detections=request.detections,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        browser = await get_browser()
    except Exception as e:
        logger.error(f"Browser unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    async with get_check_semaphore():
        return await check_page_scrapeability(browser, url, options)


@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Custom 500 handler."""
    logger.error(f"Internal server error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An internal server error occurred",
            "details": "Check server logs for more information",
        },
    )
