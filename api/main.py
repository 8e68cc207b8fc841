#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for the Markdown to DOCX converter.

Usage:
    # Start server
    uvicorn api.main:app --host 0.0.0.0 --port 8000

    # Or run directly
    python -m api.main

API Documentation:
    - OpenAPI docs: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc

Key Endpoints:
    POST /api/convert - Convert a JSON markdown payload to DOCX
    POST /api/convert/file - Convert an uploaded .md/.markdown file to DOCX
    GET /health - Health check

Configuration:
    Environment variables (see config/settings.py):
    - RATE_LIMIT: API rate limit (default: "60/minute")
    - MAX_MARKDOWN_SIZE_KB: Max markdown payload size (default: 2048)
    - DEFAULT_FONT_SIZE: Base body font size in points (optional)
    - LIST_LEVEL_OVERFLOW: clamp / cycle
"""

from fastapi import FastAPI, Request, UploadFile, File, Form
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from pydantic import BaseModel, Field
from typing import Any, Optional
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from pathlib import Path
from urllib.parse import quote
import sys
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.constants import (
    DEFAULT_DOWNLOAD_NAME,
    DOCX_MEDIA_TYPE,
    MARKDOWN_EXTENSIONS,
    MAX_FONT_SIZE_PT,
    MIN_FONT_SIZE_PT,
)
from config.settings import settings
from core.converter import convert_markdown, derive_download_name
from core.errors import ConversionError, InvalidInputError

from config.logging_config import get_logger
logger = get_logger(__name__)


# =============================================================================
# Pydantic Models for API
# =============================================================================

class ConvertRequest(BaseModel):
    """Request model for JSON conversion"""
    # Typed loosely so a missing or non-string payload reaches the
    # converter's own validation (400) instead of a 422
    markdown: Optional[Any] = Field(default=None, description="Markdown source text")
    filename: Optional[str] = Field(default=None, description="Source file name, used to derive the download name")
    font_size: Optional[float] = Field(
        default=None,
        ge=MIN_FONT_SIZE_PT,
        le=MAX_FONT_SIZE_PT,
        description="Base body font size in points (8-20)",
    )


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="REST API converting Markdown to Word (DOCX) documents",
    version="1.0.0"
)

# Rate limiting (configurable via RATE_LIMIT env var)
# Default: 60 requests per minute per IP
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit]
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# =============================================================================
# Helpers
# =============================================================================

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _too_large(markdown: Any) -> bool:
    if not isinstance(markdown, str):
        return False
    return len(markdown.encode("utf-8")) > settings.max_markdown_size_kb * 1024


def _content_disposition(download_name: str) -> str:
    # Header values must be latin-1; non-ASCII names go in filename* (RFC 6266)
    fallback = "".join(c for c in download_name if " " <= c <= "~" and c not in '"\\')
    if fallback == download_name:
        return f'attachment; filename="{download_name}"'
    if not fallback.strip() or fallback.startswith("."):
        fallback = DEFAULT_DOWNLOAD_NAME
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(download_name)}"


def _docx_response(data: bytes, download_name: str) -> Response:
    return Response(
        content=data,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(download_name)},
    )


def _convert(markdown: Any, font_size: Optional[float], download_name: str) -> Response:
    """Run a conversion and map domain errors to HTTP responses."""
    if _too_large(markdown):
        return _error(413, f"Markdown exceeds {settings.max_markdown_size_kb} KB")

    try:
        data = convert_markdown(markdown, font_size=font_size)
    except InvalidInputError:
        return _error(400, "Markdown content is required")
    except ConversionError:
        # Details are already logged by the converter
        return _error(500, "Failed to convert markdown to docx")

    return _docx_response(data, download_name)


# =============================================================================
# Endpoints
# =============================================================================

@app.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {"status": "ok"}


@app.post("/api/convert")
@limiter.limit(settings.rate_limit)
def convert(request: Request, payload: ConvertRequest):
    """
    Convert markdown text to a DOCX download.

    Body: {"markdown": str, "filename": str (optional), "font_size": float (optional)}
    Returns: DOCX file as an attachment
    """
    return _convert(payload.markdown, payload.font_size, derive_download_name(payload.filename))


@app.post("/api/convert/file")
@limiter.limit(settings.rate_limit)
async def convert_file(
    request: Request,
    file: UploadFile = File(...),
    font_size: Optional[float] = Form(default=None, ge=MIN_FONT_SIZE_PT, le=MAX_FONT_SIZE_PT),
):
    """
    Convert an uploaded markdown file to a DOCX download.

    Accepts: .md, .markdown (UTF-8)
    """
    file_ext = Path(file.filename or "").suffix.lower()
    if file_ext not in MARKDOWN_EXTENSIONS:
        return _error(400, f"Invalid file type. Allowed: {', '.join(MARKDOWN_EXTENSIONS)}")

    contents = await file.read()
    try:
        markdown = contents.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning(f"Upload is not valid UTF-8: {file.filename}")
        return _error(400, "File must be UTF-8 encoded")

    logger.info(f"Converting uploaded file: {file.filename} ({len(contents)} bytes)")
    return await run_in_threadpool(_convert, markdown, font_size, derive_download_name(file.filename))


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Markdown to DOCX API Server...")
    logger.info(f"API Documentation: http://{settings.api_host}:{settings.api_port}/docs")
    settings.print_config()

    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())
