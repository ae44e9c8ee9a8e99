# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adsguard import __version__
from adsguard.config import settings
from adsguard.exceptions import (
    AdsGuardError,
    ConfigurationError,
    PermissionDenied,
    ResourceNotFound,
    StorageUnavailable,
)
from adsguard.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Role-based access control and data privacy for ads reporting",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(exc: AdsGuardError, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(code=exc.code, message=exc.message, details=details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(PermissionDenied)
async def permission_denied_handler(request: Request, exc: PermissionDenied) -> JSONResponse:
    return _error(exc, exc.details())


@app.exception_handler(ResourceNotFound)
async def not_found_handler(request: Request, exc: ResourceNotFound) -> JSONResponse:
    # OwnershipViolation lands here too and must look identical to a miss
    return _error(exc)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("Configuration error on %s %s: %s", request.method, request.url.path, exc)
    return _error(exc)


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(
    request: Request, exc: StorageUnavailable
) -> JSONResponse:
    logger.error("Store unavailable on %s %s: %s", request.method, request.url.path, exc)
    return _error(exc)


@app.exception_handler(AdsGuardError)
async def adsguard_error_handler(request: Request, exc: AdsGuardError) -> JSONResponse:
    return _error(exc)


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include API router after the handlers are registered
from adsguard.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
