"""
FastAPI application entry point for the FreelanceOS backend.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from freelanceos.config import get_settings
from freelanceos.function_routes import router as function_router
from freelanceos.routes import router
from freelanceos.workspace_routes import router as workspace_router

logging.basicConfig(level=logging.INFO)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)
    allowed = (exc.headers or {}).get("Allow", "")
    return JSONResponse(
        status_code=405,
        headers=exc.headers,
        content={
            "error": "Method not allowed",
            "message": f"Only {allowed or 'other'} requests are supported",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="FreelanceOS Backend (FastAPI)", version="0.1.0")
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)
    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(workspace_router, prefix=settings.api_prefix)
    app.include_router(function_router, prefix="/functions/v1")
    return app


app = create_app()
