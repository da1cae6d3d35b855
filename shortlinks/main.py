"""Main application module.

This module builds the FastAPI application, includes routes,
and configures middleware, exception handlers and the link store
lifecycle.
"""

from contextlib import asynccontextmanager
from typing import Optional
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlinks.api import api_router
from shortlinks.core.config import settings
from shortlinks.core.logging import setup_logging
from shortlinks.repositories import LinkStore, build_link_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the link store for the lifetime of the application."""
    setup_logging(settings)
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    
    if app.state.link_store is None:
        app.state.link_store = build_link_store(settings)
    link_store = app.state.link_store
    logger.info(f"Using link store {type(link_store).__name__}")
    await link_store.initialize()
    
    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}")
        await link_store.close()


def create_app(link_store: Optional[LinkStore] = None) -> FastAPI:
    """
    Build the application.
    
    Args:
        link_store: Store to serve from; built from settings at startup when omitted
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.link_store = link_store
    
    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    app.include_router(api_router)
    
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        content = {"error": exc.detail}
        reason = getattr(exc, "reason", None)
        if reason is not None:
            content["reason"] = reason
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )
    
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Render malformed request bodies as 400 errors."""
        logger.info(f"Request validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Malformed request body", "errors": jsonable_errors(exc)},
        )
    
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to catch and log all unhandled exceptions."""
        error_id = f"error-{time.time()}"
        logger.opt(exception=exc).error(
            "Unhandled exception in {method} {path}",
            method=request.method,
            path=request.url.path,
            error_id=error_id,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": str(exc) if settings.DEBUG else "Internal server error",
                "error_id": error_id,
            }
        )
    
    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


app = create_app()
