"""FastAPI Application Entry Point"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from app.config import settings
from app.errors import BookingError
from app.api.routes import book

# Configure structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Booking Request Relay",
    description="Relays website booking requests to the business inbox",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["Content-Type"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return JSONResponse(
        content={
            "status": "healthy",
            "environment": settings.environment,
            "version": "0.1.0"
        }
    )


# Include routers
app.include_router(book.router, prefix="/api", tags=["booking"])


# Startup event
@app.on_event("startup")
async def startup_event():
    """Run on application startup"""
    logger.info(
        "application_starting",
        environment=settings.environment,
        base_url=settings.api_base_url,
        to_count=len(settings.to_emails_list),
        bcc_count=len(settings.bcc_emails_list),
        turnstile_configured=bool(settings.turnstile_secret),
        mailchannels_configured=bool(settings.mc_api_key),
    )


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown"""
    logger.info("application_shutting_down")


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    """Render pipeline errors raised outside the relay"""
    logger.warning(
        "booking_error",
        path=request.url.path,
        error=exc.kind.value,
        status_code=exc.status_code
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body(),
        headers={"Access-Control-Allow-Origin": "*"}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions"""
    logger.error(
        "uncaught_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "server_error",
            "detail": str(exc)
        },
        headers={"Access-Control-Allow-Origin": "*"}
    )
