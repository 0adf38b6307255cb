"""Booking form submission endpoint"""

import json
from typing import AsyncIterator

import httpx
import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from app.config import Settings, get_settings
from app.errors import BookingError, ErrorKind
from app.services.booking_relay import BookingRelay

logger = structlog.get_logger()
router = APIRouter()

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS, GET",
    "Access-Control-Allow-Headers": "Content-Type",
}


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    """Request-scoped client for outbound calls"""
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client


def get_remote_ip(request: Request) -> str:
    """Caller IP as reported by Cloudflare, a proxy, or the socket"""
    cf_ip = request.headers.get("cf-connecting-ip", "").strip()
    if cf_ip:
        return cf_ip
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


def json_response(body: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


@router.get("/book")
async def booking_probe():
    """Liveness probe for the form endpoint"""
    return json_response({"ok": True, "hint": "POST JSON to this endpoint."})


@router.options("/book")
async def booking_preflight():
    """CORS preflight"""
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)


@router.post("/book")
async def submit_booking(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Accept a booking form submission.

    Validates it, runs bot mitigation, emails the business, and sends the
    guest a best-effort acknowledgement.
    """
    remote_ip = get_remote_ip(request)
    logger.info("booking_request_received", remote_ip=remote_ip)

    raw_body = await request.body()
    try:
        data = json.loads(raw_body)
    except ValueError as e:
        logger.warning("booking_request_malformed", error=str(e))
        raise BookingError(ErrorKind.SERVER_ERROR, detail=f"Invalid JSON body: {e}") from e

    relay = BookingRelay(settings=settings, client=client)
    result = await relay.handle(data, remote_ip=remote_ip)

    logger.info(
        "booking_request_completed",
        stage=result.stage.value,
        status_code=result.status_code
    )
    return json_response(result.body, status_code=result.status_code)
