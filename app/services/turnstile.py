"""Cloudflare Turnstile token verification"""

from typing import Any, List

import httpx
import structlog
from pydantic import BaseModel, Field

from app.errors import BookingError, ErrorKind

logger = structlog.get_logger()


class TurnstileResult(BaseModel):
    """Parsed siteverify response"""
    success: bool = False
    error_codes: List[str] = Field(default_factory=list, alias="error-codes")

    model_config = {"populate_by_name": True}


def _error_codes(value: Any) -> List[str]:
    """Normalize the siteverify "error-codes" value to a list of strings"""
    if not value:
        return []
    if isinstance(value, list):
        return [str(code) for code in value]
    return [str(value)]


class TurnstileVerifier:
    """Redeems widget tokens against the siteverify endpoint"""

    def __init__(self, client: httpx.AsyncClient, secret: str, verify_url: str, timeout: float = 10.0):
        self.client = client
        self.secret = secret
        self.verify_url = verify_url
        self.timeout = timeout

    async def verify(self, token: str, remote_ip: str = "") -> TurnstileResult:
        """
        Verify a token for the given caller IP.

        Raises:
            BookingError: SERVER_ERROR when the service cannot be reached or
                returns something other than a JSON object
        """
        try:
            response = await self.client.post(
                self.verify_url,
                data={
                    "secret": self.secret,
                    "response": token,
                    "remoteip": remote_ip,
                },
                timeout=self.timeout,
            )
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error("turnstile_request_failed", error=str(e))
            raise BookingError(ErrorKind.SERVER_ERROR, detail=f"Turnstile request failed: {e}") from e
        except ValueError as e:
            logger.error("turnstile_response_invalid", status=response.status_code, error=str(e))
            raise BookingError(ErrorKind.SERVER_ERROR, detail=f"Turnstile returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise BookingError(ErrorKind.SERVER_ERROR, detail="Turnstile returned an unexpected payload")

        result = TurnstileResult(
            success=payload.get("success") is True,
            error_codes=_error_codes(payload.get("error-codes")),
        )
        logger.info("turnstile_verified", success=result.success, error_codes=result.error_codes)
        return result
