"""Email Service for sending transactional email through MailChannels"""

from datetime import datetime, timezone
from typing import Any, Dict

import httpx
import structlog

from app.errors import EmailDeliveryError
from app.models import OutboundMessage

logger = structlog.get_logger()


class EmailService:
    """
    Thin client for the MailChannels send API.

    Each call is attempted exactly once. Non-2xx responses and transport
    failures both raise EmailDeliveryError; the caller decides whether a
    failure is fatal.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str, send_url: str, timeout: float = 10.0):
        self.client = client
        self.api_key = api_key
        self.send_url = send_url
        self.timeout = timeout

    async def send_email(self, message: OutboundMessage) -> Dict[str, Any]:
        """
        Send a single message.

        Args:
            message: Fully composed outbound message

        Returns:
            Dict with provider status code, response body, and send time

        Raises:
            EmailDeliveryError: If the provider rejects the message or cannot be reached
        """
        try:
            response = await self.client.post(
                self.send_url,
                json=message.to_mailchannels_payload(),
                headers={"X-Api-Key": self.api_key},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error("email_send_request_failed", subject=message.subject, error=str(e))
            raise EmailDeliveryError(detail=str(e) or type(e).__name__) from e

        body = response.text
        if not response.is_success:
            logger.error(
                "email_send_rejected",
                subject=message.subject,
                status=response.status_code,
                detail=body,
            )
            raise EmailDeliveryError(detail=body, status=response.status_code)

        logger.info(
            "email_sent",
            subject=message.subject,
            to_count=len(message.to),
            bcc_count=len(message.bcc),
            status=response.status_code,
        )
        return {
            "status": response.status_code,
            "detail": body,
            "sent_at": datetime.now(timezone.utc).isoformat(),
        }
