"""Booking request pipeline: validate, gate, compose, deliver"""

import time
from typing import Any, Callable

import httpx
import structlog

from app.config import Settings
from app.errors import BookingError, EmailDeliveryError, ErrorKind
from app.models import GateDecision, RelayResult, RelayStage
from app.services.abuse_gate import AbuseGate
from app.services.composer import compose_messages
from app.services.email_service import EmailService
from app.services.turnstile import TurnstileVerifier
from app.services.validation import validate_booking_request

logger = structlog.get_logger()

# Early exits when a BookingError is raised at each stage
FAILURE_STAGES = {
    RelayStage.RECEIVED: RelayStage.REJECTED,
    RelayStage.VALIDATED: RelayStage.GATE_FAILED,
    RelayStage.GATE_PASSED: RelayStage.INTERNAL_FAILED,
}


class BookingRelay:
    """
    Relays one booking form submission to the business inbox.

    Stages run strictly in order with no retries:
    RECEIVED -> VALIDATED -> GATE_PASSED -> INTERNAL_SENT -> GUEST_SENT/GUEST_FAILED -> DONE.
    The internal notification is mandatory; the guest acknowledgement is
    best-effort and only ever downgrades the result to a warning.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        timeout = settings.http_timeout_seconds
        self.gate = AbuseGate(
            verifier=TurnstileVerifier(
                client=client,
                secret=settings.turnstile_secret,
                verify_url=settings.turnstile_verify_url,
                timeout=timeout,
            ),
            min_fill_ms=settings.min_fill_ms,
            clock=clock,
        )
        self.email_service = EmailService(
            client=client,
            api_key=settings.mc_api_key,
            send_url=settings.mailchannels_send_url,
            timeout=timeout,
        )

    async def handle(self, data: Any, remote_ip: str = "") -> RelayResult:
        """Run the full pipeline for a parsed JSON body"""
        stage = RelayStage.RECEIVED
        log = logger.bind(remote_ip=remote_ip)
        try:
            record = validate_booking_request(
                data,
                required_fields=self.settings.required_fields_list,
                honeypot_field=self.settings.honeypot_field,
            )
            stage = RelayStage.VALIDATED
            log = log.bind(guest_email=record.email)
            log.info("booking_request_validated", date_range=record.is_date_range)

            decision = await self.gate.check(record, remote_ip)
            if decision == GateDecision.SOFT_REJECT:
                log.info("booking_request_soft_accepted")
                return RelayResult(stage=RelayStage.SOFT_ACCEPTED)
            stage = RelayStage.GATE_PASSED

            recipients = self.settings.recipient_set
            if recipients.is_empty:
                log.error("missing_to_emails")
                raise BookingError(ErrorKind.MISSING_TO_EMAILS)

            internal, guest = compose_messages(record, recipients, self.settings)

            if not self.settings.mc_api_key:
                log.error("missing_api_key")
                raise BookingError(ErrorKind.MISSING_API_KEY)

            try:
                await self.email_service.send_email(internal)
            except EmailDeliveryError as e:
                log.error("internal_email_failed", status=e.status, detail=e.detail)
                raise BookingError(
                    ErrorKind.MAILCHANNELS_FAILED_INTERNAL,
                    detail=e.detail,
                    upstream_status=e.status,
                ) from e
            stage = RelayStage.INTERNAL_SENT
            log.info("internal_email_sent", to_count=len(recipients.to), bcc_count=len(recipients.bcc))

            try:
                await self.email_service.send_email(guest)
            except EmailDeliveryError as e:
                log.warning("guest_ack_failed", status=e.status, detail=e.detail)
                return RelayResult(
                    body={"ok": True, "warn": "guest_ack_failed", "detail": e.detail},
                    stage=RelayStage.GUEST_FAILED,
                )

            stage = RelayStage.GUEST_SENT
            log.info("guest_ack_sent", stage=stage.value)
            return RelayResult(stage=RelayStage.DONE)

        except BookingError as e:
            failed_stage = FAILURE_STAGES.get(stage, RelayStage.INTERNAL_FAILED)
            log.info(
                "booking_request_failed",
                stage=failed_stage.value,
                error=e.kind.value,
                status_code=e.status_code,
            )
            return RelayResult(status_code=e.status_code, body=e.to_body(), stage=failed_stage)
