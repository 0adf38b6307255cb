"""Bot mitigation: honeypot, minimum fill time, Turnstile"""

import math
import time
from typing import Any, Callable, Optional

import structlog

from app.errors import BookingError, ErrorKind
from app.models import BookingRequest, GateDecision
from app.services.turnstile import TurnstileVerifier

logger = structlog.get_logger()


def coerce_started_ms(value: Any) -> Optional[float]:
    """
    Interpret the client-reported form start time.

    Absent values count as 0 (the epoch), so they never look fast.
    Returns None for values that are not a finite number.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        if not value.strip():
            return 0.0
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class AbuseGate:
    """
    Decides whether a validated submission may proceed.

    Checks run in a fixed order and each one short-circuits:
    honeypot, minimum fill time, then token verification. The first two
    soft-reject (the caller sees success); token problems raise.
    """

    def __init__(
        self,
        verifier: TurnstileVerifier,
        min_fill_ms: int = 3000,
        clock: Callable[[], float] = time.time,
    ):
        self.verifier = verifier
        self.min_fill_ms = min_fill_ms
        self.clock = clock

    def _now_ms(self) -> float:
        return self.clock() * 1000

    async def check(self, record: BookingRequest, remote_ip: str = "") -> GateDecision:
        """
        Run the gate for one submission.

        Raises:
            BookingError: TURNSTILE_MISSING, TURNSTILE_FAILED, or SERVER_ERROR
        """
        if record.honeypot:
            logger.info("honeypot_triggered", remote_ip=remote_ip)
            return GateDecision.SOFT_REJECT

        started = coerce_started_ms(record.started_ms)
        if started is not None:
            elapsed = self._now_ms() - started
            if elapsed < self.min_fill_ms:
                logger.info("submitted_too_fast", elapsed_ms=int(elapsed), remote_ip=remote_ip)
                return GateDecision.SOFT_REJECT

        token = record.turnstile_token
        if not isinstance(token, str) or not token:
            logger.info("turnstile_missing", remote_ip=remote_ip)
            raise BookingError(ErrorKind.TURNSTILE_MISSING)

        result = await self.verifier.verify(token, remote_ip)
        if not result.success:
            logger.warning("turnstile_failed", error_codes=result.error_codes, remote_ip=remote_ip)
            raise BookingError(ErrorKind.TURNSTILE_FAILED, detail=result.error_codes)

        return GateDecision.ACCEPT
