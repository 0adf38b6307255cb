"""Server-side validation of booking form submissions"""

from typing import Any, Dict, List, Optional

import structlog

from app.errors import BookingError, ErrorKind
from app.models import BookingRequest

logger = structlog.get_logger()

# Required names that may be satisfied by another input key
FIELD_ALIASES = {
    "date": ("date", "start_date"),
}


def _clean(value: Any) -> Optional[str]:
    """Trim a form value; None and blank strings become None"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _is_present(data: Dict[str, Any], name: str) -> bool:
    keys = FIELD_ALIASES.get(name, (name,))
    return any(_clean(data.get(key)) is not None for key in keys)


def validate_booking_request(
    data: Any,
    required_fields: List[str],
    honeypot_field: str = "company",
) -> BookingRequest:
    """
    Check required fields and normalize a raw submission.

    Args:
        data: Parsed JSON body
        required_fields: Field names checked in order; the first blank one is reported
        honeypot_field: Name of the decoy field carried into the record

    Returns:
        BookingRequest with trimmed values

    Raises:
        BookingError: MISSING_FIELD for the first absent or blank field,
            SERVER_ERROR if the body is not a JSON object
    """
    if not isinstance(data, dict):
        raise BookingError(
            ErrorKind.SERVER_ERROR,
            detail=f"Expected a JSON object, got {type(data).__name__}"
        )

    for name in required_fields:
        if not _is_present(data, name):
            logger.info("booking_request_rejected", missing_field=name)
            raise BookingError.missing_field(name)

    start_date = _clean(data.get("start_date")) or _clean(data.get("date"))
    end_date = _clean(data.get("end_date")) or start_date

    token = data.get("turnstile_token")
    if isinstance(token, str):
        token = token.strip()

    return BookingRequest(
        first_name=_clean(data.get("first_name")) or "",
        last_name=_clean(data.get("last_name")) or "",
        email=_clean(data.get("email")) or "",
        phone=_clean(data.get("phone")),
        start_date=start_date,
        end_date=end_date,
        message=_clean(data.get("message")),
        honeypot=_clean(data.get(honeypot_field)),
        started_ms=data.get("started_ms"),
        turnstile_token=token,
    )
