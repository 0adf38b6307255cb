"""Build the internal notification and guest acknowledgement emails"""

import html
from datetime import datetime
from typing import Optional, Tuple

from app.config import Settings
from app.models import BookingRequest, EmailAddress, OutboundMessage, RecipientSet
from app.services import email_templates as templates

DATE_PLACEHOLDER = "?"
PHONE_PLACEHOLDER = "—"
MESSAGE_PLACEHOLDER = "(none)"


def format_date(value: Optional[str]) -> str:
    """Render an ISO calendar date as e.g. "Aug 16, 2025"; "?" if absent or unparseable"""
    if not value or not value.strip():
        return DATE_PLACEHOLDER
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        return DATE_PLACEHOLDER
    return parsed.strftime("%b %d, %Y")


def format_requested_dates(start: Optional[str], end: Optional[str]) -> str:
    start_text = format_date(start)
    if not end or end == start:
        return start_text
    return f"{start_text} to {format_date(end)}"


def escape_html(value: Optional[str]) -> str:
    return html.escape(value or "", quote=True)


def _date_label(record: BookingRequest) -> str:
    return "Requested dates" if record.is_date_range else "Requested date"


def _text_context(record: BookingRequest, dates: str) -> dict:
    return {
        "first_name": record.first_name,
        "full_name": record.full_name,
        "email": record.email,
        "phone": record.phone or PHONE_PLACEHOLDER,
        "date_label": _date_label(record),
        "dates": dates,
        "message": record.message or MESSAGE_PLACEHOLDER,
    }


def _html_context(record: BookingRequest, dates: str) -> dict:
    message = escape_html(record.message or MESSAGE_PLACEHOLDER).replace("\n", "<br>")
    return {
        "first_name": escape_html(record.first_name),
        "full_name": f"{escape_html(record.first_name)} {escape_html(record.last_name)}",
        "email": escape_html(record.email),
        "phone": escape_html(record.phone or PHONE_PLACEHOLDER),
        "date_label": _date_label(record),
        "dates": escape_html(dates),
        "message": message,
    }


def compose_internal_message(
    record: BookingRequest,
    dates: str,
    recipients: RecipientSet,
    settings: Settings,
) -> OutboundMessage:
    """Notification to the business inbox; replies go straight to the guest"""
    subject_template = (
        templates.INTERNAL_SUBJECT_WITH_EMAIL
        if settings.internal_subject_include_email
        else templates.INTERNAL_SUBJECT
    )
    html_context = _html_context(record, dates)
    html_context["site_name"] = escape_html(settings.site_name)

    return OutboundMessage(
        sender=EmailAddress(email=settings.from_email, name=settings.from_name),
        to=[EmailAddress(email=email) for email in recipients.to],
        bcc=[EmailAddress(email=email) for email in recipients.bcc],
        subject=templates.render(subject_template, {"full_name": record.full_name, "email": record.email}),
        reply_to=EmailAddress(email=record.email, name=record.full_name),
        text=templates.render(templates.INTERNAL_TEXT, _text_context(record, dates)),
        html=templates.render(templates.INTERNAL_HTML, html_context),
    )


def compose_guest_message(
    record: BookingRequest,
    dates: str,
    recipients: RecipientSet,
    settings: Settings,
) -> OutboundMessage:
    """Acknowledgement to the guest; replies reach the operator, not a no-reply box"""
    text_context = _text_context(record, dates)
    text_context["business_name"] = settings.business_name
    text_context["message_block"] = (
        templates.render(templates.GUEST_TEXT_MESSAGE_BLOCK, {"message": record.message})
        if record.message
        else ""
    )

    html_context = _html_context(record, dates)
    html_context["business_name"] = escape_html(settings.business_name)
    html_context["message_block"] = (
        templates.render(templates.GUEST_HTML_MESSAGE_BLOCK, {"message": html_context["message"]})
        if record.message
        else ""
    )

    reply_to = settings.guest_reply_to.strip() or recipients.primary or settings.from_email

    return OutboundMessage(
        sender=EmailAddress(email=settings.from_email, name=settings.guest_from_name),
        to=[EmailAddress(email=record.email, name=record.full_name)],
        subject=templates.GUEST_SUBJECT,
        reply_to=EmailAddress(email=reply_to, name=settings.guest_from_name),
        text=templates.render(templates.GUEST_TEXT, text_context),
        html=templates.render(templates.GUEST_HTML, html_context),
    )


def compose_messages(
    record: BookingRequest,
    recipients: RecipientSet,
    settings: Settings,
) -> Tuple[OutboundMessage, OutboundMessage]:
    """Build (internal, guest) messages for one validated request"""
    dates = format_requested_dates(record.start_date, record.end_date)
    return (
        compose_internal_message(record, dates, recipients, settings),
        compose_guest_message(record, dates, recipients, settings),
    )
