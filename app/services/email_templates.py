"""Email body templates for booking notifications

Plain-text templates receive raw values. HTML templates must only ever be
filled with values that went through escape_html().
"""

from typing import Dict


# ============================================================================
# INTERNAL NOTIFICATION
# ============================================================================

INTERNAL_SUBJECT = "Booking Request — {full_name}"

INTERNAL_SUBJECT_WITH_EMAIL = "Booking Request — {full_name} — {email}"

INTERNAL_TEXT = """New Booking Request

Name: {full_name}
Email: {email}
Phone: {phone}
{date_label}: {dates}

Message:
{message}
"""

INTERNAL_HTML = """
<div style="font-family:Arial,Helvetica,sans-serif;font-size:16px;line-height:1.5">
  <h2>New Booking Request</h2>
  <p><strong>Name:</strong> {full_name}</p>
  <p><strong>Email:</strong> {email}</p>
  <p><strong>Phone:</strong> {phone}</p>
  <p><strong>{date_label}:</strong> {dates}</p>
  <p><strong>Message:</strong><br>{message}</p>
  <hr><p style="color:#777">Sent from {site_name}</p>
</div>"""


# ============================================================================
# GUEST ACKNOWLEDGEMENT (not a booking confirmation)
# ============================================================================

GUEST_SUBJECT = "We received your booking request"

GUEST_TEXT = """Hi {first_name},

Thanks for contacting {business_name}!
We've received your booking request and will review availability.
This is not a booking confirmation: we'll get back to you soon to confirm details or ask any questions.

Request summary
- Name: {full_name}
- Email: {email}
- Phone: {phone}
- {date_label}: {dates}
{message_block}
If you need to update anything, just reply to this email.

— {business_name}
"""

GUEST_TEXT_MESSAGE_BLOCK = """
Your message:
{message}
"""

GUEST_HTML = """
<div style="font-family:Arial,Helvetica,sans-serif;font-size:16px;line-height:1.6;color:#0b2942">
  <h2 style="margin:0 0 8px 0;">We received your booking request</h2>
  <p>Hi {first_name},</p>
  <p>Thanks for reaching out to <strong>{business_name}</strong>!
     We've received your request and our team will review availability and
     follow up shortly to confirm details or ask any questions.
     This email is an acknowledgement, not a booking confirmation.</p>

  <p style="margin:18px 0 6px;"><strong>Request summary</strong></p>
  <ul style="margin:0 0 16px 20px;padding:0">
    <li><strong>Name:</strong> {full_name}</li>
    <li><strong>Email:</strong> {email}</li>
    <li><strong>Phone:</strong> {phone}</li>
    <li><strong>{date_label}:</strong> {dates}</li>
  </ul>
{message_block}
  <p style="margin-top:18px">If you need to update anything, just reply to this email.</p>
  <p style="color:#5b6b7a;margin-top:24px">— {business_name}</p>
</div>"""

GUEST_HTML_MESSAGE_BLOCK = """
  <p><strong>Your message:</strong><br>{message}</p>
"""


def render(template: str, context: Dict[str, str]) -> str:
    """Fill a template with the given context"""
    return template.format(**context)
