"""Request and email data models"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BookingRequest(BaseModel):
    """Normalized booking request from the website form"""
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    start_date: Optional[str] = Field(None, description="ISO date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="ISO date (YYYY-MM-DD), equals start_date for a single day")
    message: Optional[str] = None

    # Anti-abuse fields
    honeypot: Optional[str] = None
    started_ms: Any = None
    turnstile_token: Any = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_date_range(self) -> bool:
        return bool(self.start_date and self.end_date and self.start_date != self.end_date)


class EmailAddress(BaseModel):
    """Mailbox with optional display name"""
    email: str
    name: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        payload = {"email": self.email}
        if self.name:
            payload["name"] = self.name
        return payload


class RecipientSet(BaseModel):
    """Primary and blind-copy recipients for the internal notification"""
    to: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)

    @classmethod
    def from_lists(cls, to: List[str], bcc: List[str]) -> "RecipientSet":
        """Deduplicate both lists (first occurrence wins) and drop bcc entries already in to"""
        to_unique = list(dict.fromkeys(to))
        bcc_unique = [email for email in dict.fromkeys(bcc) if email not in to_unique]
        return cls(to=to_unique, bcc=bcc_unique)

    @property
    def primary(self) -> Optional[str]:
        return self.to[0] if self.to else None

    @property
    def is_empty(self) -> bool:
        return not self.to


class OutboundMessage(BaseModel):
    """A single email handed to the transactional email provider"""
    sender: EmailAddress
    to: List[EmailAddress]
    bcc: List[EmailAddress] = Field(default_factory=list)
    subject: str
    reply_to: EmailAddress
    text: str
    html: str

    def to_mailchannels_payload(self) -> Dict[str, Any]:
        """Render the MailChannels /tx/v1/send request body"""
        personalization: Dict[str, Any] = {"to": [addr.to_payload() for addr in self.to]}
        if self.bcc:
            personalization["bcc"] = [addr.to_payload() for addr in self.bcc]

        return {
            "personalizations": [personalization],
            "from": self.sender.to_payload(),
            "reply_to": self.reply_to.to_payload(),
            "subject": self.subject,
            "content": [
                {"type": "text/plain; charset=utf-8", "value": self.text},
                {"type": "text/html; charset=utf-8", "value": self.html},
            ],
        }


class GateDecision(str, Enum):
    """Outcome of the abuse gate when it does not raise"""
    ACCEPT = "accept"
    SOFT_REJECT = "soft_reject"


class RelayStage(str, Enum):
    """Per-request pipeline stages"""
    RECEIVED = "received"
    VALIDATED = "validated"
    GATE_PASSED = "gate_passed"
    INTERNAL_SENT = "internal_sent"
    GUEST_SENT = "guest_sent"
    GUEST_FAILED = "guest_failed"
    DONE = "done"
    REJECTED = "rejected"
    SOFT_ACCEPTED = "soft_accepted"
    GATE_FAILED = "gate_failed"
    INTERNAL_FAILED = "internal_failed"


class RelayResult(BaseModel):
    """Final status code and JSON body for a handled submission"""
    status_code: int = 200
    body: Dict[str, Any] = Field(default_factory=lambda: {"ok": True})
    stage: RelayStage = RelayStage.DONE
