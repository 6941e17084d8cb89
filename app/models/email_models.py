from pydantic import BaseModel
from typing import Optional


class NotificationEmail(BaseModel):
    recipient: str
    subject: str
    text_body: str
    html_body: str


class EmailSendResult(BaseModel):
    """Outcome of one send attempt (delivery problems are reported here instead of raised)"""

    sent: bool
    provider_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, provider_id: Optional[str] = None) -> "EmailSendResult":
        return cls(sent=True, provider_id=provider_id)

    @classmethod
    def failure(cls, error: str) -> "EmailSendResult":
        return cls(sent=False, error=error)
