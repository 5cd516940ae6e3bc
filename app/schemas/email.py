"""Email provider data types."""

from typing import Any, Optional, Union

from pydantic import Field

from app.schemas.base import CamelModel


class EmailAttachment(CamelModel):
    filename: str
    content: str  # base64
    content_type: Optional[str] = None


class EmailOptions(CamelModel):
    to: Union[str, list[str]]
    subject: str
    html_content: Optional[str] = None
    text_content: Optional[str] = None
    template_id: Optional[Union[int, str]] = None
    template_params: Optional[dict[str, Any]] = None
    tags: Optional[list[str]] = None
    reply_to: Optional[str] = None
    attachments: Optional[list[EmailAttachment]] = None

    @property
    def recipients(self) -> list[str]:
        return [self.to] if isinstance(self.to, str) else list(self.to)


class SendEmailResult(CamelModel):
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class EmailTemplate(CamelModel):
    id: str
    name: str
    subject: str = ""
    html_content: Optional[str] = None
    variables: list[str] = Field(default_factory=list)


class SendingLimits(CamelModel):
    daily: Optional[int] = None
    monthly: Optional[int] = None
    per_second: Optional[int] = None
