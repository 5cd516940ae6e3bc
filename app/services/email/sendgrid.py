"""SendGrid transactional email adapter.

Wraps the SendGrid REST API v3 without any external SDK.
"""

import logging
from typing import Any, Optional

import httpx

from app.schemas.email import EmailOptions, EmailTemplate, SendEmailResult, SendingLimits
from app.services.email.base import EmailProvider

logger = logging.getLogger(__name__)

BASE_URL = "https://api.sendgrid.com/v3"


class SendGridProvider(EmailProvider):
    name = "sendgrid"
    display_name = "SendGrid"

    def __init__(self, api_key: Optional[str], from_email: str, from_name: str, timeout: float = 15.0):
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_payload(self, options: EmailOptions) -> dict[str, Any]:
        personalization: dict[str, Any] = {
            "to": [{"email": email} for email in options.recipients],
            "subject": options.subject,
        }
        payload: dict[str, Any] = {
            "personalizations": [personalization],
            "from": {"email": self.from_email, "name": self.from_name},
        }
        if options.reply_to:
            payload["reply_to"] = {"email": options.reply_to}

        if options.template_id is not None:
            payload["template_id"] = str(options.template_id)
            if options.template_params:
                personalization["dynamic_template_data"] = options.template_params
        else:
            # SendGrid requires text/plain before text/html
            content = []
            if options.text_content:
                content.append({"type": "text/plain", "value": options.text_content})
            if options.html_content:
                content.append({"type": "text/html", "value": options.html_content})
            payload["content"] = content

        if options.attachments:
            payload["attachments"] = [
                {
                    "content": att.content,
                    "filename": att.filename,
                    "type": att.content_type or "application/octet-stream",
                    "disposition": "attachment",
                }
                for att in options.attachments
            ]
        if options.tags:
            payload["categories"] = options.tags
        return payload

    async def send_email(self, options: EmailOptions) -> SendEmailResult:
        if not self.is_configured():
            logger.warning("SendGrid not configured, SENDGRID_API_KEY missing")
            return SendEmailResult(success=False, error="SendGrid is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                resp = await client.post(
                    f"{BASE_URL}/mail/send",
                    json=self._build_payload(options),
                    headers=headers,
                )
            except httpx.HTTPError as e:
                logger.warning(f"SendGrid send_email failed: {e}")
                return SendEmailResult(success=False, error=str(e))

        if resp.status_code == 202:
            return SendEmailResult(success=True, message_id=resp.headers.get("X-Message-Id"))

        logger.warning(f"SendGrid error {resp.status_code}: {resp.text[:200]}")
        return SendEmailResult(success=False, error=f"SendGrid HTTP {resp.status_code}")

    async def get_templates(self) -> list[EmailTemplate]:
        if not self.is_configured():
            return []

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                resp = await client.get(
                    f"{BASE_URL}/templates",
                    params={"generations": "dynamic"},
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
            except httpx.HTTPError as e:
                logger.warning(f"SendGrid get_templates failed: {e}")
                return []

        if resp.status_code != 200:
            return []
        try:
            data = resp.json()
            return [
                EmailTemplate(id=str(t["id"]), name=t.get("name", ""))
                for t in data.get("result", data.get("templates", []))
            ]
        except (ValueError, KeyError) as e:
            logger.warning(f"SendGrid get_templates returned unexpected data: {e}")
            return []

    def get_sender_email(self) -> str:
        return self.from_email

    def get_sender_name(self) -> str:
        return self.from_name

    def get_sending_limits(self) -> SendingLimits:
        # Free tier
        return SendingLimits(daily=100, monthly=3000)

