"""Brevo (formerly Sendinblue) transactional email adapter.

Talks to the Brevo REST API with httpx; no SDK required.
"""

import base64
import json
import logging
from typing import Any, Optional

import httpx

from app.schemas.email import EmailOptions, EmailTemplate, SendEmailResult, SendingLimits
from app.services.email.base import EmailProvider

logger = logging.getLogger(__name__)

BREVO_API_URL = "https://api.brevo.com/v3"


class BrevoProvider(EmailProvider):
    name = "brevo"
    display_name = "Brevo"

    def __init__(
        self,
        api_key: Optional[str],
        sender_email: str,
        sender_name: str,
        timeout: float = 30.0,
    ):
        self.api_key = self._extract_api_key(api_key)
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.timeout = timeout

    @staticmethod
    def _extract_api_key(raw_key: Optional[str]) -> Optional[str]:
        """Extract raw API key from a potential base64 JSON wrapper."""
        if not raw_key:
            return None
        if raw_key.startswith("xkeysib-"):
            return raw_key
        try:
            decoded = base64.b64decode(raw_key + "==").decode()
            data = json.loads(decoded)
        except (ValueError, UnicodeDecodeError):
            return raw_key
        if isinstance(data, dict) and "api_key" in data:
            return data["api_key"]
        return raw_key

    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.sender_email)

    def _headers(self) -> dict[str, str]:
        return {
            "accept": "application/json",
            "api-key": self.api_key or "",
            "content-type": "application/json",
        }

    def _build_payload(self, options: EmailOptions) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": email} for email in options.recipients],
            "subject": options.subject,
        }

        if options.template_id is not None:
            payload["templateId"] = int(options.template_id)
            if options.template_params:
                payload["params"] = options.template_params
        else:
            if options.html_content:
                payload["htmlContent"] = options.html_content
            if options.text_content:
                payload["textContent"] = options.text_content
            if "htmlContent" not in payload and options.text_content:
                # Brevo requires an HTML part; wrap plain text
                body = options.text_content.replace("\n", "<br>")
                payload["htmlContent"] = f"<html><body><p>{body}</p></body></html>"

        if options.reply_to:
            payload["replyTo"] = {"email": options.reply_to}
        if options.tags:
            payload["tags"] = options.tags
        if options.attachments:
            payload["attachment"] = [
                {"content": att.content, "name": att.filename} for att in options.attachments
            ]
        return payload

    async def send_email(self, options: EmailOptions) -> SendEmailResult:
        if not self.is_configured():
            logger.error("Brevo API key not configured")
            return SendEmailResult(success=False, error="Brevo is not configured")

        try:
            payload = self._build_payload(options)
        except ValueError as e:
            return SendEmailResult(success=False, error=f"Invalid Brevo template id: {e}")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{BREVO_API_URL}/smtp/email",
                    json=payload,
                    headers=self._headers(),
                    timeout=self.timeout,
                )

            if response.status_code in (200, 201):
                message_id = response.json().get("messageId")
                logger.info(
                    "Email sent successfully via Brevo",
                    extra={
                        "to": options.recipients,
                        "subject": options.subject[:50],
                        "status_code": response.status_code,
                        "message_id": message_id,
                    },
                )
                return SendEmailResult(success=True, message_id=message_id)

            error_detail = response.text
            logger.error(
                "Brevo API error",
                extra={"status_code": response.status_code, "error": error_detail[:200]},
            )
            return SendEmailResult(success=False, error=f"Brevo API error: {error_detail}")

        except httpx.TimeoutException:
            error_msg = "Brevo API request timed out"
            logger.error(error_msg)
            return SendEmailResult(success=False, error=error_msg)
        except httpx.HTTPError as e:
            logger.error("Failed to send email via Brevo", extra={"error": str(e)})
            return SendEmailResult(success=False, error=str(e))
        except ValueError as e:
            logger.error("Unreadable Brevo response", extra={"error": str(e)})
            return SendEmailResult(success=False, error="Brevo API returned an invalid response")

    async def get_templates(self) -> list[EmailTemplate]:
        if not self.is_configured():
            return []

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{BREVO_API_URL}/smtp/templates",
                    headers=self._headers(),
                    timeout=self.timeout,
                )
            if response.status_code != 200:
                return []
            return [
                EmailTemplate(
                    id=str(t["id"]),
                    name=t.get("name", ""),
                    subject=t.get("subject") or "",
                    html_content=t.get("htmlContent"),
                )
                for t in response.json().get("templates", [])
            ]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"Brevo get templates error: {e}")
            return []

    def get_sender_email(self) -> str:
        return self.sender_email

    def get_sender_name(self) -> str:
        return self.sender_name

    def get_sending_limits(self) -> SendingLimits:
        # Free tier
        return SendingLimits(daily=300, monthly=9000, per_second=5)
