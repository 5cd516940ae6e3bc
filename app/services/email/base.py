from abc import abstractmethod

from app.schemas.email import EmailOptions, EmailTemplate, SendEmailResult, SendingLimits
from app.services.providers.base import BaseProvider


class EmailProvider(BaseProvider):
    """Transactional email adapter."""

    @abstractmethod
    async def send_email(self, options: EmailOptions) -> SendEmailResult:
        """Send one email. Failures are returned, never raised."""

    async def send_bulk_emails(self, emails: list[EmailOptions]) -> list[SendEmailResult]:
        """Send sequentially, one result per input in the same order."""
        results = []
        for options in emails:
            results.append(await self.send_email(options))
        return results

    async def get_templates(self) -> list[EmailTemplate]:
        return []

    @abstractmethod
    def get_sender_email(self) -> str: ...

    @abstractmethod
    def get_sender_name(self) -> str: ...

    def supports_bulk_sending(self) -> bool:
        return True

    def get_sending_limits(self) -> SendingLimits:
        return SendingLimits()
