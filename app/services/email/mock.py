import logging
import uuid

from app.schemas.email import EmailOptions, EmailTemplate, SendEmailResult, SendingLimits
from app.services.email.base import EmailProvider

logger = logging.getLogger(__name__)


class MockEmailProvider(EmailProvider):
    """Records emails instead of sending them. Development and tests only."""

    name = "mock"
    display_name = "Mock Email Provider"

    def __init__(self):
        self.sent_emails: list[EmailOptions] = []

    def is_configured(self) -> bool:
        return True

    async def send_email(self, options: EmailOptions) -> SendEmailResult:
        self.sent_emails.append(options)
        logger.info(f"Mock email sent to {options.recipients}: {options.subject}")
        return SendEmailResult(success=True, message_id=f"mock_{uuid.uuid4().hex[:16]}")

    async def get_templates(self) -> list[EmailTemplate]:
        return [
            EmailTemplate(
                id="order-shipped",
                name="Order Shipped",
                subject="Your Order #{{orderNumber}} Has Shipped!",
                variables=["orderNumber", "trackingNumber"],
            ),
        ]

    def get_sender_email(self) -> str:
        return "noreply@mock.twinesandstraps.co.za"

    def get_sender_name(self) -> str:
        return "TASSA - Mock"

    def get_sending_limits(self) -> SendingLimits:
        return SendingLimits(daily=10000, monthly=300000, per_second=100)

    def clear(self) -> None:
        self.sent_emails = []
