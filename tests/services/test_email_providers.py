"""
Tests for email providers and the email registry.

HTTP adapters are exercised with httpx.AsyncClient patched out.
"""

import base64
import json

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from app.config import Settings
from app.schemas.email import EmailAttachment, EmailOptions
from app.services.email import (
    BrevoProvider,
    MockEmailProvider,
    SendGridProvider,
    build_email_registry,
)


def mock_async_client(response=None, error=None):
    """Stand-in for ``httpx.AsyncClient`` used as an async context manager."""
    client = MagicMock()
    client.post = AsyncMock(return_value=response, side_effect=error)
    client.get = AsyncMock(return_value=response, side_effect=error)
    client.__aenter__.return_value = client
    return client


def http_response(status_code, body=None, headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body or {}
    response.text = json.dumps(body or {})
    response.headers = headers or {}
    return response


class TestEmailRegistry:
    """Tests for build_email_registry."""

    def test_no_default_when_nothing_configured(self):
        settings = Settings(ENVIRONMENT="production", BREVO_API_KEY=None, SENDGRID_API_KEY=None)

        registry = build_email_registry(settings)

        assert len(registry) == 2
        assert registry.get_configured_providers() == []
        assert registry.get_default_provider() is None

    def test_preferred_provider_is_default(self):
        settings = Settings(
            ENVIRONMENT="production",
            EMAIL_PROVIDER="sendgrid",
            BREVO_API_KEY="xkeysib-abc",
            SENDGRID_API_KEY="SG.abc",
        )

        registry = build_email_registry(settings)

        assert registry.get_default_provider().name == "sendgrid"

    def test_falls_back_to_first_configured(self):
        settings = Settings(ENVIRONMENT="production", EMAIL_PROVIDER="sendgrid", BREVO_API_KEY="xkeysib-abc")

        registry = build_email_registry(settings)

        assert registry.get_default_provider().name == "brevo"

    def test_mock_registered_in_development(self):
        settings = Settings(ENVIRONMENT="development", BREVO_API_KEY=None, SENDGRID_API_KEY=None)

        registry = build_email_registry(settings)

        assert "mock" in registry
        assert registry.get_default_provider().name == "mock"

    def test_describe(self):
        settings = Settings(ENVIRONMENT="production", BREVO_API_KEY="xkeysib-abc")

        described = build_email_registry(settings).describe()

        assert described["kind"] == "email"
        assert described["default"] == "brevo"
        assert {"name": "sendgrid", "display_name": "SendGrid", "configured": False} in described["providers"]


class TestBrevoProvider:
    """Tests for BrevoProvider."""

    def make_provider(self, api_key="xkeysib-test"):
        return BrevoProvider(api_key=api_key, sender_email="shop@example.com", sender_name="Rope Shop")

    def test_is_configured(self):
        assert self.make_provider().is_configured() is True
        assert self.make_provider(api_key=None).is_configured() is False

    def test_extracts_key_from_base64_wrapper(self):
        wrapped = base64.b64encode(json.dumps({"api_key": "xkeysib-wrapped"}).encode()).decode()

        assert self.make_provider(api_key=wrapped).api_key == "xkeysib-wrapped"

    def test_plain_text_wrapped_in_html(self):
        payload = self.make_provider()._build_payload(
            EmailOptions(to="a@example.com", subject="Hi", text_content="line one\nline two")
        )

        assert payload["textContent"] == "line one\nline two"
        assert payload["htmlContent"] == "<html><body><p>line one<br>line two</p></body></html>"

    def test_template_payload(self):
        payload = self.make_provider()._build_payload(
            EmailOptions(to=["a@example.com", "b@example.com"], subject="Hi", template_id="12", template_params={"x": 1})
        )

        assert payload["templateId"] == 12
        assert payload["params"] == {"x": 1}
        assert payload["to"] == [{"email": "a@example.com"}, {"email": "b@example.com"}]
        assert "htmlContent" not in payload

    @pytest.mark.asyncio
    async def test_send_email_success(self):
        client = mock_async_client(http_response(201, {"messageId": "<msg-1@brevo>"}))

        with patch("app.services.email.brevo.httpx.AsyncClient", return_value=client):
            result = await self.make_provider().send_email(
                EmailOptions(
                    to="buyer@example.com",
                    subject="Order shipped",
                    html_content="<p>On its way</p>",
                    tags=["order-shipped"],
                    attachments=[EmailAttachment(filename="invoice.pdf", content="JVBERi0=")],
                )
            )

        assert result.success is True
        assert result.message_id == "<msg-1@brevo>"
        url = client.post.call_args.args[0]
        kwargs = client.post.call_args.kwargs
        assert url == "https://api.brevo.com/v3/smtp/email"
        assert kwargs["headers"]["api-key"] == "xkeysib-test"
        assert kwargs["json"]["sender"] == {"name": "Rope Shop", "email": "shop@example.com"}
        assert kwargs["json"]["tags"] == ["order-shipped"]
        assert kwargs["json"]["attachment"] == [{"content": "JVBERi0=", "name": "invoice.pdf"}]

    @pytest.mark.asyncio
    async def test_send_email_api_error(self):
        client = mock_async_client(http_response(401, {"message": "Key not found"}))

        with patch("app.services.email.brevo.httpx.AsyncClient", return_value=client):
            result = await self.make_provider().send_email(EmailOptions(to="a@example.com", subject="Hi"))

        assert result.success is False
        assert "Key not found" in result.error

    @pytest.mark.asyncio
    async def test_send_email_timeout(self):
        client = mock_async_client(error=httpx.ReadTimeout("slow"))

        with patch("app.services.email.brevo.httpx.AsyncClient", return_value=client):
            result = await self.make_provider().send_email(EmailOptions(to="a@example.com", subject="Hi"))

        assert result.success is False
        assert result.error == "Brevo API request timed out"

    @pytest.mark.asyncio
    async def test_send_email_unreadable_body(self):
        client = mock_async_client(httpx.Response(201, text="<html>gateway</html>"))

        with patch("app.services.email.brevo.httpx.AsyncClient", return_value=client):
            result = await self.make_provider().send_email(EmailOptions(to="a@example.com", subject="Hi"))

        assert result.success is False
        assert result.error == "Brevo API returned an invalid response"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>gateway</html>"),
            httpx.Response(200, json={"templates": [{"name": "no id"}]}),
        ],
    )
    async def test_get_templates_unexpected_body(self, response):
        client = mock_async_client(response)

        with patch("app.services.email.brevo.httpx.AsyncClient", return_value=client):
            templates = await self.make_provider().get_templates()

        assert templates == []

    @pytest.mark.asyncio
    async def test_get_templates(self):
        client = mock_async_client(
            httpx.Response(200, json={"templates": [{"id": 7, "name": "Shipped", "subject": "On its way"}]})
        )

        with patch("app.services.email.brevo.httpx.AsyncClient", return_value=client):
            templates = await self.make_provider().get_templates()

        assert [(t.id, t.name, t.subject) for t in templates] == [("7", "Shipped", "On its way")]

    @pytest.mark.asyncio
    async def test_unconfigured_does_not_call_api(self):
        with patch("app.services.email.brevo.httpx.AsyncClient") as client_cls:
            result = await self.make_provider(api_key=None).send_email(EmailOptions(to="a@example.com", subject="Hi"))

        assert result.success is False
        client_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_bulk_send_is_sequential(self):
        client = mock_async_client(http_response(201, {"messageId": "m"}))
        messages = [EmailOptions(to=f"{i}@example.com", subject="Hi") for i in range(3)]

        with patch("app.services.email.brevo.httpx.AsyncClient", return_value=client):
            results = await self.make_provider().send_bulk_emails(messages)

        assert [r.success for r in results] == [True, True, True]
        assert client.post.await_count == 3


class TestSendGridProvider:
    """Tests for SendGridProvider."""

    @pytest.mark.asyncio
    async def test_send_email_accepted(self):
        client = mock_async_client(http_response(202, headers={"X-Message-Id": "sg-123"}))
        provider = SendGridProvider(api_key="SG.test", from_email="shop@example.com", from_name="Rope Shop")

        with patch("app.services.email.sendgrid.httpx.AsyncClient", return_value=client):
            result = await provider.send_email(
                EmailOptions(to="a@example.com", subject="Hi", text_content="plain", html_content="<b>rich</b>")
            )

        assert result.success is True
        assert result.message_id == "sg-123"
        payload = client.post.call_args.kwargs["json"]
        assert [c["type"] for c in payload["content"]] == ["text/plain", "text/html"]
        assert client.post.call_args.kwargs["headers"]["Authorization"] == "Bearer SG.test"

    @pytest.mark.asyncio
    async def test_send_email_rejected(self):
        client = mock_async_client(http_response(400, {"errors": []}))
        provider = SendGridProvider(api_key="SG.test", from_email="shop@example.com", from_name="Rope Shop")

        with patch("app.services.email.sendgrid.httpx.AsyncClient", return_value=client):
            result = await provider.send_email(EmailOptions(to="a@example.com", subject="Hi"))

        assert result.success is False
        assert result.error == "SendGrid HTTP 400"

    @pytest.mark.asyncio
    async def test_get_templates_unreadable_body(self):
        client = mock_async_client(httpx.Response(200, text="<html>gateway</html>"))
        provider = SendGridProvider(api_key="SG.test", from_email="shop@example.com", from_name="Rope Shop")

        with patch("app.services.email.sendgrid.httpx.AsyncClient", return_value=client):
            templates = await provider.get_templates()

        assert templates == []


class TestMockEmailProvider:
    """Tests for MockEmailProvider."""

    @pytest.mark.asyncio
    async def test_records_sent_email(self):
        provider = MockEmailProvider()

        result = await provider.send_email(EmailOptions(to="a@example.com", subject="Hello"))

        assert result.success is True
        assert result.message_id.startswith("mock_")
        assert provider.sent_emails[0].subject == "Hello"

    def test_clear(self):
        provider = MockEmailProvider()
        provider.sent_emails.append(EmailOptions(to="a@example.com", subject="x"))

        provider.clear()

        assert provider.sent_emails == []
