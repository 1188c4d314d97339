import asyncio

import pytest

from genbooks.services import notification_service
from genbooks.services.notification_service import NotificationService, format_amount

ORDER = {
    "id": "ORD-2026-ABCDEF12",
    "customer_name": "Asha Rao",
    "customer_email": "asha@example.com",
    "product_name": "Premium Course Bundle",
    "total_amount": 399.0,
    "currency": "INR",
    "status": "paid",
}
PAYMENT = {
    "id": "PAY-1234ABCD",
    "order_id": "ORD-2026-ABCDEF12",
    "amount": 399.0,
    "currency": "INR",
    "status": "succeeded",
    "received_at": "2026-03-05T10:00:00+00:00",
}


@pytest.fixture
def smtp_settings(settings):
    settings.EMAIL_HOST = "smtp.example.com"
    settings.EMAIL_PORT = 465
    settings.EMAIL_SECURE = True
    settings.EMAIL_USER = "mailer@genbooks.example"
    settings.EMAIL_PASS = "app-password"
    settings.EMAIL_FROM = "orders@genbooks.example"
    return settings


def test_format_amount():
    assert format_amount(399.0, "INR") == "₹399"
    assert format_amount(12.5, "USD") == "$12.5"
    assert format_amount(10, "JPY") == "JPY 10"


def test_render_confirmation(settings):
    html = NotificationService(settings).render_confirmation(ORDER, PAYMENT)
    assert "Hi Asha Rao," in html
    assert "ORD-2026-ABCDEF12" in html
    assert "PAY-1234ABCD" in html
    assert "₹399" in html
    assert "05 Mar 2026" in html
    assert 'href="https://genbooks.example"' in html


def test_render_escapes_customer_name(settings):
    order = dict(ORDER, customer_name="<script>x</script>")
    html = NotificationService(settings).render_confirmation(order, PAYMENT)
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html


def test_unconfigured_transport_logs(settings, caplog):
    service = NotificationService(settings)
    assert not service.configured
    with caplog.at_level("INFO"):
        result = asyncio.run(service.send_confirmation(ORDER, PAYMENT))
    assert result == {"success": True, "message": "Email logged to console (development mode)"}
    assert "Email would be sent to: asha@example.com" in caplog.text
    assert "Payment Confirmation - Order ORD-2026-ABCDEF12" in caplog.text


def test_send_over_smtp(smtp_settings, monkeypatch):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append((message, kwargs))
        return {}, "250 OK"

    monkeypatch.setattr(notification_service.aiosmtplib, "send", fake_send)

    result = asyncio.run(NotificationService(smtp_settings).send_confirmation(ORDER, PAYMENT))
    assert result["success"] is True
    assert result["messageId"].endswith("@genbooks.example>")

    message, kwargs = calls[0]
    assert message["To"] == "asha@example.com"
    assert message["Subject"] == "Payment Confirmation - Order ORD-2026-ABCDEF12"
    assert message["From"] == "GenBooks Store <orders@genbooks.example>"
    assert kwargs == {
        "hostname": "smtp.example.com",
        "port": 465,
        "username": "mailer@genbooks.example",
        "password": "app-password",
        "use_tls": True,
    }
    html = message.get_body(preferencelist=("html",)).get_content()
    assert "PAY-1234ABCD" in html


def test_smtp_failure_is_reported(smtp_settings, monkeypatch):
    async def failing_send(message, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(notification_service.aiosmtplib, "send", failing_send)

    result = asyncio.run(NotificationService(smtp_settings).send_confirmation(ORDER, PAYMENT))
    assert result == {"success": False, "error": "connection refused"}


def test_from_falls_back_to_user(smtp_settings):
    smtp_settings.EMAIL_FROM = ""
    message = NotificationService(smtp_settings).build_message(ORDER, PAYMENT)
    assert message["From"] == "GenBooks Store <mailer@genbooks.example>"
