import logging
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path
from typing import Any, Dict

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, select_autoescape

from genbooks.core.config import Settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
BRAND = "GenBooks"
STORE_NAME = f"{BRAND} Store"
DEFAULT_PRODUCT = "GenBooks Premium Collection"

_CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$", "EUR": "€", "GBP": "£"}


def format_amount(amount: Any, currency: str = "INR") -> str:
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    symbol = _CURRENCY_SYMBOLS.get((currency or "").upper())
    return f"{symbol}{amount}" if symbol else f"{currency} {amount}"


def _payment_date(received_at: str) -> str:
    try:
        return datetime.fromisoformat(received_at).strftime("%d %b %Y")
    except (TypeError, ValueError):
        return received_at or ""


class NotificationService:
    """Payment confirmation emails, sent over SMTP or logged when SMTP is not configured."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        if self.configured:
            logger.info("Email service configured")
        else:
            logger.info("Email service not configured - using console logging for development")

    @property
    def configured(self) -> bool:
        return self.settings.email_configured

    def render_confirmation(self, order: Dict[str, Any], payment: Dict[str, Any]) -> str:
        template = self.env.get_template("payment_confirmation.html")
        return template.render(
            store_name=BRAND,
            customer_name=order.get("customer_name"),
            order_id=order.get("id"),
            payment_id=payment.get("id"),
            product_name=order.get("product_name") or DEFAULT_PRODUCT,
            amount=format_amount(order.get("total_amount"), order.get("currency")),
            paid_on=_payment_date(payment.get("received_at")),
            website_url=self.settings.WEBSITE_URL,
            year=datetime.now(timezone.utc).year,
        )

    def build_message(self, order: Dict[str, Any], payment: Dict[str, Any]) -> EmailMessage:
        sender = self.settings.EMAIL_FROM or self.settings.EMAIL_USER
        msg = EmailMessage()
        msg["From"] = formataddr((STORE_NAME, sender))
        msg["To"] = order["customer_email"]
        msg["Subject"] = f"Payment Confirmation - Order {order['id']}"
        msg["Message-ID"] = make_msgid(domain=sender.split("@")[-1] if "@" in sender else None)
        msg.set_content(
            f"Your payment {payment.get('id')} for order {order['id']} was successful. "
            f"Amount: {format_amount(order.get('total_amount'), order.get('currency'))}."
        )
        msg.add_alternative(self.render_confirmation(order, payment), subtype="html")
        return msg

    async def send_confirmation(self, order: Dict[str, Any], payment: Dict[str, Any]) -> Dict[str, Any]:
        recipient = order.get("customer_email")
        if not self.configured:
            logger.info(f"Email would be sent to: {recipient}")
            logger.info(f"Subject: Payment Confirmation - Order {order.get('id')}")
            logger.info(
                f"Content: Payment successful for {format_amount(order.get('total_amount'), order.get('currency'))}"
            )
            return {"success": True, "message": "Email logged to console (development mode)"}

        try:
            msg = self.build_message(order, payment)
            await aiosmtplib.send(
                msg,
                hostname=self.settings.EMAIL_HOST,
                port=self.settings.EMAIL_PORT,
                username=self.settings.EMAIL_USER,
                password=self.settings.EMAIL_PASS,
                use_tls=self.settings.EMAIL_SECURE,
            )
            logger.info(f"Payment confirmation email sent to: {recipient}")
            return {"success": True, "messageId": msg["Message-ID"]}
        except Exception as e:
            logger.error(f"Failed to send email to {recipient}: {e}")
            return {"success": False, "error": str(e)}
