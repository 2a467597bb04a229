# =============================================================================
# lib/mailer.py - Confirmation Emails
# =============================================================================
# Sends transfer and order confirmations over SMTP, copying the admin inbox.
# Email is best effort: a failed send is logged and reported as False, it
# never undoes a captured payment.
# =============================================================================

from __future__ import annotations

import logging
import smtplib
from decimal import Decimal
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Iterable

from app.config import Settings, settings as default_settings
from lib.orm import Order, OrderItem, Transfer, User

logger = logging.getLogger(__name__)


def reference_number(resource_id: int) -> str:
    """Customer-facing reference, e.g. REF-0000042."""
    return f"REF-{resource_id:07d}"


def _rows_html(rows: list[tuple[str, str]]) -> str:
    return "".join(
        f"<tr><td><strong>{escape(label)}</strong></td><td>{escape(value)}</td></tr>"
        for label, value in rows
    )


def _rows_text(rows: list[tuple[str, str]]) -> str:
    return "\n".join(f"{label}: {value}" for label, value in rows)


class Mailer:
    """SMTP sender for confirmation emails."""

    def __init__(self, config: Settings | None = None):
        self.config = config or default_settings

    @property
    def is_configured(self) -> bool:
        return bool(self.config.SMTP_HOST)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def send_transfer_confirmation(self, transfer: Transfer, user: User, payment_id: str) -> bool:
        ref = reference_number(transfer.id)
        rows = [
            ("Reference", ref),
            ("Sender", f"{user.first_name} {user.last_name}"),
            ("Recipient", transfer.recipient_name),
            ("Recipient phone", transfer.recipient_phone),
            ("Destination", transfer.destination_country),
            ("Amount sent", f"{transfer.amount} {transfer.currency}"),
            ("Fees", f"{transfer.fees} {transfer.currency}"),
            ("Exchange rate", f"1 {transfer.currency} = {transfer.exchange_rate} {transfer.destination_currency}"),
            ("Amount received", f"{transfer.received_amount} {transfer.destination_currency}"),
            ("Delivery method", transfer.delivery_method),
        ]
        if transfer.bank_name:
            rows.append(("Bank", transfer.bank_name))
        if transfer.account_number:
            rows.append(("Account number", transfer.account_number))
        rows.append(("Payment ID", payment_id))

        return self._send(
            to=user.email,
            subject=f"Gisabo - Transfer confirmation {ref}",
            heading="Transfer confirmation",
            greeting=f"Dear {user.first_name} {user.last_name}, thank you for using Gisabo money transfer.",
            rows=rows,
        )

    def send_order_confirmation(
        self,
        order: Order,
        user: User,
        items: Iterable[OrderItem],
        payment_id: str,
    ) -> bool:
        ref = reference_number(order.id)
        rows = [("Reference", ref)]
        for item in items:
            name = item.product.name_fr if item.product else f"Product #{item.product_id}"
            line_total = Decimal(item.price) * item.quantity
            rows.append((name, f"{item.quantity} x {item.price} = {line_total} {order.currency}"))
        rows.append(("Total", f"{order.total} {order.currency}"))
        rows.append(("Payment ID", payment_id))

        return self._send(
            to=user.email,
            subject=f"Gisabo - Order confirmation {ref}",
            heading="Order confirmation",
            greeting=f"Dear {user.first_name} {user.last_name}, thank you for your order.",
            rows=rows,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _build_message(
        self,
        to: str,
        subject: str,
        heading: str,
        greeting: str,
        rows: list[tuple[str, str]],
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.config.MAIL_FROM
        message["To"] = to

        text_body = f"{greeting}\n\n{_rows_text(rows)}\n\nThe Gisabo team"
        html_body = (
            f"<html><body><h2>{escape(heading)}</h2><p>{escape(greeting)}</p>"
            f"<table>{_rows_html(rows)}</table><p><em>The Gisabo team</em></p></body></html>"
        )
        message.attach(MIMEText(text_body, "plain", "utf-8"))
        message.attach(MIMEText(html_body, "html", "utf-8"))
        return message

    def _send(
        self,
        to: str,
        subject: str,
        heading: str,
        greeting: str,
        rows: list[tuple[str, str]],
    ) -> bool:
        if not self.is_configured:
            logger.info(f"SMTP not configured, skipping email '{subject}'")
            return False

        message = self._build_message(to, subject, heading, greeting, rows)
        recipients = [to]
        if self.config.ADMIN_EMAIL:
            recipients.append(self.config.ADMIN_EMAIL)

        try:
            with smtplib.SMTP(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=30) as smtp:
                if self.config.SMTP_USE_TLS:
                    smtp.starttls()
                if self.config.SMTP_USER and self.config.SMTP_PASSWORD:
                    smtp.login(self.config.SMTP_USER, self.config.SMTP_PASSWORD)
                smtp.sendmail(self.config.MAIL_FROM, recipients, message.as_string())
            logger.info(f"Sent '{subject}' to {to}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' to {to}: {e}")
            return False
