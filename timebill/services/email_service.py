"""Outgoing invoice email.

Delivery is not wired to a mail server: the message is logged with its
attachment size, and callers treat a return value of True as sent.
"""

import logging

from timebill.config import TimebillConfig

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self, config: TimebillConfig):
        self.sender = config.email_sender

    def send_invoice(
        self, recipient: str, invoice_number: str, pdf: bytes
    ) -> bool:
        logger.info(
            "Sending invoice email",
            extra={
                "sender": self.sender,
                "recipient": recipient,
                "invoice_number": invoice_number,
                "attachment": f"invoice-{invoice_number}.pdf",
                "attachment_bytes": len(pdf),
            },
        )
        return True
