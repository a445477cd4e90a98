"""Invoice PDF rendering with reportlab."""

import io
import logging
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from timebill.config import TimebillConfig
from timebill.db import Invoice

logger = logging.getLogger(__name__)


def _money(value) -> str:
    return f"${value:,.2f}"


def _text(value) -> str:
    return escape(str(value)) if value else ""


def render_invoice_pdf(invoice: Invoice, config: TimebillConfig) -> bytes:
    """Render an invoice as a one-document PDF.

    Layout: business details left and the billed client right, invoice
    number and dates, the line item table with subtotal/tax/total rows,
    then notes and payment terms.

    Args:
        invoice: Invoice with its client and items loaded
        config: Supplies the business details printed in the header

    Returns:
        The PDF file content
    """
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=letter,
        rightMargin=72,
        leftMargin=72,
        topMargin=72,
        bottomMargin=18,
        title=f"Invoice {invoice.invoice_number}",
    )
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="RightAlign", alignment=TA_RIGHT))
    styles.add(ParagraphStyle(name="LeftAlign", alignment=TA_LEFT))
    story = []

    client = invoice.client
    bill_to = client.company_name or client.full_name
    header = [
        [
            Paragraph(_text(config.business_name), styles["LeftAlign"]),
            Paragraph(f"Bill To: {_text(bill_to)}", styles["RightAlign"]),
        ],
        [
            Paragraph(_text(config.business_address), styles["LeftAlign"]),
            Paragraph(_text(client.full_name), styles["RightAlign"]),
        ],
        [
            Paragraph(_text(config.business_email), styles["LeftAlign"]),
            Paragraph(_text(client.email), styles["RightAlign"]),
        ],
    ]
    table = Table(header, colWidths=[250, 220])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ]
        )
    )
    story.append(table)
    story.append(Spacer(1, 24))

    story.append(Paragraph(f"Invoice #{_text(invoice.invoice_number)}", styles["Title"]))
    story.append(Spacer(1, 12))

    details = Table(
        [
            ["Invoice Date:", str(invoice.issue_date), "Due Date:", str(invoice.due_date)],
            ["Status:", invoice.status.capitalize(), "", ""],
        ],
        colWidths=[90, 120, 90, 120],
    )
    details.setStyle(
        TableStyle(
            [
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ]
        )
    )
    story.append(details)
    story.append(Spacer(1, 18))

    rows = [["Description", "Hours", "Rate", "Amount"]]
    for item in invoice.items:
        rows.append(
            [
                Paragraph(_text(item.description), styles["Normal"]),
                f"{item.quantity:.2f}",
                _money(item.rate),
                _money(item.amount),
            ]
        )
    rows.append(["", "", "Subtotal:", _money(invoice.subtotal)])
    rows.append(["", "", f"Tax ({invoice.tax_rate:.2f}%):", _money(invoice.tax_amount)])
    rows.append(["", "", "Total:", _money(invoice.total_amount)])

    summary_start = len(rows) - 3
    items_table = Table(rows, colWidths=[250, 60, 80, 80])
    items_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("GRID", (0, 0), (-1, summary_start - 1), 0.5, colors.black),
                ("FONTNAME", (2, -1), (-1, -1), "Helvetica-Bold"),
                ("LINEABOVE", (2, -1), (-1, -1), 1, colors.black),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
            ]
        )
    )
    story.append(items_table)
    story.append(Spacer(1, 18))

    if invoice.notes:
        story.append(Paragraph("Notes", styles["Heading3"]))
        story.append(Paragraph(_text(invoice.notes), styles["Normal"]))
        story.append(Spacer(1, 12))

    story.append(Paragraph(f"Payment terms: {_text(config.payment_terms_text)}", styles["Normal"]))

    doc.build(story)
    pdf = buf.getvalue()
    logger.debug(f"Rendered invoice {invoice.invoice_number} ({len(pdf)} bytes)")
    return pdf
