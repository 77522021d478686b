"""
PDF generation utilities using ReportLab.
"""

import io
from datetime import datetime
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


def _format_amount(amount: float) -> str:
    return f"{amount:,.2f}"


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%B %d, %Y") if value else "-"


def generate_invoice_pdf(
    invoice_id: str,
    invoice_type: str,
    party_label: str,
    party_name: str,
    status: str,
    items: List[dict],  # [{"description": str, "amount": float}]
    total_amount: float,
    due_date: Optional[datetime] = None,
    paid_at: Optional[datetime] = None,
    issued_at: Optional[datetime] = None,
) -> bytes:
    """
    Generate a PDF for a parent invoice or coach payout.

    Returns PDF as bytes for download.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title=f"Invoice {invoice_id}",
    )

    styles = getSampleStyleSheet()
    elements = []

    title_style = ParagraphStyle(
        "InvoiceTitle",
        parent=styles["Heading1"],
        fontSize=24,
        textColor=colors.HexColor("#23b685"),
        spaceAfter=20,
    )
    heading_style = ParagraphStyle(
        "InvoiceHeading",
        parent=styles["Heading2"],
        fontSize=14,
        textColor=colors.HexColor("#1e293b"),
        spaceBefore=20,
        spaceAfter=10,
    )

    heading = "Coach Payout" if invoice_type == "COACH_PAYOUT" else "Invoice"
    elements.append(Paragraph("Grow Fitness", title_style))
    elements.append(Paragraph(heading, styles["Heading2"]))
    elements.append(Spacer(1, 20))

    info_data = [
        ["Invoice ID:", invoice_id],
        [f"{party_label}:", party_name],
        ["Status:", status],
        ["Issued:", _format_date(issued_at)],
        ["Due Date:", _format_date(due_date)],
    ]
    if paid_at:
        info_data.append(["Paid At:", _format_date(paid_at)])

    info_table = Table(info_data, colWidths=[1.5 * inch, 4 * inch])
    info_table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 11),
                ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#64748b")),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    elements.append(info_table)

    elements.append(Paragraph("Items", heading_style))
    item_data = [["Description", "Amount"]]
    for item in items:
        item_data.append(
            [item.get("description", ""), _format_amount(float(item.get("amount", 0)))]
        )
    item_data.append(["Total", _format_amount(total_amount)])

    item_table = Table(item_data, colWidths=[4.5 * inch, 1.5 * inch])
    item_table.setStyle(
        TableStyle(
            [
                # Header
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#23b685")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                # Body
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#e2e8f0")),
                ("PADDING", (0, 0), (-1, -1), 8),
                # Total row
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#f8fafc")),
            ]
        )
    )
    elements.append(item_table)
    elements.append(Spacer(1, 30))

    footer_style = ParagraphStyle(
        "Footer",
        parent=styles["Normal"],
        fontSize=9,
        textColor=colors.HexColor("#94a3b8"),
        alignment=1,  # Center
    )
    elements.append(Paragraph("Generated by Grow Fitness", footer_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer.getvalue()
