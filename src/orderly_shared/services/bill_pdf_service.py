"""
Bill PDF Generation Service.

Renders the bill of a paid order as a paginated A4 document.
"""

from __future__ import annotations

import io
from decimal import Decimal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from orderly_shared.constants import BILL_ID_LENGTH, OrderStatus
from orderly_shared.logging_config import get_logger
from orderly_shared.schemas import OrderRecord
from orderly_shared.services.customer_service import display_label
from orderly_shared.validation import ValidationError

logger = get_logger(__name__)

ITEM_COLUMN_WIDTHS = [80 * mm, 20 * mm, 35 * mm, 35 * mm]


def short_order_id(order_id: str) -> str:
    return order_id[:BILL_ID_LENGTH]


def bill_filename(order: OrderRecord) -> str:
    return f"bill-{short_order_id(order.id)}.pdf"


class BillPDFService:
    """Service for generating PDF bills."""

    def __init__(self, restaurant_name: str = "The Walls of Waffle", currency_symbol: str = "Rs."):
        self.restaurant_name = restaurant_name
        self.currency_symbol = currency_symbol
        self.styles = getSampleStyleSheet()
        self._setup_styles()

    def _setup_styles(self):
        self.styles.add(
            ParagraphStyle(
                name="BillTitle",
                parent=self.styles["Heading1"],
                fontSize=22,
                alignment=1,  # Center
                spaceAfter=10,
            )
        )
        self.styles.add(
            ParagraphStyle(
                name="BillText",
                parent=self.styles["Normal"],
                fontSize=11,
                spaceAfter=3,
            )
        )
        self.styles.add(
            ParagraphStyle(
                name="BillSection",
                parent=self.styles["Heading3"],
                fontSize=12,
                spaceBefore=8,
                spaceAfter=4,
            )
        )
        self.styles.add(
            ParagraphStyle(
                name="BillFooter",
                parent=self.styles["Normal"],
                fontSize=11,
                alignment=1,
                textColor=colors.gray,
            )
        )

    def _money(self, value: Decimal) -> str:
        return f"{self.currency_symbol}{Decimal(value):.2f}"

    def generate_pdf(self, order: OrderRecord) -> bytes:
        """
        Generate the bill for a paid order.

        Args:
            order: The order, with customer and line items loaded

        Returns:
            PDF bytes

        Raises:
            ValidationError: if the order is not paid yet
        """
        if OrderStatus(order.status) != OrderStatus.PAID:
            raise ValidationError("Bills are only available for paid orders")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Bill {short_order_id(order.id)}",
        )

        elements = [
            Paragraph(escape(self.restaurant_name.upper()), self.styles["BillTitle"]),
            Paragraph(f"<b>Order #{short_order_id(order.id)}</b>", self.styles["BillText"]),
            Paragraph(
                f"Date: {order.created_at.strftime('%d/%m/%Y %H:%M')}", self.styles["BillText"]
            ),
            Paragraph("Customer Details", self.styles["BillSection"]),
            Paragraph(
                f"Name: {escape(display_label(order.customer))}", self.styles["BillText"]
            ),
        ]
        if order.customer and order.customer.phone:
            elements.append(
                Paragraph(f"Phone: {escape(order.customer.phone)}", self.styles["BillText"])
            )

        elements.append(Paragraph("Order Items", self.styles["BillSection"]))

        rows = [["Item", "Qty", "Price", "Subtotal"]]
        for item in order.items:
            rows.append(
                [
                    item.menu_item_name or "",
                    str(item.quantity),
                    self._money(item.unit_price),
                    self._money(item.subtotal),
                ]
            )
        rows.append(["", "", "Total Amount:", self._money(order.total_amount)])

        items_table = Table(rows, colWidths=ITEM_COLUMN_WIDTHS, repeatRows=1)
        items_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.Color(0.9, 0.9, 0.9)),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("LINEABOVE", (0, -1), (-1, -1), 1, colors.Color(0.8, 0.8, 0.8)),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, -1), (-1, -1), 12),
                    ("TOPPADDING", (0, 0), (-1, -1), 3),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                ]
            )
        )
        elements.append(items_table)

        elements.append(Spacer(1, 12 * mm))
        elements.append(Paragraph("Thank you for your business!", self.styles["BillFooter"]))

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"Generated bill for order {order.id} ({len(pdf_bytes)} bytes)")
        return pdf_bytes


def generate_bill(
    order_id: str,
    restaurant_name: str = "The Walls of Waffle",
    currency_symbol: str = "Rs.",
) -> tuple[bytes, str]:
    """
    Render the bill of a stored order.

    Returns:
        Tuple of (pdf_bytes, download filename)

    Raises:
        NotFoundError: unknown order
        ValidationError: the order is not paid
    """
    from orderly_shared.services.order_service import get_order

    order = get_order(order_id)
    service = BillPDFService(restaurant_name=restaurant_name, currency_symbol=currency_symbol)
    return service.generate_pdf(order), bill_filename(order)
