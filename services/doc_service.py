# bar_bills/services/doc_service.py
"""
Word rendering of bills.

  - render_bill_document: one bill on its own document (export archive)
  - render_preview_document: every page as one landscape legal sheet with
    a fixed 3 x 4 grid of bills (print layout / on-screen review)
"""

from typing import List, Optional, Sequence, Tuple

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH

from domain.models import Bar, Bill, Page
from services.pagination import GRID_COLUMNS, GRID_ROWS, paginate_bills
from settings import DEFAULT_BILLS_PER_PAGE
from utils.docx_helpers import document_to_bytes, set_cell_text, set_legal_page, write_paragraph
from utils.formatting import format_bill_date, format_percent, format_rupee

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

LINE_HEADERS = ["Sr", "Item", "Size", "MRP", "Qty", "Total"]


def _write_bill(container, bill: Bill, bar: Optional[Bar], font_size: int) -> None:
    """
    Write header, customer block, line table and totals into a Document
    or a table cell. Both expose add_paragraph / add_table(rows, cols).
    """
    title = write_paragraph(container, "Sales Bill", bold=True, size=font_size + 2, first=True)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER
    if bar is not None:
        write_paragraph(container, bar.name, size=font_size).alignment = WD_ALIGN_PARAGRAPH.CENTER
    write_paragraph(container, f"Bill No: {bill.bill_number}", size=font_size)
    write_paragraph(container, f"Date: {format_bill_date(bill.bill_date)}", size=font_size)

    write_paragraph(container, "Customer Details:", bold=True, size=font_size)
    write_paragraph(container, f"Name: {bill.customer.name}", size=font_size)
    write_paragraph(container, f"License No: {bill.customer.license_number}", size=font_size)

    table = container.add_table(rows=1, cols=len(LINE_HEADERS))
    table.style = "Table Grid"
    for cell, header in zip(table.rows[0].cells, LINE_HEADERS):
        set_cell_text(cell, header, bold=True, size=font_size)

    for idx, entry in enumerate(bill.entries, start=1):
        values = [
            str(idx),
            entry.brand_name,
            entry.size,
            format_rupee(entry.unit_price),
            str(entry.quantity),
            format_rupee(entry.line_total),
        ]
        for cell, value in zip(table.add_row().cells, values):
            set_cell_text(cell, value, size=font_size)

    for text, bold in (
            (f"Sub Total: {format_rupee(bill.subtotal)}", False),
            (f"Service Tax ({format_percent(bill.tax_percent)}%): {format_rupee(bill.tax_amount)}", False),
            (f"Final Total: {format_rupee(bill.final_total)}", True),
    ):
        write_paragraph(container, text, bold=bold, size=font_size).alignment = WD_ALIGN_PARAGRAPH.RIGHT


def render_bill_document(bill: Bill, bar: Optional[Bar] = None) -> bytes:
    """A single bill's worth of content as .docx bytes."""
    doc = Document()
    set_legal_page(doc, landscape=False)
    _write_bill(doc, bill, bar, font_size=11)
    return document_to_bytes(doc)


def render_preview_document(pages: Sequence[Page], bar: Optional[Bar] = None) -> bytes:
    """
    One sheet per page. The grid is GRID_ROWS x GRID_COLUMNS however many
    bills the page holds; cells beyond the page's bills stay empty. A page
    capacity above 12 only adds rows.
    """
    doc = Document()
    set_legal_page(doc, landscape=True)

    for page_idx, page in enumerate(pages):
        if page_idx > 0:
            doc.add_page_break()

        rows = max(GRID_ROWS, -(-len(page.bills) // GRID_COLUMNS))
        grid = doc.add_table(rows=rows, cols=GRID_COLUMNS)
        grid.style = "Table Grid"

        for slot, bill in enumerate(page.bills):
            cell = grid.cell(slot // GRID_COLUMNS, slot % GRID_COLUMNS)
            _write_bill(cell, bill, bar, font_size=6)

    return document_to_bytes(doc)


def build_preview(
        bills: Sequence[Bill],
        bar: Optional[Bar] = None,
        page_capacity: int = DEFAULT_BILLS_PER_PAGE,
) -> Tuple[List[Page], bytes]:
    """Paginate bills and render the preview document in one go."""
    pages = paginate_bills(bills, page_capacity)
    return pages, render_preview_document(pages, bar)
