import io

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.shared import Inches, Pt

LEGAL_LONG_SIDE = Inches(14)
LEGAL_SHORT_SIDE = Inches(8.5)


def set_legal_page(doc: Document, landscape: bool = False, margin=Inches(0.3)) -> None:
    """Legal paper on every section, portrait or landscape."""
    for section in doc.sections:
        if landscape:
            section.orientation = WD_ORIENT.LANDSCAPE
            section.page_width = LEGAL_LONG_SIDE
            section.page_height = LEGAL_SHORT_SIDE
        else:
            section.orientation = WD_ORIENT.PORTRAIT
            section.page_width = LEGAL_SHORT_SIDE
            section.page_height = LEGAL_LONG_SIDE
        section.left_margin = section.right_margin = margin
        section.top_margin = section.bottom_margin = margin


def write_paragraph(container, text: str, *, bold: bool = False, size: int = None, first: bool = False):
    """
    Add a paragraph to a Document or table cell.
    first=True reuses the empty paragraph a fresh cell starts with.
    """
    if first and container.paragraphs and not container.paragraphs[0].text:
        p = container.paragraphs[0]
    else:
        p = container.add_paragraph()
    run = p.add_run(text)
    run.bold = bold
    if size is not None:
        run.font.size = Pt(size)
    return p


def set_cell_text(cell, text: str, *, bold: bool = False, size: int = None) -> None:
    """Replace a table cell's text with a single run."""
    p = cell.paragraphs[0]
    for run in p.runs:
        run.text = ""
    run = p.add_run(text)
    run.bold = bold
    if size is not None:
        run.font.size = Pt(size)


def document_to_bytes(doc: Document) -> bytes:
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
