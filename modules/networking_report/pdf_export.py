"""PDF generation for networking installation reports."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from PIL import Image as PILImage
from pypdf import PdfReader
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    Image,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.doctemplate import LayoutError

from utils.app_settings import ReportSettings

from .errors import ExportFailure
from .models import ChecklistRow, ReportRecord, SignatureImage, TechnicalParameterRow
from .schema import CONNECTIONS, TESTS

logger = logging.getLogger(__name__)

SIGNATURE_BOX_HEIGHT = 90

BASIC_INFO_FIELDS: Sequence[tuple[str, str]] = (
    ("service_support_mobile", "Service Support Mobile No"),
    ("report_date", "Date"),
    ("starting_date", "Starting Date"),
    ("completion_date", "Completion Date"),
    ("customer_name_address", "Customer Name & Address"),
    ("spoc_name", "SPOC Name"),
    ("spoc_designation", "Designation"),
    ("spoc_contact", "Contact No"),
    ("po_code", "PO Code"),
)

_TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (0, 0), (0, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]
)


def _text(value: str) -> str:
    return escape(value or "").replace("\n", "<br/>")


def _page_size(settings: ReportSettings):
    return letter if settings.page_size.lower() == "letter" else A4


def _page_footer(canvas_obj: canvas.Canvas, doc, *, title: str) -> None:
    canvas_obj.saveState()
    canvas_obj.setFont("Helvetica", 8)
    canvas_obj.drawCentredString(
        doc.pagesize[0] / 2.0, 20, f"{title} - Page {canvas_obj.getPageNumber()}"
    )
    canvas_obj.restoreState()


def _checklist_table(
    headers: Sequence[str],
    rows: Sequence[ChecklistRow],
    width: float,
    body_style: ParagraphStyle,
) -> Table:
    data: List[list] = [list(headers)]
    for row in rows:
        data.append(
            [
                str(row.sequence_number),
                Paragraph(_text(row.particulars), body_style),
                Paragraph(_text(row.remark), body_style),
            ]
        )
    table = Table(data, colWidths=[0.08 * width, 0.57 * width, 0.35 * width], repeatRows=1, splitInRow=1)
    table.setStyle(_TABLE_STYLE)
    return table


def _technical_table(rows: Sequence[TechnicalParameterRow], width: float, body_style: ParagraphStyle) -> Table:
    data: List[list] = [["S.N", "Particulars", "Remark"]]
    for row in rows:
        particulars = f"{row.parameter}: {row.value}" if row.value else row.parameter
        data.append(
            [
                str(row.sequence_number),
                Paragraph(_text(particulars), body_style),
                Paragraph(_text(row.remark), body_style),
            ]
        )
    table = Table(data, colWidths=[0.08 * width, 0.57 * width, 0.35 * width], repeatRows=1, splitInRow=1)
    table.setStyle(_TABLE_STYLE)
    return table


def _signature_image(image: SignatureImage, who: str, max_width: float) -> Image:
    try:
        with PILImage.open(BytesIO(image.png)) as pil:
            pil.load()
            fmt = pil.format
            px_w, px_h = pil.size
    except (OSError, ValueError, PILImage.DecompressionBombError) as exc:
        raise ExportFailure(f"The {who} signature image could not be read.") from exc
    if fmt != "PNG":
        raise ExportFailure(f"The {who} signature must be a PNG image, got {fmt}.")
    if px_w <= 0 or px_h <= 0:
        raise ExportFailure(f"The {who} signature image is empty.")
    scale = min(max_width / px_w, SIGNATURE_BOX_HEIGHT / px_h)
    return Image(BytesIO(image.png), width=px_w * scale, height=px_h * scale, mask="auto")


def _signatures_block(record: ReportRecord, width: float, styles) -> Table:
    body = styles["BodyText"]
    label = styles["Heading4"]
    col_width = width / 2.0
    image_width = col_width - 12

    def column(caption: str, who: str, image: SignatureImage, name_field: str, date_field: str):
        return [
            Paragraph(caption, label),
            _signature_image(image, who, image_width),
            Paragraph(f"<b>Name:</b> {_text(record.text(name_field))}", body),
            Paragraph(f"<b>Date:</b> {_text(record.text(date_field))}", body),
        ]

    table = Table(
        [
            [
                column("Customer Signature &amp; Stamp", "customer", record.customer_signature, "customer_name", "customer_sign_date"),
                column("Engineer Signature", "engineer", record.engineer_signature, "engineer_name", "engineer_sign_date"),
            ]
        ],
        colWidths=[col_width, col_width],
    )
    table.setStyle(
        TableStyle(
            [
                ("BOX", (0, 0), (0, 0), 0.5, colors.grey),
                ("BOX", (1, 0), (1, 0), 0.5, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    return table


def build_pdf(record: ReportRecord, *, settings: Optional[ReportSettings] = None) -> bytes:
    """Render ``record`` into PDF bytes.

    Layout is fixed; long text wraps inside its cell or paragraph and spills
    onto further pages, each numbered in the footer.  Raises
    :class:`ExportFailure` when the document cannot be produced.
    """

    settings = settings or ReportSettings()
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=_page_size(settings),
        title=f"{settings.title} {record.text('po_code')}".strip(),
        author=settings.organisation,
        leftMargin=36,
        rightMargin=36,
        topMargin=54,
        bottomMargin=42,
        invariant=1,
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Title"], alignment=TA_CENTER)
    org_style = ParagraphStyle("Organisation", parent=styles["Heading3"], alignment=TA_CENTER)
    header_style = styles["Heading2"]
    body_style = styles["BodyText"]
    width = doc.width

    elements: list = [
        Paragraph(_text(settings.title), title_style),
        Paragraph(_text(settings.organisation), org_style),
        Spacer(1, 12),
        Paragraph("Basic Information", header_style),
    ]

    info = Table(
        [
            [Paragraph(f"<b>{_text(caption)}</b>", body_style), Paragraph(_text(record.text(name)), body_style)]
            for name, caption in BASIC_INFO_FIELDS
        ],
        colWidths=[0.32 * width, 0.68 * width],
        splitInRow=1,
    )
    info.setStyle(TableStyle([("GRID", (0, 0), (-1, -1), 0.5, colors.grey), ("VALIGN", (0, 0), (-1, -1), "TOP")]))
    elements.extend([info, Spacer(1, 12)])

    elements.append(Paragraph(_text(CONNECTIONS.title), header_style))
    elements.append(_checklist_table(CONNECTIONS.headers, record.connections, width, body_style))
    elements.append(Spacer(1, 12))

    if record.technical:
        elements.append(Paragraph("Technical Parameters of the System", header_style))
        elements.append(_technical_table(record.technical, width, body_style))
        elements.append(Spacer(1, 12))

    elements.append(Paragraph(_text(TESTS.title), header_style))
    elements.append(_checklist_table(TESTS.headers, record.tests, width, body_style))
    elements.append(Spacer(1, 12))

    elements.append(Paragraph("LSSE Remark", header_style))
    elements.append(Paragraph("<b>Detailed Observations and Actions Taken:</b>", body_style))
    for line in record.text("lsse_remark").splitlines() or [""]:
        elements.append(Paragraph(_text(line), body_style))
    elements.append(Spacer(1, 18))

    elements.append(KeepTogether([Paragraph("Signatures", header_style), _signatures_block(record, width, styles)]))

    footer = lambda canv, d: _page_footer(canv, d, title=settings.title)  # noqa: E731
    try:
        doc.build(elements, onFirstPage=footer, onLaterPages=footer)
    except LayoutError as exc:
        raise ExportFailure(f"Report layout failed: {exc}") from exc
    data = buffer.getvalue()
    logger.info("Rendered report %s: %d page(s), %d bytes", record.text("po_code"), page_count(data), len(data))
    return data


def page_count(data: bytes) -> int:
    return len(PdfReader(BytesIO(data)).pages)


def write_pdf(record: ReportRecord, path: Path, *, settings: Optional[ReportSettings] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(build_pdf(record, settings=settings))
    return path


class DocumentExporter:
    """Turns a :class:`ReportRecord` into a downloadable PDF."""

    def __init__(self, settings: Optional[ReportSettings] = None) -> None:
        self.settings = settings or ReportSettings()

    def export(self, record: ReportRecord) -> bytes:
        return build_pdf(record, settings=self.settings)

    def export_to(self, record: ReportRecord, directory: Path) -> Path:
        return write_pdf(record, Path(directory) / self.settings.document_filename, settings=self.settings)


__all__ = ["build_pdf", "write_pdf", "page_count", "DocumentExporter"]
