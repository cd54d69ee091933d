"""
PDF preview of the discharge summary.

Mirrors the DOCX export section for section; both consume the same
``LayoutSplit`` so the page break falls after the same investigation row.
"""
from __future__ import annotations

import io
import logging
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    Image,
    PageBreak,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from apps.worker.lib.layout import pair_treatments, split_across_pages
from apps.worker.steps.export_render import constants as labels
from apps.worker.steps.export_render.common import (
    age_text,
    chunk_text,
    decode_logo,
    description_parts,
    format_date,
    narrative_lines,
)
from packages.shared.models import CategoryGroups, DischargeData, LayoutSplit, TreatmentPair

logger = logging.getLogger(__name__)

MARGIN = 0.75 * inch
LINE_WIDTH = 0.75
GRID = ("GRID", (0, 0), (-1, -1), LINE_WIDTH, colors.black)
BOX = ("BOX", (0, 0), (-1, -1), LINE_WIDTH, colors.black)


def _styles() -> dict[str, Any]:
    base = getSampleStyleSheet()
    normal = ParagraphStyle("SummaryBody", parent=base["Normal"], fontSize=9.5, leading=12)
    return {
        "normal": normal,
        "hospital": ParagraphStyle("Hospital", parent=base["Title"], fontSize=14, spaceAfter=2),
        "title": ParagraphStyle("SummaryTitle", parent=base["Title"], fontSize=13, spaceAfter=6),
        "banner": ParagraphStyle(
            "AmaBanner",
            parent=normal,
            alignment=TA_CENTER,
            fontName="Helvetica-Bold",
            backColor=colors.HexColor(f"#{labels.AMA_SHADE}"),
            spaceAfter=6,
        ),
        "section": ParagraphStyle("Section", parent=normal, fontName="Helvetica-Bold", spaceBefore=8, spaceAfter=4),
        "signature": ParagraphStyle("Signature", parent=normal, alignment=TA_RIGHT, spaceBefore=40),
    }


def _text(value: str | None) -> str:
    """Escape narrative text for a Paragraph, turning newlines into breaks."""
    lines = [escape(line) for line in narrative_lines(value)]
    return "<br/>".join(lines)


def _section(title: str, styles: dict[str, Any]) -> Paragraph:
    return Paragraph(f"<u>{escape(title)}</u>", styles["section"])


def _logo_flowable(data: DischargeData) -> Image | None:
    logo = decode_logo(data.logo_base64)
    if not logo:
        return None
    try:
        reader = ImageReader(io.BytesIO(logo))
        w, h = reader.getSize()
    except OSError:
        logger.warning("Logo is not a recognised image format, skipping")
        return None
    height = 0.8 * inch
    return Image(io.BytesIO(logo), width=height * w / h, height=height)


def _patient_table(data: DischargeData, styles: dict[str, Any], width: float) -> Table:
    normal = styles["normal"]

    def cell(label: str, value: str) -> Paragraph:
        return Paragraph(f"<b>{label}</b> {escape(value)}", normal)

    rows = [
        [cell("NAME:", data.patient_name), cell("DOA:", format_date(data.admission_date))],
        [cell("AGE:", age_text(data)), cell("DOD:", format_date(data.discharge_date))],
        [cell("IP NO:", data.ip_no), ""],
    ]
    tbl = Table(rows, colWidths=[width / 2, width / 2])
    tbl.setStyle(TableStyle([GRID, ("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return tbl


def _description_rows(item) -> list[str]:
    """Paragraph markup for one investigation, one entry per table row."""
    name, sep, result = description_parts(item)
    names = [f"<b>{escape(piece)}</b>" for piece in chunk_text(name)]
    results = [escape(piece) for piece in chunk_text(result)]
    return names[:-1] + [f"{names[-1]}{escape(sep)}{results[0]}"] + results[1:]


def _investigations_table(groups: CategoryGroups, styles: dict[str, Any], width: float) -> Table:
    normal = styles["normal"]
    shade = colors.HexColor(f"#{labels.CATEGORY_SHADE}")
    rows: list[list[Any]] = []
    commands: list[tuple] = [BOX, ("VALIGN", (0, 0), (-1, -1), "TOP")]
    for category, items in groups.items():
        r = len(rows)
        rows.append([Paragraph(f"<b>{escape(category)}</b>", normal), ""])
        commands.append(("SPAN", (0, r), (1, r)))
        commands.append(("BACKGROUND", (0, r), (1, r), shade))
        commands.append(("LINEABOVE", (0, r), (1, r), LINE_WIDTH, colors.black))
        for item in items:
            first = len(rows)
            for idx, desc in enumerate(_description_rows(item)):
                date_cell = Paragraph(escape(format_date(item.date)), normal) if idx == 0 else ""
                rows.append([date_cell, Paragraph(desc, normal)])
            last = len(rows) - 1
            commands.append(("LINEABOVE", (0, first), (1, first), LINE_WIDTH, colors.black))
            commands.append(("LINEBEFORE", (1, first), (1, last), LINE_WIDTH, colors.black))
            if last > first:
                commands.append(("TOPPADDING", (0, first + 1), (1, last), 0))
                commands.append(("BOTTOMPADDING", (0, first), (1, last - 1), 0))
    tbl = Table(rows, colWidths=[1.1 * inch, width - 1.1 * inch])
    tbl.setStyle(TableStyle(commands))
    return tbl


def _treatment_cell(entry, styles: dict[str, Any]) -> Any:
    if entry is None:
        return ""
    text = f"<b>{escape(entry.name)}</b>"
    if entry.dosage:
        text += f' <font color="#{labels.DOSAGE_GREY}">{escape(entry.dosage)}</font>'
    return Paragraph(text, styles["normal"])


def _treatment_table(pairs: list[TreatmentPair], styles: dict[str, Any], width: float) -> Table:
    rows = [[_treatment_cell(first, styles), _treatment_cell(second, styles)] for first, second in pairs]
    tbl = Table(rows, colWidths=[width / 2, width / 2])
    tbl.setStyle(TableStyle([GRID, ("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return tbl


def _boxed(title: str, value: str, styles: dict[str, Any], width: float, upper: bool = False) -> Table:
    """A boxed section with one row per line so long text can run onto the next page."""
    normal = styles["normal"]
    rows: list[list[Any]] = [[_section(title, styles)]]
    for line in narrative_lines(value):
        for piece in chunk_text(line.upper() if upper else line):
            rows.append([Paragraph(escape(piece) or "&nbsp;", normal)])
    rows.append([Spacer(1, 0.2 * inch)])
    tbl = Table(rows, colWidths=[width], hAlign="LEFT")
    tbl.setStyle(
        TableStyle(
            [
                BOX,
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("TOPPADDING", (0, 1), (-1, -1), 0),
                ("BOTTOMPADDING", (0, 1), (-1, -1), 0),
            ]
        )
    )
    return tbl


def _draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawRightString(A4[0] - MARGIN, 0.5 * inch, f"Page {doc.page}")
    canvas.restoreState()


def build_preview_flowables(data: DischargeData, split: LayoutSplit, styles: dict[str, Any], width: float) -> list:
    flowables: list = []

    # Page 1
    logo = _logo_flowable(data)
    if logo is not None:
        flowables.append(logo)
    if data.hospital_name:
        flowables.append(Paragraph(escape(data.hospital_name), styles["hospital"]))
    flowables.append(Paragraph(f"<u>{labels.TITLE}</u>", styles["title"]))
    if data.discharge_against_medical_advice:
        flowables.append(Paragraph(f"<u>{labels.AMA_BANNER}</u>", styles["banner"]))
    flowables.append(_patient_table(data, styles, width))
    flowables.append(Spacer(1, 0.15 * inch))

    flowables.append(_section(labels.FINAL_DIAGNOSIS, styles))
    flowables.append(Paragraph(_text(data.final_diagnosis), styles["normal"]))
    flowables.append(_section(labels.CLINICAL_PRESENTATION, styles))
    flowables.append(Paragraph(_text(data.clinical_presentation), styles["normal"]))

    if split.page1_groups:
        flowables.append(_section(labels.INVESTIGATIONS, styles))
        flowables.append(_investigations_table(split.page1_groups, styles, width))

    # Page 2
    flowables.append(PageBreak())

    if split.page2_groups:
        flowables.append(_section(labels.INVESTIGATIONS_CONTINUED, styles))
        flowables.append(_investigations_table(split.page2_groups, styles, width))

    if data.treatment_given:
        flowables.append(_section(labels.TREATMENT_GIVEN, styles))
        flowables.append(_treatment_table(pair_treatments(data.treatment_given), styles, width))

    flowables.append(Spacer(1, 0.15 * inch))
    flowables.append(_boxed(labels.HOSPITAL_COURSE, data.hospital_course, styles, width))
    flowables.append(Spacer(1, 0.15 * inch))
    flowables.append(_boxed(labels.DISCHARGE_ADVICE, data.discharge_advice, styles, width))
    flowables.append(Spacer(1, 0.15 * inch))
    flowables.append(_boxed(labels.FOLLOW_UP, data.follow_up, styles, width / 2, upper=True))

    flowables.append(Paragraph(f"<b><u>{labels.SIGNATURE.upper()}</u></b>", styles["signature"]))
    return flowables


def generate_preview_pdf(data: DischargeData, split: LayoutSplit | None = None) -> bytes:
    """Render the on-screen preview as A4 PDF bytes."""
    if split is None:
        split = split_across_pages(data)
    buffer = io.BytesIO()
    doc = BaseDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=labels.TITLE.title(),
    )
    frame = Frame(doc.leftMargin, doc.bottomMargin, doc.width, doc.height, id="normal")
    doc.addPageTemplates([PageTemplate(id="summary", frames=[frame], onPage=_draw_page_number)])
    doc.build(build_preview_flowables(data, split, _styles(), doc.width))
    return buffer.getvalue()
