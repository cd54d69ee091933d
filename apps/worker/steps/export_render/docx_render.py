"""
DOCX rendering for the discharge summary export.

Page 1 carries the header, patient block, diagnosis, presentation and the
investigations that fit; everything else follows an explicit page break.
The page split comes from ``split_across_pages`` and is never recomputed.
"""
from __future__ import annotations

import io
import logging

from docx import Document as DocxDocument
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import UnrecognizedImageError
from docx.shared import Inches, Pt, RGBColor

from apps.worker.lib.layout import pair_treatments, split_across_pages
from apps.worker.steps.export_render import constants as labels
from apps.worker.steps.export_render.common import (
    _set_cell_borders,
    _set_cell_shading,
    _set_paragraph_shading,
    age_text,
    decode_logo,
    description_parts,
    format_date,
    narrative_lines,
)
from packages.shared.models import CategoryGroups, DischargeData, LayoutSplit, TreatmentPair

logger = logging.getLogger(__name__)

TABLE_STYLE = "Table Grid"


def _add_lines(paragraph, text: str | None) -> None:
    lines = narrative_lines(text)
    for idx, line in enumerate(lines):
        run = paragraph.add_run(line)
        if idx < len(lines) - 1:
            run.add_break()


def _section_header(doc, text: str):
    p = doc.add_paragraph()
    p.paragraph_format.space_before = Pt(10)
    p.paragraph_format.space_after = Pt(5)
    run = p.add_run(text)
    run.bold = True
    run.underline = True
    return p


def _label_cell(cell, label: str, value: str) -> None:
    p = cell.paragraphs[0]
    p.add_run(label).bold = True
    p.add_run(value)


def _add_patient_table(doc, data: DischargeData) -> None:
    tbl = doc.add_table(rows=3, cols=2)
    tbl.style = TABLE_STYLE
    tbl.alignment = WD_TABLE_ALIGNMENT.CENTER
    _label_cell(tbl.cell(0, 0), "NAME: ", data.patient_name)
    _label_cell(tbl.cell(0, 1), "DOA: ", format_date(data.admission_date))
    _label_cell(tbl.cell(1, 0), "AGE: ", age_text(data))
    _label_cell(tbl.cell(1, 1), "DOD: ", format_date(data.discharge_date))
    _label_cell(tbl.cell(2, 0), "IP NO: ", data.ip_no)


def _add_investigations_table(doc, groups: CategoryGroups) -> None:
    tbl = doc.add_table(rows=0, cols=2)
    tbl.style = TABLE_STYLE
    for category, items in groups.items():
        header = tbl.add_row().cells
        cell = header[0].merge(header[1])
        cell.paragraphs[0].add_run(category).bold = True
        _set_cell_shading(cell, labels.CATEGORY_SHADE)
        for item in items:
            cells = tbl.add_row().cells
            cells[0].text = format_date(item.date)
            cells[0].width = Inches(1.6)
            cells[1].width = Inches(4.9)
            name, sep, result = description_parts(item)
            p = cells[1].paragraphs[0]
            p.add_run(name).bold = True
            p.add_run(sep)
            p.add_run(result)


def _add_treatment_cell(cell, entry) -> None:
    if entry is None:
        return
    p = cell.paragraphs[0]
    p.add_run(entry.name).bold = True
    if entry.dosage:
        run = p.add_run(f" {entry.dosage}")
        run.font.color.rgb = RGBColor.from_string(labels.DOSAGE_GREY)


def _add_treatment_table(doc, pairs: list[TreatmentPair]) -> None:
    tbl = doc.add_table(rows=0, cols=2)
    tbl.style = TABLE_STYLE
    for first, second in pairs:
        cells = tbl.add_row().cells
        _add_treatment_cell(cells[0], first)
        _add_treatment_cell(cells[1], second)


def _add_boxed_text(doc, text: str, half_width: bool = False) -> None:
    tbl = doc.add_table(rows=1, cols=2 if half_width else 1)
    box = tbl.cell(0, 0)
    if half_width:
        # Second column stays empty and unbordered, giving a half-width box.
        _set_cell_borders(box)
    else:
        tbl.style = TABLE_STYLE
    _add_lines(box.paragraphs[0], text)


def _add_header(doc, data: DischargeData) -> None:
    logo = decode_logo(data.logo_base64)
    if logo:
        try:
            doc.add_picture(io.BytesIO(logo), width=Inches(1.2))
        except UnrecognizedImageError:
            logger.warning("Logo is not a recognised image format, skipping")
    if data.hospital_name:
        p = doc.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run(data.hospital_name)
        run.bold = True
        run.font.size = Pt(14)

    title = doc.add_heading(labels.TITLE, level=1)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    if data.discharge_against_medical_advice:
        banner = doc.add_paragraph()
        banner.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = banner.add_run(labels.AMA_BANNER)
        run.bold = True
        run.underline = True
        _set_paragraph_shading(banner, labels.AMA_SHADE)


def build_docx(data: DischargeData, split: LayoutSplit | None = None):
    """Build the python-docx document for a summary."""
    if split is None:
        split = split_across_pages(data)
    doc = DocxDocument()

    for section in doc.sections:
        section.left_margin = Inches(0.75)
        section.right_margin = Inches(0.75)
        section.top_margin = Inches(0.75)
        section.bottom_margin = Inches(0.75)

    # Page 1
    _add_header(doc, data)
    _add_patient_table(doc, data)

    _section_header(doc, labels.FINAL_DIAGNOSIS)
    _add_lines(doc.add_paragraph(), data.final_diagnosis)
    _section_header(doc, labels.CLINICAL_PRESENTATION)
    _add_lines(doc.add_paragraph(), data.clinical_presentation)

    if split.page1_groups:
        _section_header(doc, labels.INVESTIGATIONS)
        _add_investigations_table(doc, split.page1_groups)

    # Page 2
    doc.add_page_break()

    if split.page2_groups:
        _section_header(doc, labels.INVESTIGATIONS_CONTINUED)
        _add_investigations_table(doc, split.page2_groups)

    if data.treatment_given:
        _section_header(doc, labels.TREATMENT_GIVEN)
        _add_treatment_table(doc, pair_treatments(data.treatment_given))

    _section_header(doc, labels.HOSPITAL_COURSE)
    _add_boxed_text(doc, data.hospital_course)
    _section_header(doc, labels.DISCHARGE_ADVICE)
    _add_boxed_text(doc, data.discharge_advice)
    _section_header(doc, labels.FOLLOW_UP)
    _add_boxed_text(doc, data.follow_up, half_width=True)

    signature = doc.add_paragraph()
    signature.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    signature.paragraph_format.space_before = Pt(40)
    run = signature.add_run(labels.SIGNATURE)
    run.bold = True
    run.underline = True

    return doc


def generate_docx(data: DischargeData, split: LayoutSplit | None = None) -> bytes:
    """Render the discharge summary as DOCX bytes."""
    doc = build_docx(data, split)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()
