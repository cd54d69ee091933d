"""
Shared formatting helpers for the preview and export surfaces.
"""
from __future__ import annotations

import base64
import binascii
from datetime import date

from apps.worker.steps.export_render.constants import (
    CHUNK_CHARS,
    DEFAULT_PATIENT_LABEL,
    EXPORT_SUFFIX,
    ISO_DATE_RE,
    UNSAFE_FILENAME_RE,
)
from packages.shared.models import DischargeData, Gender, InvestigationEntry


def format_date(value: str | None) -> str:
    """ISO ``YYYY-MM-DD`` -> ``DD/MM/YYYY``. Unparseable input is returned as typed."""
    if not value:
        return ""
    m = ISO_DATE_RE.match(value)
    if not m:
        return value.strip()
    try:
        d = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return value.strip()
    return f"{d.day:02d}/{d.month:02d}/{d.year}"


def age_text(data: DischargeData) -> str:
    if data.gender == Gender.UNSET:
        return data.age
    return f"{data.age} /{data.gender.value.lower()}"


def description_parts(item: InvestigationEntry) -> tuple[str, str, str]:
    """(name, separator, result); the dash only appears when both are present."""
    sep = " - " if item.name and item.result else ""
    return item.name, sep, item.result


def narrative_lines(text: str | None) -> list[str]:
    """Split a narrative field on explicit newlines, keeping blank lines."""
    if not text:
        return [""]
    return text.replace("\r\n", "\n").split("\n")


def chunk_text(line: str, size: int = CHUNK_CHARS) -> list[str]:
    """
    Break one line into word-aligned pieces of at most ``size`` characters.

    A table row cannot split across pages, so long text is laid out as one
    row per piece. Words longer than ``size`` are cut.
    """
    if len(line) <= size:
        return [line]
    pieces: list[str] = []
    current = ""
    for word in line.split(" "):
        while len(word) > size:
            if current:
                pieces.append(current)
                current = ""
            pieces.append(word[:size])
            word = word[size:]
        candidate = f"{current} {word}" if current else word
        if len(candidate) > size:
            pieces.append(current)
            current = word
        else:
            current = candidate
    if current:
        pieces.append(current)
    return pieces


def export_filename(data: DischargeData, extension: str = "docx") -> str:
    name = UNSAFE_FILENAME_RE.sub("_", (data.patient_name or "").strip()) or DEFAULT_PATIENT_LABEL
    return f"{name}{EXPORT_SUFFIX}.{extension}"


def decode_logo(logo_base64: str | None) -> bytes | None:
    """Decode a data-URL or bare base64 logo; None when absent or invalid."""
    if not logo_base64:
        return None
    payload = logo_base64.split(",", 1)[1] if logo_base64.startswith("data:") else logo_base64
    payload = "".join(payload.split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None


def _set_cell_shading(cell, hex_color: str):
    """Set background shading on a DOCX table cell."""
    from docx.oxml.ns import qn
    from lxml import etree
    shading = etree.SubElement(cell._element.get_or_add_tcPr(), qn("w:shd"))
    shading.set(qn("w:fill"), hex_color)
    shading.set(qn("w:val"), "clear")


def _set_paragraph_shading(paragraph, hex_color: str):
    """Set background shading on a DOCX paragraph."""
    from docx.oxml.ns import qn
    from lxml import etree
    shading = etree.SubElement(paragraph._p.get_or_add_pPr(), qn("w:shd"))
    shading.set(qn("w:fill"), hex_color)
    shading.set(qn("w:val"), "clear")


def _set_cell_borders(cell, color: str = "000000", size: int = 4):
    """Draw a single-line box around one DOCX table cell."""
    from docx.oxml.ns import qn
    from lxml import etree
    borders = etree.SubElement(cell._element.get_or_add_tcPr(), qn("w:tcBorders"))
    for edge in ("top", "left", "bottom", "right"):
        el = etree.SubElement(borders, qn(f"w:{edge}"))
        el.set(qn("w:val"), "single")
        el.set(qn("w:sz"), str(size))
        el.set(qn("w:color"), color)
