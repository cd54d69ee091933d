"""
API route: Summaries (layout, preview, export)
"""
from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel

from apps.worker.lib.layout import pair_treatments, split_across_pages
from apps.worker.steps.export_render import render_exports
from apps.worker.steps.export_render.common import export_filename
from apps.worker.steps.export_render.orchestrator import PDF_MIME
from apps.worker.steps.export_render.preview_pdf import generate_preview_pdf
from packages.shared.models import DischargeData

router = APIRouter(prefix="/summaries", tags=["summaries"])


class TreatmentPairResponse(BaseModel):
    left: str
    right: str | None = None


class LayoutResponse(BaseModel):
    available_lines: int
    page1: dict[str, list[str]]
    page2: dict[str, list[str]]
    page1_count: int
    page2_count: int
    treatment_pairs: list[TreatmentPairResponse]
    filename: str


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}


@router.post("/layout", response_model=LayoutResponse)
def get_layout(data: DischargeData):
    """Report which investigation ids land on each page."""
    summary = split_across_pages(data).summary()
    pairs = [
        TreatmentPairResponse(left=first.id, right=second.id if second else None)
        for first, second in pair_treatments(data.treatment_given)
    ]
    return LayoutResponse(**summary, treatment_pairs=pairs, filename=export_filename(data))


@router.post("/preview")
def get_preview(data: DischargeData):
    """Render the preview PDF inline."""
    pdf = generate_preview_pdf(data)
    return Response(content=pdf, media_type=PDF_MIME)


@router.post("/export")
def export_docx(data: DischargeData):
    """Render the Word export as a download."""
    exports = render_exports(data, include_preview=False)
    artifact = exports.artifacts["docx"]
    headers = _attachment(artifact.filename)
    headers["X-Export-Id"] = exports.export_id
    return Response(content=artifact.content, media_type=artifact.mime_type, headers=headers)
