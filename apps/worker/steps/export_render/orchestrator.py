"""
Orchestrator for discharge summary rendering.

Computes the page split once and hands the same split to both the PDF
preview and the DOCX export.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from apps.worker.lib.layout import split_across_pages
from apps.worker.steps.export_render.common import export_filename
from apps.worker.steps.export_render.docx_render import generate_docx
from apps.worker.steps.export_render.preview_pdf import generate_preview_pdf
from packages.shared.models import DischargeData, LayoutSplit
from packages.shared.storage import save_export, sha256_bytes
from packages.shared.utils.env_utils import parse_bool_env

logger = logging.getLogger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIME = "application/pdf"


@dataclass
class RenderedArtifact:
    filename: str
    mime_type: str
    content: bytes
    sha256: str
    path: Path | None = None


@dataclass
class SummaryExports:
    export_id: str
    split: LayoutSplit
    artifacts: dict[str, RenderedArtifact] = field(default_factory=dict)


def _artifact(filename: str, mime_type: str, content: bytes) -> RenderedArtifact:
    return RenderedArtifact(filename=filename, mime_type=mime_type, content=content, sha256=sha256_bytes(content))


def render_exports(
    data: DischargeData,
    include_preview: bool = True,
    save: bool | None = None,
) -> SummaryExports:
    """
    Render the DOCX export (and optionally the PDF preview) from one split.

    When ``save`` is true (default: the ``SAVE_EXPORTS`` env var) artifacts
    are also written under ``DATA_DIR/exports/<export_id>/``.
    """
    export_id = uuid.uuid4().hex
    split = split_across_pages(data)
    logger.info(
        "summary_layout export_id=%s available_lines=%s page1_rows=%s page2_rows=%s categories=%s",
        export_id,
        split.available_lines,
        split.page1_count,
        split.page2_count,
        len(split.grouped),
    )

    result = SummaryExports(export_id=export_id, split=split)
    try:
        result.artifacts["docx"] = _artifact(export_filename(data, "docx"), DOCX_MIME, generate_docx(data, split))
        if include_preview:
            result.artifacts["pdf"] = _artifact(export_filename(data, "pdf"), PDF_MIME, generate_preview_pdf(data, split))
    except Exception:
        logger.exception("summary_render_failed export_id=%s", export_id)
        raise

    if save is None:
        save = parse_bool_env("SAVE_EXPORTS", False)
    if save:
        for artifact in result.artifacts.values():
            artifact.path = save_export(export_id, artifact.filename, artifact.content)
        logger.info("summary_exports_saved export_id=%s count=%s", export_id, len(result.artifacts))

    return result
