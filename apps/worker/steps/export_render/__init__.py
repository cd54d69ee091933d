from .orchestrator import render_exports
from .preview_pdf import generate_preview_pdf
from .docx_render import generate_docx
from .common import export_filename

__all__ = [
    "render_exports",
    "generate_preview_pdf",
    "generate_docx",
    "export_filename",
]
