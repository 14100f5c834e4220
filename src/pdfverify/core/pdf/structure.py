"""Informational PDF structure check via pikepdf."""

from __future__ import annotations

import io
import logging

from .. import require_pikepdf as _require_pikepdf

_logger = logging.getLogger(__name__)


def check_pdf_structure(pdf_bytes: bytes) -> str:
    """Open the PDF with pikepdf and describe the outcome.

    Some validly signed PDFs have non-standard page trees that pikepdf
    rejects, so the outcome never affects the verification verdict.

    Returns:
        A one-line human-readable description.
    """
    pikepdf = _require_pikepdf()
    try:
        with pikepdf.open(io.BytesIO(pdf_bytes)) as pdf:
            page_count = len(pdf.pages)
    except (ValueError, RuntimeError, OSError, pikepdf.PdfError) as e:
        _logger.warning("pikepdf structural check failed (non-fatal): %s", e)
        return f"structural warning -- {e}"
    return f"valid PDF, {page_count} page(s)"
