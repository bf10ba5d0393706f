#!/usr/bin/env python3
# CUI // SP-PROPIN
"""Document reader: turn an uploaded RFP file into plain text.

Supports plain text (UTF-8), PDF (via pypdf) and Word (via python-docx).
This is the only place file bytes are touched; the segmenter only ever sees
decoded text.  Any failure surfaces as a single DocumentReadError carrying a
user-facing reason.
"""

import io
import logging
from pathlib import Path
from typing import Optional

from rfp_analyzer.config.app_config import DEFAULTS

logger = logging.getLogger("rfp_analyzer.ingest")


class DocumentReadError(Exception):
    """The document could not be read or decoded."""


# ── format readers ─────────────────────────────────────────────────────────────

def _read_pdf(stream) -> str:
    from pypdf import PdfReader
    reader = PdfReader(stream)
    pages = []
    for page in reader.pages:
        text = page.extract_text()
        if text:
            pages.append(text)
    return "\n\n".join(pages)


def _read_docx(stream) -> str:
    from docx import Document
    doc = Document(stream)
    paragraphs = [p.text for p in doc.paragraphs if p.text.strip()]
    return "\n".join(paragraphs)


def _decode_text(data: bytes) -> str:
    # Drop a UTF-8 BOM so the first line can still match "1. ..."
    return data.decode("utf-8-sig", errors="replace")


# ── public API ─────────────────────────────────────────────────────────────────

def decode_upload(filename: str, data: bytes,
                  allowed_extensions: Optional[list] = None,
                  max_bytes: Optional[int] = None) -> str:
    """Decode raw upload bytes to text based on the filename suffix.

    Limits left as None fall back to the built-in upload defaults.  Raises
    DocumentReadError for oversized files, disallowed suffixes and parser
    failures.
    """
    suffix = Path(filename or "").suffix.lower()
    if allowed_extensions is None:
        allowed_extensions = DEFAULTS["upload"]["allowed_extensions"]
    if max_bytes is None:
        max_bytes = DEFAULTS["upload"]["max_bytes"]

    if len(data) > max_bytes:
        raise DocumentReadError(
            f"{filename} is {len(data)} bytes; limit is {max_bytes}"
        )
    if suffix and suffix not in allowed_extensions:
        raise DocumentReadError(f"Unsupported file type: {suffix}")

    try:
        if suffix == ".pdf":
            return _read_pdf(io.BytesIO(data))
        if suffix == ".docx":
            return _read_docx(io.BytesIO(data))
        return _decode_text(data)
    except DocumentReadError:
        raise
    except Exception as e:
        logger.warning("Failed to read %s: %s", filename, e)
        raise DocumentReadError(f"Could not read {filename}: {e}") from e


def read_document(file_path, allowed_extensions: Optional[list] = None,
                  max_bytes: Optional[int] = None) -> str:
    """Read a document from disk and return its text."""
    path = Path(file_path)
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.warning("Failed to open %s: %s", path, e)
        raise DocumentReadError(f"Could not open {path.name}: {e}") from e
    return decode_upload(path.name, data,
                         allowed_extensions=allowed_extensions,
                         max_bytes=max_bytes)
