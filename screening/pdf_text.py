"""Resume PDF to plain text."""

import base64
import binascii
import logging
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PyPdfError

logger = logging.getLogger(__name__)

PDF_BASE64_PREFIX = "PDF_BASE64:"


class PdfExtractionError(ValueError):
    """A resume file could not be decoded or read."""


def decode_base64_pdf(content: str) -> bytes:
    """Decode base64 PDF content, with or without a data-URL or PDF_BASE64: prefix."""
    data = (content or "").strip()
    if data.startswith(PDF_BASE64_PREFIX):
        data = data[len(PDF_BASE64_PREFIX):]
    elif data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    if not data:
        raise PdfExtractionError("PDF content is empty")
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PdfExtractionError(f"Invalid base64 PDF content: {e}")


def extract_text_from_pdf_bytes(data: bytes) -> str:
    """Concatenate the extractable text of every page."""
    if not data:
        raise PdfExtractionError("PDF file is empty")
    try:
        reader = PdfReader(BytesIO(data))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except (PyPdfError, ValueError, OSError) as e:
        raise PdfExtractionError(f"PDF parsing failed: {e}")
    text = "\n".join(p for p in pages if p)
    logger.debug(f"Extracted {len(text)} characters from {len(pages)} PDF page(s)")
    return text
