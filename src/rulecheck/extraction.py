"""
Text extraction adapter -- uploaded bytes in, cleaned plain text out.

PDF bytes go through pdfplumber; plain text is decoded as UTF-8. Both are
passed through clean_text(), which strips markup and collapses whitespace so
rule matching sees one normalized line of prose.
"""

import io
import logging
import re

import pdfplumber
from bs4 import BeautifulSoup

from .errors import InputError

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"
TEXT_FILE_SUFFIXES = (".forbidden", ".ext")

HTML_INDICATORS = ["<script", "<html", "<body", "window.__", "document.get", "<!doctype"]

_ENTITY_RE = re.compile(r"&[#\w]+;")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Remove script/style blocks, tags, and entities, then collapse whitespace."""
    if not text:
        return ""
    soup = BeautifulSoup(text, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    stripped = soup.get_text(" ")
    stripped = _ENTITY_RE.sub("", stripped)
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def _extract_pdf_text(data: bytes) -> str:
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.error(f"[Extraction] PDF parsing error: {type(e).__name__}: {e}")
        raise InputError(
            "Failed to extract text from PDF. Ensure it's a valid PDF file."
        ) from e
    logger.debug(f"[Extraction] Extracted {len(pages)} PDF page(s)")
    return "\n".join(pages)


def extract_text(data: bytes, mime_type: str, filename: str = "") -> str:
    """
    Extract cleaned text from an uploaded file.

    Args:
        data: Raw file bytes.
        mime_type: Declared MIME type of the upload.
        filename: Original filename; .forbidden and .ext files are read as text.

    Raises:
        InputError: The type is unsupported or the PDF cannot be parsed.
    """
    if mime_type == PDF_MIME_TYPE:
        raw = _extract_pdf_text(data)
    elif mime_type == TEXT_MIME_TYPE or filename.endswith(TEXT_FILE_SUFFIXES):
        raw = data.decode("utf-8", errors="replace")
    else:
        raise InputError("Unsupported file type for text extraction")
    return clean_text(raw)


def contains_html(text: str) -> bool:
    """True if text still looks like HTML or JavaScript after cleaning."""
    lowered = text.lower()
    return any(indicator in lowered for indicator in HTML_INDICATORS)


def parse_forbidden_words(data: bytes) -> list[str]:
    """
    Parse a forbidden-words upload: one word or phrase per line.

    Lines are trimmed and lowercased; blanks and repeats are dropped. Order is
    preserved so failure details list words in the order they were uploaded.
    """
    text = data.decode("utf-8", errors="replace")
    words: list[str] = []
    for line in text.split("\n"):
        word = line.strip().lower()
        if word and word not in words:
            words.append(word)
    logger.info(f"[Extraction] Parsed {len(words)} forbidden word(s)")
    return words
