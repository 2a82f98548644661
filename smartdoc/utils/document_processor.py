"""
Text extraction for uploaded documents (PDF, DOCX, TXT, HTML)
"""

import logging
from pathlib import Path

from bs4 import BeautifulSoup
from docx import Document
from pypdf import PdfReader

from smartdoc.config import ALLOWED_EXTENSIONS
from smartdoc.utils.errors import UnsupportedFileTypeError

logger = logging.getLogger(__name__)

INVALID_TYPE_MESSAGE = "Invalid file type. Only PDF, DOCX, TXT, and HTML files are allowed."


def is_allowed_file(filename: str) -> bool:
    """Check the file extension against the allowed upload types."""
    return Path(filename).suffix.lower() in ALLOWED_EXTENSIONS


def extract_text(path: str, filename: str) -> str:
    """
    Extract plain text from a stored upload.

    Args:
        path: Location of the uploaded file on disk
        filename: Original filename (its extension selects the extractor)

    Returns:
        Extracted text (may be empty, e.g. for a scanned PDF)

    Raises:
        UnsupportedFileTypeError: If the extension is not supported
    """
    ext = Path(filename).suffix.lower()

    if ext == ".pdf":
        reader = PdfReader(path)
        text = "\n".join(page.extract_text() or "" for page in reader.pages)
    elif ext == ".docx":
        doc = Document(path)
        text = "\n".join(p.text for p in doc.paragraphs)
    elif ext == ".html":
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            soup = BeautifulSoup(f.read(), "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()
        text = soup.get_text(separator="\n")
    elif ext == ".txt":
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    else:
        raise UnsupportedFileTypeError(INVALID_TYPE_MESSAGE)

    logger.info(f"[EXTRACT] {filename}: {len(text)} characters")
    return text
