"""
Resume file reading for the resume analyzer.

PDF (PyPDF2), Word (python-docx) and plain text uploads are turned into
text before they reach the content generator. Anything that yields no
text raises ResumeFileError, which the prep routes map to a 4xx.
"""

import io
import os
import zipfile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from app.core.errors import ResumeFileError, ResumeTooLargeError


MAX_RESUME_MB = 5
MAX_RESUME_BYTES = MAX_RESUME_MB * 1024 * 1024


def _pdf_text(content: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(content))
        return '\n'.join(page.extract_text() or '' for page in reader.pages)
    except (PdfReadError, ValueError) as e:
        raise ResumeFileError(f"Could not read the PDF resume: {e}") from e


def _docx_text(content: bytes) -> str:
    """Paragraphs first, then table rows joined with ' | '."""
    try:
        doc = Document(io.BytesIO(content))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise ResumeFileError(f"Could not read the Word resume: {e}") from e

    lines = [para.text for para in doc.paragraphs if para.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(' | '.join(cells))
    return '\n'.join(lines)


def _txt_text(content: bytes) -> str:
    try:
        return content.decode('utf-8')
    except UnicodeDecodeError:
        return content.decode('latin-1')


# extension -> (display name, reader)
RESUME_FORMATS = {
    '.pdf': ("PDF", _pdf_text),
    '.docx': ("Word Document", _docx_text),
    '.txt': ("Plain Text", _txt_text),
}


def resume_text(filename: str, content: bytes) -> str:
    """
    Extract the text of an uploaded resume.

    Raises:
        ResumeTooLargeError: file is over MAX_RESUME_MB
        ResumeFileError: unsupported type, unreadable or empty file
    """
    ext = os.path.splitext(filename or '')[1].lower()
    if ext not in RESUME_FORMATS:
        raise ResumeFileError(f"Unsupported resume file '{filename}'. Upload a PDF, DOCX or TXT file.")
    if len(content) > MAX_RESUME_BYTES:
        raise ResumeTooLargeError(f"Resume file is too large. Maximum size: {MAX_RESUME_MB}MB")

    _, read = RESUME_FORMATS[ext]
    text = read(content).strip()
    if not text:
        raise ResumeFileError("No text found in the resume file. It may be empty, scanned or corrupted.")
    return text


def supported_formats() -> dict:
    return {
        "supported_formats": [
            {"extension": ext, "name": name} for ext, (name, _) in RESUME_FORMATS.items()
        ],
        "max_size_mb": MAX_RESUME_MB
    }
