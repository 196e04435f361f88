import logging
from pathlib import Path

import docx2txt
from pdfminer.high_level import extract_text as pdf_extract_text

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf", ".docx", ".txt"}


def is_supported(filename: str) -> bool:
    return Path(filename or "").suffix.lower() in ALLOWED_EXTENSIONS


def extract_text_from_file(path: Path) -> str:
    """Extract text from PDF, DOCX, or TXT files; empty string if none is recoverable"""
    path = Path(path)
    try:
        if path.suffix.lower() == ".pdf":
            text = pdf_extract_text(str(path))
        elif path.suffix.lower() == ".docx":
            text = docx2txt.process(str(path))
        else:
            text = path.read_text(encoding="utf-8", errors="ignore")
    except Exception as e:
        logger.warning("Text extraction failed for %s: %s", path.name, e)
        raise ValueError(f"Could not extract text from {path.name}: {str(e)}")
    return text or ""
