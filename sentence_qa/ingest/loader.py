from __future__ import annotations

import logging
from pathlib import Path

from ..errors import SourceExtractionError
from .clean import normalize_text
from .md_txt import read_md_or_txt
from .pdf import extract_pdf_text

logger = logging.getLogger(__name__)

SUPPORTED = {".pdf", ".md", ".txt"}


def load_text(path: str | Path, clean: bool = True) -> str:
    """Document text provider: the full text of one source as a single string."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED:
        raise SourceExtractionError(path, f"unsupported file type '{suffix or path.name}'")
    if not path.is_file():
        raise SourceExtractionError(path, "file not found")

    if suffix == ".pdf":
        text = extract_pdf_text(path)
    else:
        text = read_md_or_txt(path)

    if clean:
        text = normalize_text(text)
    logger.debug("Loaded %d characters from %s", len(text), path)
    return text
