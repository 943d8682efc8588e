from pathlib import Path

from pypdf import PdfReader

from ..errors import SourceExtractionError


def extract_pdf_text(path: Path) -> str:
    """Return the plain text of every page, joined with newlines.

    Any failure to open or read a page aborts the whole extraction.
    """
    try:
        reader = PdfReader(str(path))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        # pypdf surfaces malformed content streams as KeyError/TypeError/etc.
        raise SourceExtractionError(path, f"{type(e).__name__}: {e}") from e
    return "\n".join(pages)
