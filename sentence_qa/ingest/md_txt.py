from pathlib import Path

from ..errors import SourceExtractionError


def read_md_or_txt(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceExtractionError(path, str(e)) from e
