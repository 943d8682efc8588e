from __future__ import annotations

from typing import Iterable, List

DEFAULT_ABBREVIATIONS = frozenset({"art.", "arts.", "etc.", "sr.", "sra.", "dr."})


def _as_abbreviation(s: str) -> str:
    s = s.strip().lower()
    return s if s.endswith(".") else s + "."


class Segmenter:
    """Splits raw text into sentences on '.', re-joining splits that follow an abbreviation."""

    def __init__(self, abbreviations: Iterable[str] = DEFAULT_ABBREVIATIONS):
        self.abbreviations = frozenset(_as_abbreviation(a) for a in abbreviations if a.strip())

    def _ends_with_abbreviation(self, sentence: str) -> bool:
        words = sentence.split()
        if not words:
            return False
        return words[-1].lower() + "." in self.abbreviations

    def segment(self, raw_text: str) -> List[str]:
        sentences: List[str] = []
        for i, fragment in enumerate(raw_text.split(".")):
            s = fragment.strip()
            if i > 0 and sentences and self._ends_with_abbreviation(sentences[-1]):
                sentences[-1] += ". " + s
                continue
            sentences.append(s)
        return sentences


def filter_units(sentences: Iterable[str], min_chars: int = 20) -> List[str]:
    """Trimmed sentences strictly longer than min_chars, in order."""
    out = []
    for s in sentences:
        s = s.strip()
        if len(s) > min_chars:
            out.append(s)
    return out
