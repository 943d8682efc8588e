from __future__ import annotations

import logging
import re
from typing import Iterable, List

from nltk.stem.snowball import SnowballStemmer

logger = logging.getLogger(__name__)

DEFAULT_STOPWORDS = frozenset(
    {
        "el", "la", "de", "y", "que", "en", "a", "los", "se", "del", "las",
        "por", "un", "para", "con", "no", "una",
    }
)

# Anything outside the Spanish lowercase alphabet separates tokens.
_SEPARATOR = re.compile(r"[^a-záéíóúñ]+")


class Normalizer:
    def __init__(self, stopwords: Iterable[str] = DEFAULT_STOPWORDS, language: str = "spanish"):
        self.stopwords = frozenset(w.lower() for w in stopwords)
        self.language = language
        self._stemmer = SnowballStemmer(language)

    def _stem(self, word: str) -> str:
        try:
            return self._stemmer.stem(word)
        except Exception as e:
            # Unstemmable tokens are indexed as-is.
            logger.debug("Stemmer rejected %r (%s); keeping original", word, e)
            return word

    def normalize(self, text: str) -> List[str]:
        text = text.lower().replace("\n", " ")
        tokens = [t for t in _SEPARATOR.split(text) if t]
        return [self._stem(t) for t in tokens if t not in self.stopwords]
