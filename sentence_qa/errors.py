from __future__ import annotations

from pathlib import Path


class SentenceQAError(Exception):
    """Base class for errors raised by sentence_qa."""


class ConfigError(SentenceQAError):
    pass


class SourceExtractionError(SentenceQAError):
    """The document text provider could not produce text for a source."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot extract text from {self.path}: {reason}")
