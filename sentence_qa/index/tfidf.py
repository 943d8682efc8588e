from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .schema import Unit

logger = logging.getLogger(__name__)


def build_vocabulary(token_sequences: Sequence[Sequence[str]]) -> Mapping[str, int]:
    vocab: dict[str, int] = {}
    for tokens in token_sequences:
        for tok in tokens:
            if tok not in vocab:
                vocab[tok] = len(vocab)
    return MappingProxyType(vocab)


def term_counts(tokens: Sequence[str], vocab: Mapping[str, int]) -> np.ndarray:
    """Raw counts over the vocabulary; tokens outside it are dropped."""
    vec = np.zeros(len(vocab), dtype=np.float64)
    for tok in tokens:
        idx = vocab.get(tok)
        if idx is not None:
            vec[idx] += 1.0
    return vec


def apply_idf(vec: np.ndarray, n_docs: int, df: np.ndarray) -> np.ndarray:
    out = vec.copy()
    nz = out > 0
    out[nz] *= np.log(n_docs / (1.0 + df[nz]))
    return out


def l2_normalize(vec: np.ndarray) -> np.ndarray:
    norm = float(np.sqrt(np.dot(vec, vec)))
    if norm == 0.0:
        return vec
    return vec / norm


def build_vectors(
    token_sequences: Sequence[Sequence[str]],
) -> Tuple[np.ndarray, Mapping[str, int], np.ndarray]:
    """TF-IDF weighted, L2-normalized vectors (one row per sequence).

    Returns (vectors, vocabulary, document_frequency). The vocabulary is frozen
    before any vector is computed; all three are read-only afterwards.
    """
    vocab = build_vocabulary(token_sequences)
    n_docs = len(token_sequences)

    counts = np.zeros((n_docs, len(vocab)), dtype=np.float64)
    for i, tokens in enumerate(token_sequences):
        counts[i] = term_counts(tokens, vocab)

    # once per unit, not per occurrence
    df = (counts > 0).sum(axis=0).astype(np.int64)

    vectors = np.zeros_like(counts)
    for i in range(n_docs):
        vectors[i] = l2_normalize(apply_idf(counts[i], n_docs, df))

    vectors.setflags(write=False)
    df.setflags(write=False)
    return vectors, vocab, df


class TfidfIndexer:
    """Sentence-level TF-IDF index over a single document."""

    def __init__(self):
        self.units: List[Unit] = []
        self.vectors: Optional[np.ndarray] = None
        self.vocabulary: Mapping[str, int] = MappingProxyType({})
        self.document_frequency: Optional[np.ndarray] = None
        self.n_docs = 0

    def build(self, units: List[Unit]) -> "TfidfIndexer":
        self.units = list(units)
        self.vectors, self.vocabulary, self.document_frequency = build_vectors(
            [u.tokens for u in self.units]
        )
        self.n_docs = len(self.units)
        logger.info(
            "Indexed %d units, vocabulary size %d", self.n_docs, len(self.vocabulary)
        )
        return self

    def vectorize(self, tokens: Sequence[str]) -> np.ndarray:
        """Project a token sequence through the frozen vocabulary and index-time IDF."""
        assert self.document_frequency is not None, "Index not built"
        vec = term_counts(tokens, self.vocabulary)
        return l2_normalize(apply_idf(vec, self.n_docs, self.document_frequency))
