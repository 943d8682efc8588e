from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..index.schema import Hit, Ranking
from ..index.tfidf import TfidfIndexer
from ..normalize import Normalizer

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.2


def cosine(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity; 0.0 when either vector is all zeros."""
    na = float(np.sqrt(np.dot(a, a)))
    nb = float(np.sqrt(np.dot(b, b)))
    if na == 0.0 or nb == 0.0:
        return 0.0
    return float(np.dot(a, b)) / (na * nb)


def select_best(scores: Sequence[float], threshold: float = DEFAULT_THRESHOLD) -> Optional[int]:
    """Index of the highest score if it is strictly above threshold.

    Ties keep the earliest index.
    """
    best_idx = None
    best_score = 0.0
    for i, s in enumerate(scores):
        if best_idx is None or s > best_score:
            best_idx, best_score = i, s
    if best_idx is None or not best_score > threshold:
        return None
    return best_idx


class Ranker:
    def __init__(
        self,
        indexer: TfidfIndexer,
        normalizer: Normalizer,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.indexer = indexer
        self.normalizer = normalizer
        self.threshold = threshold

    def query_vector(self, query: str) -> np.ndarray:
        return self.indexer.vectorize(self.normalizer.normalize(query.strip()))

    def _scores_for(self, q: np.ndarray) -> List[float]:
        if self.indexer.vectors is None:
            return []
        return [cosine(v, q) for v in self.indexer.vectors]

    def scores(self, query: str) -> List[float]:
        return self._scores_for(self.query_vector(query))

    def search(self, query: str, threshold: Optional[float] = None) -> Ranking:
        """Score every unit and pick the best one above `threshold`."""
        threshold = self.threshold if threshold is None else float(threshold)
        tokens = self.normalizer.normalize(query.strip())
        logger.debug("Query tokens: %s", tokens)
        scores = self._scores_for(self.indexer.vectorize(tokens))
        ranking = Ranking(tokens=tokens, scores=scores, threshold=threshold)

        best = select_best(scores, threshold)
        if best is None:
            logger.debug(
                "No unit above threshold %.2f (top score %.4f)", threshold, ranking.top_score
            )
        else:
            unit = self.indexer.units[best]
            ranking.hit = Hit(index=unit.index, score=scores[best], text=unit.text)
        return ranking

    def rank(self, query: str, threshold: Optional[float] = None) -> Optional[Hit]:
        return self.search(query, threshold).hit
