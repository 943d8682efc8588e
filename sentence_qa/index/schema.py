from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class Unit(BaseModel):
    index: int
    text: str                  # trimmed sentence text
    tokens: List[str]          # normalized, stemmed tokens


class Hit(BaseModel):
    index: int
    score: float
    text: str


class Ranking(BaseModel):
    tokens: List[str]          # normalized query
    scores: List[float]        # one per indexed unit, in unit order
    threshold: float
    hit: Optional[Hit] = None

    @property
    def top_score(self) -> float:
        return max(self.scores) if self.scores else 0.0
