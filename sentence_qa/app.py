from __future__ import annotations

import logging
import time
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .index.schema import Unit
from .index.tfidf import TfidfIndexer
from .ingest.loader import load_text
from .normalize import DEFAULT_STOPWORDS, Normalizer
from .retrieve.rank import DEFAULT_THRESHOLD, Ranker
from .segment import DEFAULT_ABBREVIATIONS, Segmenter, filter_units
from .utils.log import Logger

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {
        "language": "spanish",
        "prompt": "Pregunta en español:",
        "query_log": None,
    },
    "ingest": {"clean": True},
    "segment": {
        "min_chars": 20,
        "abbreviations": sorted(DEFAULT_ABBREVIATIONS),
    },
    "normalize": {"stopwords": sorted(DEFAULT_STOPWORDS)},
    "retrieval": {"threshold": DEFAULT_THRESHOLD},
}


def _merge(base: dict, override: dict) -> dict:
    out = deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: str | Path | None = None, required: bool = True) -> dict:
    """Built-in defaults overlaid with the YAML file at `path`.

    A missing file is an error only when `required` is set.
    """
    if path is None:
        return deepcopy(DEFAULT_CONFIG)
    p = Path(path)
    if not p.exists():
        if required:
            raise ConfigError(f"Config file not found: {p}")
        logger.debug("No config at %s; using defaults", p)
        return deepcopy(DEFAULT_CONFIG)
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {p}")
    return validate_config(_merge(DEFAULT_CONFIG, data))


def _str_list(cfg: dict, section: str, key: str) -> List[str]:
    v = cfg[section][key]
    if not isinstance(v, list) or not all(isinstance(x, str) for x in v):
        raise ConfigError(f"{section}.{key} must be a list of strings, got {v!r}")
    return v


def _string(cfg: dict, section: str, key: str) -> str:
    v = cfg[section][key]
    if not isinstance(v, str):
        raise ConfigError(f"{section}.{key} must be a string, got {v!r}")
    return v


def _number(cfg: dict, section: str, key: str) -> float:
    v = cfg[section][key]
    # bool is an int subclass; `min_chars: yes` is a typo, not a number
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ConfigError(f"{section}.{key} must be a number, got {v!r}")
    return v


def validate_config(cfg: dict) -> dict:
    """Raise ConfigError if any setting has the wrong type."""
    for section in ("app", "ingest", "segment", "normalize", "retrieval"):
        if not isinstance(cfg.get(section), dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")
    _string(cfg, "app", "language")
    _str_list(cfg, "segment", "abbreviations")
    _str_list(cfg, "normalize", "stopwords")
    _number(cfg, "segment", "min_chars")
    _number(cfg, "retrieval", "threshold")
    return cfg


def make_segmenter(cfg: dict) -> Segmenter:
    return Segmenter(_str_list(cfg, "segment", "abbreviations"))


def make_normalizer(cfg: dict) -> Normalizer:
    language = _string(cfg, "app", "language")
    try:
        return Normalizer(_str_list(cfg, "normalize", "stopwords"), language=language)
    except ValueError as e:
        raise ConfigError(f"Unsupported stemmer language: {language}") from e


def split_units(raw_text: str, cfg: dict) -> List[str]:
    sentences = make_segmenter(cfg).segment(raw_text)
    units = filter_units(sentences, int(_number(cfg, "segment", "min_chars")))
    logger.debug("Segmented %d sentences, kept %d units", len(sentences), len(units))
    return units


def index_text(raw_text: str, cfg: dict) -> Ranker:
    """Segment, normalize and vectorize a document; returns a ready Ranker."""
    normalizer = make_normalizer(cfg)
    units = [
        Unit(index=i, text=s, tokens=normalizer.normalize(s))
        for i, s in enumerate(split_units(raw_text, cfg))
    ]
    indexer = TfidfIndexer().build(units)
    return Ranker(indexer, normalizer, threshold=float(_number(cfg, "retrieval", "threshold")))


def index_document(path: str | Path, cfg: dict) -> Ranker:
    t0 = time.perf_counter()
    text = load_text(path, clean=bool(cfg["ingest"]["clean"]))
    ranker = index_text(text, cfg)
    logger.info("Indexed %s in %d ms", path, int((time.perf_counter() - t0) * 1000))
    return ranker


def query_text(
    question: str,
    ranker: Ranker,
    cfg: dict,
    threshold: Optional[float] = None,
) -> dict:
    """Best-matching unit for `question`, plus a trace of how it was chosen."""
    question = question.strip()

    t0 = time.perf_counter()
    ranking = ranker.search(question, threshold)
    elapsed_ms = int((time.perf_counter() - t0) * 1000)

    match = ranking.hit.model_dump() if ranking.hit else None
    trace = {
        "query_tokens": ranking.tokens,
        "units": ranker.indexer.n_docs,
        "vocabulary_size": len(ranker.indexer.vocabulary),
        "top_score": ranking.top_score,
        "threshold": ranking.threshold,
        "timers_ms": {"rank_ms": elapsed_ms},
    }

    log_path = cfg["app"].get("query_log")
    if log_path:
        Logger(Path(log_path)).write({"question": question, "match": match, "trace": trace})

    return {
        "question": question,
        "answer": ranking.hit.text if ranking.hit else "",
        "match": match,
        "trace": trace,
    }
