import argparse
import json
import logging
import statistics
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

from sentence_qa.app import index_document, load_config, query_text
from sentence_qa.errors import SentenceQAError
from sentence_qa.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def _load_gold(path: Path) -> List[Dict[str, Any]]:
    cases = []
    with open(path, "r", encoding="utf-8") as f:
        for ln in f:
            ln = ln.strip()
            if not ln:
                continue
            cases.append(json.loads(ln))
    return cases


def check_case(ans: Dict[str, Any], case: Dict[str, Any]) -> Dict[str, Any]:
    """Compare one answer with its gold case.

    Gold keys: `must_include` (substrings of the answer), `expect_none`
    (the question should not be answered).
    """
    reasons = []
    if case.get("expect_none"):
        if ans.get("match"):
            reasons.append("unexpected_match")
        return {"ok": not reasons, "reasons": reasons}

    if not ans.get("match"):
        return {"ok": False, "reasons": ["no_match"]}
    a = (ans.get("answer") or "").lower()
    for s in case.get("must_include") or []:
        if s.lower() not in a:
            reasons.append(f"missing:{s}")
    return {"ok": not reasons, "reasons": reasons}


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("document", help="Document to index")
    ap.add_argument("--gold", required=True, help="Path to gold.jsonl")
    ap.add_argument("--config", default="config.yaml")
    ap.add_argument("--threshold", type=float, default=None)
    args = ap.parse_args(argv)

    setup_logging(level="WARNING")
    try:
        cfg = load_config(args.config, required=False)
        ranker = index_document(args.document, cfg)
    except SentenceQAError as e:
        logger.error("%s", e)
        return 2
    gold = _load_gold(Path(args.gold))

    results = []
    latencies = []
    for g in gold:
        t0 = time.perf_counter()
        ans = query_text(g["question"], ranker, cfg, threshold=args.threshold)
        dt = int((time.perf_counter() - t0) * 1000)
        latencies.append(dt)
        checks = check_case(ans, g)
        results.append(
            {
                "qid": g.get("qid"),
                "ok": checks["ok"],
                "reasons": checks["reasons"],
                "top_score": ans["trace"]["top_score"],
                "latency_ms": dt,
            }
        )

    accuracy = sum(1 for r in results if r["ok"]) / max(1, len(results))
    p50 = statistics.median(latencies) if latencies else 0
    p95 = sorted(latencies)[int(0.95 * (len(latencies) - 1))] if latencies else 0

    print("=== EVAL SUMMARY ===")
    print(f"Cases:       {len(gold)}")
    print(f"Accuracy:    {accuracy:.3f}")
    print(f"Latency p50: {p50} ms")
    print(f"Latency p95: {p95} ms")
    print("\nFailed cases:")
    for r in results:
        if not r["ok"]:
            print(f"- {r['qid']}: reasons={r['reasons']} top_score={r['top_score']:.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
