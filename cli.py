#!/usr/bin/env python3
import argparse
import logging
import sys

from sentence_qa.app import index_document, load_config, query_text, split_units
from sentence_qa.errors import SentenceQAError
from sentence_qa.ingest.loader import load_text
from sentence_qa.logging_utils import setup_logging
from sentence_qa.utils.output import format_match, write_output

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"


def _read_question(prompt: str) -> str:
    """One line from stdin; the prompt goes to stdout like the answer does."""
    print(prompt)
    return sys.stdin.readline().strip()


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="sentence-qa",
        description="Answer a question with the most similar sentence of a document (TF-IDF).",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable DEBUG logs (to stderr)."
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Reduce logs to WARN and above.")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines (stderr).")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present, else built-in defaults)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    # -----------------------
    # ask
    # -----------------------
    p_ask = sub.add_parser("ask", help="Ask one question against a document")
    p_ask.add_argument("document", type=str, help="Path to a .pdf, .txt or .md file")
    p_ask.add_argument(
        "question", type=str, nargs="?", default=None, help="Question (read from stdin if omitted)"
    )
    p_ask.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Minimum similarity for an answer (strictly greater; default 0.2)",
    )
    p_ask.add_argument(
        "--out",
        type=str,
        default=None,
        help="Write result to a file (infers format from extension)",
    )
    p_ask.add_argument(
        "--format",
        type=str,
        default=None,
        choices=["json", "md", "txt", "html"],
        help="Output format (overrides --out extension)",
    )
    p_ask.add_argument(
        "--save", type=str, default=None, help="Directory to auto-save result (default outputs/)"
    )
    p_ask.add_argument(
        "--show-trace", action="store_true", help="Print query tokens and scores after the answer"
    )

    # -----------------------
    # segment
    # -----------------------
    p_seg = sub.add_parser("segment", help="Print the sentence units a document is indexed as")
    p_seg.add_argument("document", type=str, help="Path to a .pdf, .txt or .md file")

    args = parser.parse_args(argv)

    if args.verbose and args.quiet:
        print("Cannot use --verbose and --quiet together.", file=sys.stderr)
        return 2
    if args.verbose:
        setup_logging(level="DEBUG", json_logs=args.log_json)
    elif args.quiet:
        setup_logging(level="WARNING", json_logs=args.log_json)
    else:
        setup_logging(level="INFO", json_logs=args.log_json)

    logger.debug("CLI args parsed: %s", vars(args))

    try:
        if args.config is None:
            cfg = load_config(DEFAULT_CONFIG_PATH, required=False)
        else:
            cfg = load_config(args.config)

        if args.cmd == "segment":
            text = load_text(args.document, clean=bool(cfg["ingest"]["clean"]))
            for i, unit in enumerate(split_units(text, cfg)):
                print(f"[{i}] {unit}")
            return 0

        ranker = index_document(args.document, cfg)
    except SentenceQAError as e:
        logger.error("%s", e)
        return 2

    question = args.question
    if question is None:
        question = _read_question(cfg["app"]["prompt"])

    ans = query_text(question, ranker, cfg, threshold=args.threshold)

    if args.out or args.save:
        target = write_output(
            question, ans, out_path=args.out, fmt=args.format, save_dir=args.save
        )
        logger.info("Saved result to %s", target)

    print("Respuesta relevante:")
    print(format_match(ans))

    if args.show_trace:
        trace = ans["trace"]
        print("\n=== TRACE ===")
        print(f"query_tokens: {trace['query_tokens']}")
        print(f"top_score: {trace['top_score']:.4f} (threshold {trace['threshold']})")
        print(f"units: {trace['units']}  vocabulary: {trace['vocabulary_size']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
