from __future__ import annotations

import datetime
import html
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

NO_MATCH = "No relevant match found."


def _timestamp() -> str:
    return datetime.datetime.now().strftime("%Y%m%d_%H%M%S")


def _slug(s: str, max_len: int = 60) -> str:
    s = s.strip().lower()
    s = re.sub(r"[^a-z0-9áéíóúñ\-\s_]+", "", s)
    s = re.sub(r"[\s_]+", "-", s)
    return s[:max_len].strip("-") or "query"


def infer_format(out_path: Optional[str], fmt: Optional[str]) -> str:
    if fmt:
        return fmt.lower()
    if out_path:
        ext = Path(out_path).suffix.lower().lstrip(".")
        if ext in {"json", "md", "txt", "html", "htm"}:
            return "html" if ext in {"html", "htm"} else ext
    return "json"


def ensure_outpath(
    out_path: Optional[str], fmt: str, save_dir: Optional[str], question: str
) -> Path:
    if out_path:
        p = Path(out_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    base_dir = Path(save_dir or "outputs")
    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir / f"{_timestamp()}_{_slug(question)}.{fmt}"


def format_match(ans: Dict[str, Any]) -> str:
    """`- 0.53: text` for a match, otherwise the no-match line."""
    m = ans.get("match")
    if not m:
        return NO_MATCH
    return f"- {m['score']:.2f}: {m['text'].strip()}"


def as_markdown(ans: Dict[str, Any]) -> str:
    lines: List[str] = [f"# {ans.get('question', '')}", ""]
    m = ans.get("match")
    if m:
        lines.append(f"> {m['text'].strip()}")
        lines.append("")
        lines.append(f"Score: **{m['score']:.2f}** (sentence #{m['index']})")
    else:
        lines.append(f"_{NO_MATCH}_")
    trace = ans.get("trace")
    if trace:
        lines.append("")
        lines.append("## Trace")
        lines.append("```json")
        lines.append(json.dumps(trace, ensure_ascii=False, indent=2))
        lines.append("```")
    return "\n".join(lines).strip() + "\n"


def as_text(ans: Dict[str, Any]) -> str:
    lines: List[str] = [f"QUESTION: {ans.get('question', '')}", "", format_match(ans)]
    trace = ans.get("trace")
    if trace:
        lines.append("")
        lines.append("TRACE: " + json.dumps(trace, ensure_ascii=False))
    return "\n".join(lines).strip() + "\n"


def as_html(ans: Dict[str, Any]) -> str:
    q = html.escape(ans.get("question", ""))
    m = ans.get("match")
    lines: List[str] = [
        "<!doctype html><html><head><meta charset='utf-8'>",
        "<style>body{font-family:system-ui,Segoe UI,Arial,sans-serif;max-width:900px;margin:40px auto;padding:0 16px} blockquote{border-left:4px solid #ccc;margin:0;padding-left:12px}</style>",
        "</head><body>",
        f"<h1>{q}</h1>",
    ]
    if m:
        lines.append(f"<blockquote>{html.escape(m['text'].strip())}</blockquote>")
        lines.append(f"<p>Score: <b>{m['score']:.2f}</b> (sentence #{m['index']})</p>")
    else:
        lines.append(f"<p><i>{html.escape(NO_MATCH)}</i></p>")
    lines.append("</body></html>")
    return "\n".join(lines)


def write_output(
    question: str,
    payload: Dict[str, Any],
    out_path: Optional[str] = None,
    fmt: Optional[str] = None,
    save_dir: Optional[str] = None,
) -> Path:
    fmt2 = infer_format(out_path, fmt)
    target = ensure_outpath(out_path, fmt2, save_dir, question)
    obj = {
        "question": question,
        "answer": payload.get("answer"),
        "match": payload.get("match"),
        "trace": payload.get("trace"),
    }
    if fmt2 == "json":
        target.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")
    elif fmt2 == "md":
        target.write_text(as_markdown(obj), encoding="utf-8")
    elif fmt2 == "txt":
        target.write_text(as_text(obj), encoding="utf-8")
    elif fmt2 == "html":
        target.write_text(as_html(obj), encoding="utf-8")
    else:
        raise ValueError(f"Unsupported format: {fmt2}")
    return target
