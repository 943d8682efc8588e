import re


def normalize_text(s: str) -> str:
    if not s:
        return s
    # Windows / old Mac line endings
    s = s.replace("\r\n", "\n").replace("\r", "\n")
    s = s.replace("\u00a0", " ")  # nbsp -> space
    # "obliga-\ntorio" -> "obligatorio"
    s = re.sub(r"(\w)-\n(\w)", r"\1\2", s)
    s = re.sub(r"[ \t]{2,}", " ", s)
    s = re.sub(r"\n{3,}", "\n\n", s)
    return s.strip()
