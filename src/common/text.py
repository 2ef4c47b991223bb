import re

_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Decode leftover entities and collapse whitespace to single spaces."""
    text = text.replace("&nbsp;", " ").replace("\xa0", " ")
    text = text.replace("&shy;", "").replace("\xad", "")
    return _WHITESPACE_RE.sub(" ", text).strip()
