import re

from bs4 import BeautifulSoup

MIN_CONTENT_LENGTH = 20
MIN_WORD_LENGTH = 3

_WORD_RE = re.compile(rf"\w{{{MIN_WORD_LENGTH},}}")


def is_valid_content(content: str, min_length: int = MIN_CONTENT_LENGTH) -> bool:
    """Content needs enough plain text and at least one real word."""
    if not content:
        return False
    text = BeautifulSoup(content, "html.parser").get_text().strip()
    return len(text) >= min_length and bool(_WORD_RE.search(text))
