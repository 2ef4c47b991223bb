from collections.abc import Sequence

from bs4 import BeautifulSoup, Tag

from src.config.selectors import STRIP_SELECTORS


def remove_unwanted_elements(soup: BeautifulSoup | Tag, selectors: Sequence[str] = STRIP_SELECTORS) -> None:
    for selector in selectors:
        for node in soup.select(selector):
            node.decompose()


def remove_inline_scripts(soup: BeautifulSoup | Tag) -> None:
    """Drop ``on*`` event handler and ``style`` attributes everywhere."""
    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            name = attr.lower()
            if name.startswith("on") or name == "style":
                del tag.attrs[attr]


def remove_empty_paragraphs(soup: BeautifulSoup | Tag) -> None:
    for paragraph in soup.find_all("p"):
        if paragraph.decomposed:
            continue
        if not paragraph.get_text().strip():
            paragraph.decompose()


def sanitize_html(content: str) -> str:
    if not content or not content.strip():
        return ""

    # html.parser keeps fragments as fragments (no html/body wrapper).
    soup = BeautifulSoup(content, "html.parser")
    remove_unwanted_elements(soup)
    remove_inline_scripts(soup)
    remove_empty_paragraphs(soup)
    return str(soup).strip()
