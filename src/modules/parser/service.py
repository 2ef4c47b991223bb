import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from bs4 import BeautifulSoup, Tag

from src.common.errors import EmptyInputError
from src.common.links import is_valid_url, normalize_link
from src.common.text import clean_text
from src.config.selectors import SelectorConfig
from src.modules.parser.dates import parse_german_date
from src.modules.parser.finder import find_elements
from src.modules.scraper.schemas import ArticlePreview

logger = logging.getLogger(__name__)

DateParser = Callable[[str], datetime]


class ListingParser:
    """Turns the news listing page into an ordered list of previews."""

    def __init__(
        self,
        source_url: str,
        base_url: str,
        selectors: SelectorConfig | None = None,
        date_parser: DateParser = parse_german_date,
    ) -> None:
        self._source_url = source_url
        self._base_url = base_url
        self._selectors = selectors or SelectorConfig()
        self._parse_date = date_parser

    def parse(self, html: str) -> list[ArticlePreview]:
        if not html or not html.strip():
            raise EmptyInputError("Empty HTML provided")

        soup = BeautifulSoup(html, "lxml")
        elements = find_elements(soup, self._selectors.articles)

        previews: list[ArticlePreview] = []
        for element in elements:
            try:
                preview = self._parse_element(element)
            except Exception as exc:
                logger.warning("Failed to parse individual article: %s", exc)
                continue
            if preview is not None:
                previews.append(preview)

        logger.info("Parsed %d articles from listing page", len(previews))
        return previews

    # ── Per-element extraction ──────────────────────────────────

    def _parse_element(self, element: Tag) -> ArticlePreview | None:
        title = extract_text(element, self._selectors.title)
        if not title:
            return None

        link = normalize_link(self._find_href(element), self._base_url, self._source_url)
        if not is_valid_url(link):
            logger.debug("Skipping %r: no usable link", title)
            return None

        description = extract_description(element, self._selectors.description, title)
        date_text = extract_date_text(element, self._selectors.date)

        return ArticlePreview(
            title=title,
            link=link,
            description=description,
            date=self._parse_date(date_text),
        )

    @staticmethod
    def _find_href(element: Tag) -> str:
        anchor = element if element.name == "a" else element.find("a")
        if anchor is None:
            return ""
        href = anchor.get("href")
        return href if isinstance(href, str) else ""


def extract_text(element: Tag, selectors: Sequence[str], fallback: str = "") -> str:
    for selector in selectors:
        match = element.select_one(selector)
        if match is None:
            continue
        text = clean_text(match.get_text())
        if text:
            return text
    return fallback.strip()


def extract_description(element: Tag, selectors: Sequence[str], fallback: str) -> str:
    description = extract_text(element, selectors)
    if description:
        return description

    for paragraph in element.find_all("p"):
        classes = " ".join(paragraph.get("class") or [])
        if "date" in classes or "published" in classes:
            continue
        text = clean_text(paragraph.get_text())
        if text:
            return text

    return fallback


def extract_date_text(element: Tag, selectors: Sequence[str]) -> str:
    time_element = element.select_one("time[datetime]")
    if time_element is not None:
        value = time_element.get("datetime")
        if isinstance(value, str) and value.strip():
            return value.strip()

    date_text = extract_text(element, selectors)
    if date_text:
        return date_text

    return element.get_text()
