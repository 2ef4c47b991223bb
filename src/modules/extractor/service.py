import html as html_lib
import logging
import re

from bs4 import BeautifulSoup

from src.common.errors import EmptyInputError, ExtractionError
from src.config.selectors import PREFERRED_CONTAINERS, STRIP_SELECTORS
from src.modules.extractor.reader import ContentReader, ReadabilityReader
from src.modules.extractor.sanitizer import remove_unwanted_elements, sanitize_html
from src.modules.extractor.schemas import ReaderResult
from src.modules.extractor.validator import is_valid_content

logger = logging.getLogger(__name__)

_BLANK_LINES_RE = re.compile(r"\n{2,}")
_NEWLINES_RE = re.compile(r"\n+")
_WHITESPACE_RE = re.compile(r"\s+")


class ContentExtractor:
    """Extracts the readable article body from a detail page.

    Reader-mode extraction is tried first; if its result does not pass the
    validity check, the page is reduced structurally to its main container.
    """

    def __init__(self, reader: ContentReader | None = None) -> None:
        self._reader = reader if reader is not None else ReadabilityReader()

    def extract(self, html: str, url: str) -> str:
        if not html or not html.strip():
            raise EmptyInputError("Empty HTML provided")

        readable = self._extract_with_reader(html, url)
        if readable and is_valid_content(readable):
            return readable

        logger.warning("Reader extraction failed for %s, using fallback extraction", url)

        fallback = self._extract_fallback(html)
        if fallback and is_valid_content(fallback):
            return fallback

        raise ExtractionError(f"Could not extract any meaningful content from {url}")

    # ── Strategies ──────────────────────────────────────────────

    def _extract_with_reader(self, html: str, url: str) -> str | None:
        try:
            article = self._reader.parse(html, url)
        except Exception as exc:
            logger.warning("Reader failed for %s: %s", url, exc)
            return None

        if article is None or not (article.content_html or article.text_content):
            return None

        content_html = (article.content_html or "").strip()
        if content_html:
            content = sanitize_html(content_html)
            _log_extraction("reader", article, content)
            return content or None

        structured = build_html_from_text(article.text_content or "")
        if not structured:
            return None

        content = sanitize_html(structured)
        _log_extraction("reader text", article, content)
        return content or None

    @staticmethod
    def _extract_fallback(html: str) -> str | None:
        soup = BeautifulSoup(html, "lxml")
        remove_unwanted_elements(soup, STRIP_SELECTORS)

        for selector in PREFERRED_CONTAINERS:
            container = soup.select_one(selector)
            if container is None:
                continue
            fragment = container.decode_contents()
            if fragment.strip():
                logger.debug("Fallback extraction using container %r", selector)
                return sanitize_html(fragment)

        return None


def build_html_from_text(text: str) -> str | None:
    """Wrap blank-line separated blocks of plain text in ``<p>`` tags."""
    normalized = text.replace("\r\n", "\n").strip()
    if not normalized:
        return None

    paragraphs = [p.strip() for p in _BLANK_LINES_RE.split(normalized)]
    if len(paragraphs) <= 1 and "\n" in normalized:
        paragraphs = [p.strip() for p in _NEWLINES_RE.split(normalized)]

    paragraphs = [_WHITESPACE_RE.sub(" ", p) for p in paragraphs if p]
    if not paragraphs:
        return None

    return "".join(f"<p>{html_lib.escape(p, quote=False)}</p>" for p in paragraphs)


def _log_extraction(method: str, article: ReaderResult, content: str) -> None:
    logger.debug(
        "Extracted article with %s: title=%r length=%d",
        method, article.title, len(content),
    )
