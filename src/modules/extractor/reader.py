import logging
from typing import Protocol

from lxml import html as lxml_html
from readability import Document

from src.modules.extractor.schemas import ReaderResult

logger = logging.getLogger(__name__)


class ContentReader(Protocol):
    def parse(self, html: str, url: str) -> ReaderResult | None: ...


class ReadabilityReader:
    """Reader-mode extraction backed by readability-lxml."""

    def parse(self, html: str, url: str) -> ReaderResult | None:
        doc = Document(html, url=url)
        summary_html = doc.summary(html_partial=True)
        if not summary_html or not summary_html.strip():
            return None

        text = lxml_html.fromstring(summary_html).text_content()
        return ReaderResult(
            content_html=summary_html,
            text_content=text,
            title=doc.short_title() or None,
        )
