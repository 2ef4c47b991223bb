import logging
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from lxml import etree

from src.common.errors import StorageError
from src.modules.feed.schemas import FeedMetadata
from src.modules.scraper.schemas import Article

logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"
GENERATOR = "stadtfeed"

# Characters outside the XML 1.0 Char production.
_INVALID_XML_RE = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(text: str) -> str:
    return _INVALID_XML_RE.sub("", text or "")


def _atom(tag: str) -> str:
    return f"{{{ATOM_NS}}}{tag}"


class AtomFeedWriter:
    """Serialises articles into an Atom 1.0 document on disk."""

    def __init__(self, metadata: FeedMetadata, output_path: Path) -> None:
        self._metadata = metadata
        self._output_path = Path(output_path)

    def render(self, articles: Sequence[Article], updated: datetime | None = None) -> bytes:
        updated = updated or datetime.now(timezone.utc)
        meta = self._metadata

        feed = etree.Element(_atom("feed"), nsmap={None: ATOM_NS})
        feed.set(XML_LANG, meta.language)
        etree.SubElement(feed, _atom("id")).text = meta.source_url
        etree.SubElement(feed, _atom("title")).text = meta.title
        etree.SubElement(feed, _atom("subtitle")).text = meta.description
        etree.SubElement(feed, _atom("updated")).text = updated.isoformat()
        etree.SubElement(feed, _atom("link"), rel="alternate", href=meta.source_url)
        etree.SubElement(feed, _atom("link"), rel="self", href=meta.feed_url)
        etree.SubElement(feed, _atom("rights")).text = f"{meta.copyright} {updated.year}"
        etree.SubElement(feed, _atom("generator")).text = GENERATOR

        for article in articles:
            feed.append(self._entry(article))

        return etree.tostring(feed, xml_declaration=True, encoding="utf-8", pretty_print=True)

    def write(self, articles: Sequence[Article]) -> Path:
        document = self.render(articles)
        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_bytes(document)
        except OSError as exc:
            logger.error("Failed to write feed to %s: %s", self._output_path, exc)
            raise StorageError(f"Failed to generate feed at {self._output_path}", exc) from exc

        logger.info("Feed with %d articles written to %s", len(articles), self._output_path)
        return self._output_path

    @staticmethod
    def _entry(article: Article) -> etree._Element:
        entry = etree.Element(_atom("entry"))
        etree.SubElement(entry, _atom("id")).text = f"urn:md5:{article.id}"
        etree.SubElement(entry, _atom("title"), type="html").text = xml_safe(article.title)
        etree.SubElement(entry, _atom("link"), href=article.link)
        etree.SubElement(entry, _atom("summary"), type="html").text = xml_safe(article.description)
        etree.SubElement(entry, _atom("content"), type="html").text = xml_safe(article.content)
        etree.SubElement(entry, _atom("published")).text = article.date.isoformat()
        etree.SubElement(entry, _atom("updated")).text = article.date.isoformat()
        return entry
