from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from src.common.errors import FetchError
from src.modules.extractor.schemas import ReaderResult
from src.modules.scraper.schemas import Article

BERLIN = ZoneInfo("Europe/Berlin")
SOURCE_URL = "https://www.karlsruhe.de/aktuelles"
BASE_URL = "https://www.karlsruhe.de"

LISTING_HTML = """
<html><body>
  <div class="karlTabs__tab-pane show active">
    <div class="news-item">
      <a href="/erstes">
        <time datetime="2025-12-11">11.12.2025</time>
        <h3 class="h4-style news-item__headline"><span>Erste Meldung</span></h3>
        <p class="mt-1">Beschreibung eins</p>
      </a>
    </div>
    <div class="news-item">
      <a href="/zweites">
        <time datetime="2025-12-10">10.12.2025</time>
        <h3 class="h4-style news-item__headline"><span>Zweite Meldung</span></h3>
        <p class="mt-1">Beschreibung zwei</p>
      </a>
    </div>
  </div>
</body></html>
"""


def detail_html(body: str) -> str:
    return f"""
    <html>
      <head><title>Detail</title><script>track()</script></head>
      <body>
        <header>Stadt Karlsruhe</header>
        <nav><a href="/">Start</a></nav>
        <article>{body}</article>
        <footer>Impressum</footer>
      </body>
    </html>
    """


class StaticReader:
    """Reader stand-in that always returns the same result."""

    def __init__(self, result: ReaderResult | None) -> None:
        self.result = result
        self.calls: list[tuple[str, str]] = []

    def parse(self, html: str, url: str) -> ReaderResult | None:
        self.calls.append((html, url))
        return self.result


class FailingReader:
    def parse(self, html: str, url: str) -> ReaderResult | None:
        raise RuntimeError("reader exploded")


class FakeFetcher:
    """Serves pages from a dict; unknown URLs fail like an exhausted HTTP client."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    async def fetch(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.pages:
            raise FetchError(f"Failed to fetch HTML from {url}")
        return self.pages[url]


def make_article(
    article_id: str = "0" * 32,
    link: str = "https://www.karlsruhe.de/artikel",
    title: str = "Titel",
) -> Article:
    return Article(
        id=article_id,
        title=title,
        link=link,
        description="Beschreibung",
        date=datetime(2025, 12, 9, tzinfo=BERLIN),
        content="<p>Inhalt der Meldung mit genug Text.</p>",
    )


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML
