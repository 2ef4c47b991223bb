"""CSS selector cascades for the listing and detail pages.

Each list is tried in order; the first selector that matches wins. When the
site markup changes, adjust the data here rather than the parsing code.
"""

from pydantic import BaseModel

ARTICLE_SELECTORS = (
    ".karlTabs__tab-pane.show.active .news-item",
    ".newsroom .news-item",
    ".newsroom__item-wrapper .news-item",
    ".article",
    '[class*="news"]',
    '[class*="meldung"]',
    ".teaser",
    '[class*="teaser"]',
    "article",
    ".content-item",
    ".list-item",
)

TITLE_SELECTORS = (
    "h1",
    "h2",
    "h3",
    "h4",
    ".title",
    '[class*="title"]',
    '[class*="headline"]',
)

DESCRIPTION_SELECTORS = (
    ".news-item__teaser",
    "p.mt-1",
    "p:not(.news-item__date)",
    ".description",
    '[class*="description"]',
    ".text",
    '[class*="text"]',
)

DATE_SELECTORS = (
    ".date",
    '[class*="date"]',
    "time",
    ".published",
    '[class*="published"]',
)

# Removed from detail pages before and after extraction.
STRIP_SELECTORS = (
    "script",
    "style",
    "nav",
    "iframe",
    "noscript",
    "footer",
    "header",
)

# Structural fallback containers, most specific first.
PREFERRED_CONTAINERS = ("article", "main", ".news", ".content", "body")


class SelectorConfig(BaseModel):
    articles: tuple[str, ...] = ARTICLE_SELECTORS
    title: tuple[str, ...] = TITLE_SELECTORS
    description: tuple[str, ...] = DESCRIPTION_SELECTORS
    date: tuple[str, ...] = DATE_SELECTORS
