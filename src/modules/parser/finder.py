import logging
from collections.abc import Sequence

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from src.common.errors import NoElementsFoundError

logger = logging.getLogger(__name__)


def find_elements(soup: BeautifulSoup | Tag, selectors: Sequence[str]) -> list[Tag]:
    """Return the matches of the first selector that finds anything.

    Later selectors are ignored once one matches; results are never merged.
    """
    for selector in selectors:
        try:
            found = soup.select(selector)
        except SelectorSyntaxError:
            logger.warning("Skipping invalid selector %r", selector)
            continue
        if found:
            logger.debug("Selector %r matched %d elements", selector, len(found))
            return list(found)

    raise NoElementsFoundError("No article elements found. HTML structure may have changed.")
