from urllib.parse import urljoin, urlparse


def normalize_link(link: str, base_url: str, source_url: str) -> str:
    """Resolve ``link`` to an absolute URL.

    Root-relative paths resolve against the site origin (``base_url``), other
    relative paths against the listing page (``source_url``). Absolute URLs
    are returned unchanged. An empty link yields an empty string.
    """
    link = (link or "").strip()
    if not link:
        return ""
    if urlparse(link).scheme:
        return link
    if link.startswith("/"):
        return urljoin(base_url, link)
    return urljoin(source_url, link)


def is_valid_url(url: str) -> bool:
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if not parsed.scheme:
        return False
    if parsed.scheme == "file":
        return bool(parsed.path)
    return bool(parsed.netloc)
