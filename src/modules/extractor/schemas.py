from pydantic import BaseModel


class ReaderResult(BaseModel):
    """Output of a reader-mode pass over a detail page."""

    content_html: str | None = None
    text_content: str | None = None
    title: str | None = None
