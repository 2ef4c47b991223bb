from pydantic import BaseModel


class FeedMetadata(BaseModel):
    title: str
    description: str
    language: str
    source_url: str
    feed_url: str
    copyright: str
