from dataclasses import dataclass, field

from pydantic import BaseModel

from src.modules.scraper.schemas import Article, ArticlePreview
from src.modules.tracking.schemas import ReconcileResult


@dataclass
class PipelineRun:
    """Mutable state shared by the steps of one pipeline run."""

    previews: list[ArticlePreview] = field(default_factory=list)
    articles: list[Article] = field(default_factory=list)
    failed: int = 0
    reconciliation: ReconcileResult | None = None
    halted: bool = False


class RunSummary(BaseModel):
    total_articles: int = 0
    new_articles: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: int = 0
    duration_ms: int = 0
