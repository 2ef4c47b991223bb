import asyncio
import logging
import time
from functools import partial
from typing import Protocol

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from src.common.errors import ScraperError
from src.common.hashing import generate_article_id
from src.config.settings import Settings
from src.modules.extractor.service import ContentExtractor
from src.modules.feed.schemas import FeedMetadata
from src.modules.feed.service import AtomFeedWriter
from src.modules.parser.dates import parse_german_date
from src.modules.parser.service import ListingParser
from src.modules.scraper.schemas import Article, ArticlePreview
from src.modules.scraper.service import HttpFetcher
from src.modules.syndication_pipeline.composer import PipelineComposer
from src.modules.syndication_pipeline.schemas import PipelineRun, RunSummary
from src.modules.tracking.service import TrackingRepository, reconcile

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> str: ...


class SyndicationPipelineService:
    """Listing page in, Atom feed and tracking file out."""

    def __init__(
        self,
        fetcher: PageFetcher,
        listing_parser: ListingParser,
        extractor: ContentExtractor,
        tracking_repository: TrackingRepository,
        feed_writer: AtomFeedWriter,
        source_url: str,
        max_articles: int = 100,
        max_concurrency: int = 5,
    ) -> None:
        self._fetcher = fetcher
        self._listing_parser = listing_parser
        self._extractor = extractor
        self._tracking = tracking_repository
        self._feed_writer = feed_writer
        self._source_url = source_url
        self._max_articles = max_articles
        self._max_concurrency = max_concurrency
        self._scheduler: AsyncIOScheduler | None = None

        self._composer = PipelineComposer()
        self._composer.add_step("fetch_listing", self._fetch_listing)
        self._composer.add_step("build_articles", self._build_articles)
        self._composer.add_step("reconcile", self._reconcile)
        self._composer.add_step("emit_feed", self._emit_feed)
        self._composer.add_step("persist_tracking", self._persist_tracking)

    # ── Steps ───────────────────────────────────────────────────

    async def _fetch_listing(self, run: PipelineRun) -> None:
        html = await self._fetcher.fetch(self._source_url)
        run.previews = self._listing_parser.parse(html)
        if not run.previews:
            logger.warning("No articles found - HTML structure may have changed")
            run.halted = True

    async def _build_articles(self, run: PipelineRun) -> None:
        logger.info("Fetching detail pages for %d articles", len(run.previews))
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def build(preview: ArticlePreview) -> Article | None:
            async with semaphore:
                return await self.build_article(preview)

        results = await asyncio.gather(*(build(preview) for preview in run.previews))
        run.articles = [article for article in results if article is not None]
        run.failed = len(results) - len(run.articles)

        if not run.articles:
            logger.warning("No valid articles after fetching detail pages")
            run.halted = True
            return
        logger.info(
            "Built %d articles (%d dropped)", len(run.articles), run.failed,
        )

    async def _reconcile(self, run: PipelineRun) -> None:
        prior = self._tracking.load()
        run.reconciliation = reconcile(run.articles, prior)

    async def _emit_feed(self, run: PipelineRun) -> None:
        self._feed_writer.write(run.articles[: self._max_articles])

    async def _persist_tracking(self, run: PipelineRun) -> None:
        self._tracking.save(run.reconciliation.next_tracking)

    # ── Per-article unit of work ────────────────────────────────

    async def build_article(self, preview: ArticlePreview) -> Article | None:
        try:
            detail_html = await self._fetcher.fetch(preview.link)
            content = self._extractor.extract(detail_html, preview.link)
            article_id = generate_article_id(content, preview.date)
            return Article(**preview.model_dump(), id=article_id, content=content)
        except Exception as exc:
            logger.warning(
                "Failed to fetch/parse detail page %s (%r): %s",
                preview.link, preview.title, exc,
            )
            return None

    # ── Orchestration ───────────────────────────────────────────

    async def run(self) -> RunSummary:
        started = time.monotonic()
        logger.info("Starting feed generation for %s", self._source_url)

        run = await self._composer.run(PipelineRun())

        result = run.reconciliation
        summary = RunSummary(
            total_articles=len(run.articles) if result else 0,
            new_articles=len(result.new) if result else 0,
            updated=len(result.updated) if result else 0,
            unchanged=result.unchanged_count if result else 0,
            failed=run.failed,
            duration_ms=round((time.monotonic() - started) * 1000),
        )
        logger.info(
            "Feed generation complete: %d articles (%d new, %d updated, %d unchanged) in %dms",
            summary.total_articles, summary.new_articles, summary.updated,
            summary.unchanged, summary.duration_ms,
        )
        return summary

    async def _scheduled_run(self) -> None:
        try:
            await self.run()
        except ScraperError as exc:
            logger.error("Scheduled run failed [%s]: %s", exc.code, exc.message)

    async def start(self, cron: str, timezone: str | None = None) -> None:
        await self.run()
        self._scheduler = AsyncIOScheduler(timezone=timezone) if timezone else AsyncIOScheduler()
        self._scheduler.add_job(
            self._scheduled_run,
            CronTrigger.from_crontab(cron, timezone=timezone),
            id="syndication_pipeline",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("Scheduler started - pipeline runs on %r", cron)

    async def stop(self) -> None:
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Scheduler stopped")


def build_pipeline(settings: Settings, client: httpx.AsyncClient) -> SyndicationPipelineService:
    """Wire every collaborator from ``settings``."""
    fetcher = HttpFetcher(
        client,
        max_retries=settings.http_max_retries,
        retry_delay=settings.http_retry_delay,
        timeout=settings.http_timeout,
        user_agent=settings.user_agent,
    )
    listing_parser = ListingParser(
        source_url=settings.source_url,
        base_url=settings.base_url,
        date_parser=partial(parse_german_date, tz=settings.tz),
    )
    feed_writer = AtomFeedWriter(
        FeedMetadata(
            title=settings.feed_title,
            description=settings.feed_description,
            language=settings.feed_language,
            source_url=settings.source_url,
            feed_url=settings.feed_url,
            copyright=settings.feed_copyright,
        ),
        settings.output_file,
    )
    return SyndicationPipelineService(
        fetcher=fetcher,
        listing_parser=listing_parser,
        extractor=ContentExtractor(),
        tracking_repository=TrackingRepository(settings.tracking_file),
        feed_writer=feed_writer,
        source_url=settings.source_url,
        max_articles=settings.max_articles,
        max_concurrency=settings.max_concurrency,
    )
