import argparse
import asyncio
import logging
import sys
import time
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from src.common.errors import ScraperError

if TYPE_CHECKING:
    from src.config.settings import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stadtfeed",
        description="Scrape the Stadt Karlsruhe news page and write an Atom feed.",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="keep running and repeat on the configured SCHEDULE_CRON",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="override LOG_LEVEL",
    )
    return parser.parse_args(argv)


async def run_once(settings: "Settings") -> None:
    from src.modules.syndication_pipeline.service import build_pipeline

    async with httpx.AsyncClient() as client:
        await build_pipeline(settings, client).run()


async def run_scheduled(settings: "Settings") -> None:
    from src.modules.syndication_pipeline.service import build_pipeline

    async with httpx.AsyncClient() as client:
        pipeline = build_pipeline(settings, client)
        await pipeline.start(settings.schedule_cron, settings.timezone)
        try:
            await asyncio.Event().wait()
        finally:
            await pipeline.stop()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level or "INFO", format=LOG_FORMAT)

    started = time.monotonic()
    try:
        from src.config.settings import settings
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    logging.getLogger().setLevel(args.log_level or settings.log_level)

    try:
        if args.schedule:
            asyncio.run(run_scheduled(settings))
        else:
            asyncio.run(run_once(settings))
    except ScraperError as exc:
        logger.error(
            "Feed generation failed [%s]: %s (cause: %s, %dms)",
            exc.code, exc.message, exc.cause, round((time.monotonic() - started) * 1000),
        )
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except Exception:
        logger.exception(
            "Unexpected error during feed generation (%dms)",
            round((time.monotonic() - started) * 1000),
        )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
