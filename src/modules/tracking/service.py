import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from src.common.errors import DataValidationError, StorageError
from src.common.types import format_timestamp
from src.modules.scraper.schemas import Article
from src.modules.tracking.schemas import (
    ReconcileResult,
    TrackingEntry,
    TrackingStore,
    tracking_store_adapter,
)

logger = logging.getLogger(__name__)


def reconcile(
    articles: Sequence[Article],
    prior: TrackingStore,
    now: datetime | None = None,
) -> ReconcileResult:
    """Classify ``articles`` against ``prior`` and build the next store.

    ``prior`` is left untouched. Entries for hashes not seen in this run are
    carried over as they are.
    """
    seen_at = format_timestamp(now or datetime.now(timezone.utc))
    next_tracking: TrackingStore = dict(prior)
    new: list[Article] = []
    updated: list[Article] = []
    unchanged = 0

    for article in articles:
        existing = next_tracking.get(article.id)

        if existing is None:
            new.append(article)
            next_tracking[article.id] = _entry_for(article, seen_at)
        elif existing.link != article.link:
            updated.append(article)
            next_tracking[article.id] = _entry_for(article, seen_at)
        else:
            unchanged += 1
            next_tracking[article.id] = existing.model_copy(update={"last_seen": seen_at})

    logger.info(
        "Change detection complete: %d new, %d updated, %d unchanged",
        len(new), len(updated), unchanged,
    )
    return ReconcileResult(
        new=new,
        updated=updated,
        unchanged_count=unchanged,
        next_tracking=next_tracking,
    )


def _entry_for(article: Article, seen_at: str) -> TrackingEntry:
    return TrackingEntry(content_hash=article.id, last_seen=seen_at, link=article.link)


class TrackingRepository:
    """Loads and saves the tracking store as a JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def load(self) -> TrackingStore:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No tracking file at %s, starting fresh", self._path)
            return {}
        except OSError as exc:
            logger.error("Failed to read tracking data from %s: %s", self._path, exc)
            raise StorageError(f"Failed to load tracking data from {self._path}", exc) from exc

        try:
            store = tracking_store_adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.error("Malformed tracking data in %s: %s", self._path, exc)
            raise DataValidationError(f"Malformed tracking data in {self._path}", exc) from exc

        mismatched = [key for key, entry in store.items() if key != entry.content_hash]
        if mismatched:
            raise DataValidationError(
                f"Tracking keys do not match their contentHash: {', '.join(mismatched)}"
            )

        logger.info("Loaded %d tracking entries from %s", len(store), self._path)
        return store

    def save(self, store: TrackingStore) -> None:
        payload = {key: entry.model_dump(by_alias=True) for key, entry in store.items()}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_name(self._path.name + ".tmp")
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            logger.error("Failed to save tracking data to %s: %s", self._path, exc)
            raise StorageError(f"Failed to save tracking data to {self._path}", exc) from exc

        logger.info("Saved %d tracking entries to %s", len(store), self._path)
