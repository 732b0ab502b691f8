"""
Sync orchestration: TMDb popular lists -> normalize -> `core.media_items`.

Two independent procedures live here:

- `MediaSync.run_full_sync()` refreshes movies and TV shows from the popular lists.
- `MediaSync.run_genre_backfill()` fills `genre_text` for rows stored without genres.

Both are best-effort batches. Provider errors are isolated per media type (full
sync) or per row (backfill), and a storage error only skips the affected record.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from supabase import Client

from popular_media.ingestion.normalize import (
    GENRE_SEPARATOR,
    MediaNormalizationError,
    extract_genre_names,
    normalize_payload,
)
from popular_media.integrations.tmdb.client import TmdbClientError
from popular_media.integrations.tmdb.genres import DEFAULT_GENRE_TABLE, GenreTable
from popular_media.models.media import BackfillUpdate, CanonicalMediaRecord, MediaType
from popular_media.repositories.media_items import (
    MediaRepositoryError,
    find_missing_genre,
    update_genre_text,
    upsert_media_item,
)

SYSTEM_ACTOR = "system"
SYNC_ORDER = (MediaType.MOVIE, MediaType.TV)


class MediaProvider(Protocol):
    def fetch_popular(self, media_type: MediaType | str) -> list[dict[str, Any]]: ...

    def fetch_details(
        self, provider_id: int, media_type: MediaType | str, *, language: str | None = None
    ) -> dict[str, Any]: ...


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass
class PhaseResult:
    media_type: MediaType
    fetched: int = 0
    saved: int = 0
    skipped: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncSummary:
    actor: str
    started_at: str
    finished_at: str | None = None
    phases: dict[MediaType, PhaseResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(phase.ok for phase in self.phases.values())

    @property
    def level(self) -> str:
        return "success" if self.ok else "warning"

    @property
    def message(self) -> str:
        if self.ok:
            return "TMDB data in the local database has been updated with the latest movies and TV shows."
        failed = [phase.media_type.label for phase in self.phases.values() if not phase.ok]
        return f"TMDB sync finished with errors; failed to fetch {' and '.join(failed)}. See logs for details."

    def count(self, media_type: MediaType) -> int:
        phase = self.phases.get(media_type)
        return phase.saved if phase else 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "notice": self.message,
            "level": self.level,
            "movies": self.count(MediaType.MOVIE),
            "tvshows": self.count(MediaType.TV),
        }


class SyncReporter:
    """Logging collaborator; the pipeline calls it once each step has finished."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("popular_media.sync")

    def sync_started(self, summary: SyncSummary) -> None:
        self.logger.info(f"TMDB sync start: triggered_by={summary.actor} at={summary.started_at}")

    def phase_succeeded(self, phase: PhaseResult) -> None:
        self.logger.info(
            f"TMDB {phase.media_type.label} fetched and saved: "
            f"saved={phase.saved} fetched={phase.fetched} skipped={phase.skipped}"
        )

    def phase_failed(self, phase: PhaseResult) -> None:
        self.logger.warning(f"Failed to fetch {phase.media_type.label} from TMDB: {phase.error}")

    def record_skipped(self, media_type: MediaType, provider_id: Any, reason: str) -> None:
        self.logger.warning(f"Skipping {media_type.value} tmdb_id={provider_id}: {reason}")

    def sync_completed(self, summary: SyncSummary) -> None:
        self.logger.info(f"TMDB sync completed at={summary.finished_at} ok={summary.ok}")

    def backfill_started(self, actor: str, candidates: int) -> None:
        self.logger.info(f"Genre backfill start: triggered_by={actor} candidates={candidates}")

    def backfill_skipped(self, record: CanonicalMediaRecord, reason: str) -> None:
        self.logger.info(f"Genre backfill skipped tmdb_id={record.provider_id} title={record.title!r}: {reason}")

    def backfill_updated(self, update: BackfillUpdate) -> None:
        self.logger.info(f"Genre backfill updated tmdb_id={update.provider_id} genres={update.genre_text!r}")

    def backfill_completed(self, actor: str, updated: int, candidates: int) -> None:
        self.logger.info(f"Genre backfill completed: triggered_by={actor} updated={updated}/{candidates}")

    def sample_served(self, actor: str, media_type: MediaType, method: str, count: int) -> None:
        self.logger.info(f"DB fetch: user={actor} type={media_type.value} method={method} count={count}")


class MediaSync:
    def __init__(
        self,
        db: Client,
        client: MediaProvider,
        *,
        genre_table: GenreTable = DEFAULT_GENRE_TABLE,
        reporter: SyncReporter | None = None,
    ) -> None:
        self.db = db
        self.client = client
        self.genre_table = genre_table
        self.reporter = reporter or SyncReporter()

    def _sync_media_type(self, media_type: MediaType) -> PhaseResult:
        phase = PhaseResult(media_type=media_type)
        try:
            items = self.client.fetch_popular(media_type)
        except TmdbClientError as exc:
            phase.error = str(exc)
            self.reporter.phase_failed(phase)
            return phase

        phase.fetched = len(items)
        for item in items:
            provider_id = item.get("id")
            try:
                record = normalize_payload(item, media_type, genre_table=self.genre_table)
                upsert_media_item(self.db, record)
            except (MediaNormalizationError, MediaRepositoryError) as exc:
                phase.skipped += 1
                self.reporter.record_skipped(media_type, provider_id, str(exc))
                continue
            phase.saved += 1

        self.reporter.phase_succeeded(phase)
        return phase

    def run_full_sync(self, actor: str | None = None) -> SyncSummary:
        summary = SyncSummary(actor=actor or SYSTEM_ACTOR, started_at=_now_utc_iso())
        self.reporter.sync_started(summary)
        for media_type in SYNC_ORDER:
            summary.phases[media_type] = self._sync_media_type(media_type)
        summary.finished_at = _now_utc_iso()
        self.reporter.sync_completed(summary)
        return summary

    def run_genre_backfill(self, actor: str | None = None) -> list[BackfillUpdate]:
        actor = actor or SYSTEM_ACTOR
        candidates = find_missing_genre(self.db)
        self.reporter.backfill_started(actor, len(candidates))

        updated: list[BackfillUpdate] = []
        for record in candidates:
            try:
                details = self.client.fetch_details(record.provider_id, record.media_type)
            except TmdbClientError as exc:
                self.reporter.backfill_skipped(record, f"details fetch failed: {exc}")
                continue

            names = extract_genre_names(details)
            if not names:
                self.reporter.backfill_skipped(record, "no genres in TMDb details")
                continue

            genre_text = GENRE_SEPARATOR.join(names)
            try:
                update_genre_text(self.db, record.provider_id, genre_text)
            except MediaRepositoryError as exc:
                self.reporter.backfill_skipped(record, str(exc))
                continue

            update = BackfillUpdate(
                provider_id=record.provider_id,
                title=record.title,
                media_type=record.media_type,
                genre_text=genre_text,
            )
            self.reporter.backfill_updated(update)
            updated.append(update)

        self.reporter.backfill_completed(actor, len(updated), len(candidates))
        return updated
