# path: src/goalcast/features/enricher.py
"""
Fixture enrichment for GoalCast.

For every fixture four lookups run concurrently against a StatSource:

- home team statistics (mandatory)
- away team statistics (mandatory)
- head-to-head history (optional, falls back to H2HRecord.default())
- injuries for both teams (optional, falls back to InjuryReport.unavailable())

A fixture whose mandatory lookups fail is dropped: `enrich` returns None and
the cause is logged. Optional failures never drop a fixture.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from goalcast.config import MAX_FIXTURES_PER_BATCH
from goalcast.data.schema import EnrichedMatch, Fixture, H2HRecord, InjuryReport
from goalcast.data.sources import StatSource
from goalcast.errors import SourceError
from goalcast.features import classifier
from goalcast.utils.logging_utils import get_logger

logger = get_logger(__name__)

LOOKUPS_PER_FIXTURE = 4


@dataclass
class EnrichmentConfig:
    """
    Configuration for fixture enrichment.

    Attributes
    ----------
    max_fixtures : int
        Fixtures beyond this count are not enriched at all.
    lookup_timeout : float | None
        Seconds to wait for a single lookup. A lookup that takes longer is
        treated as a failed source. None waits for completion.
    max_workers : int | None
        Fixtures enriched at the same time. None enriches the whole
        (capped) batch at once.
    """

    max_fixtures: int = MAX_FIXTURES_PER_BATCH
    lookup_timeout: float | None = None
    max_workers: int | None = None


class FixtureEnricher:
    """Turns fixtures into EnrichedMatch records using one StatSource."""

    def __init__(self, source: StatSource, config: EnrichmentConfig | None = None):
        self.source = source
        self.config = config or EnrichmentConfig()

    def _fetch_injuries(self, fixture: Fixture) -> InjuryReport:
        home = self.source.get_injuries(fixture.home_team_id)
        away = self.source.get_injuries(fixture.away_team_id)
        if home is None or away is None:
            raise SourceError("injury lookup returned no data")
        return InjuryReport(home=tuple(home), away=tuple(away))

    def _resolve(
        self,
        future: Future,
        what: str,
        fixture: Fixture,
        mandatory: bool,
    ) -> Optional[Any]:
        """Wait for one lookup; a raised error, timeout or None counts as failure."""
        level = logging.WARNING if mandatory else logging.INFO
        try:
            value = future.result(timeout=self.config.lookup_timeout)
        except FuturesTimeout:
            logger.log(
                level,
                "Fixture %s: %s timed out after %ss.",
                fixture.fixture_id,
                what,
                self.config.lookup_timeout,
            )
            return None
        except Exception as exc:  # noqa: BLE001
            logger.log(
                level,
                "Fixture %s: %s failed: %s", fixture.fixture_id, what, exc
            )
            return None

        if value is None:
            logger.log(
                level,
                "Fixture %s: %s returned no data.", fixture.fixture_id, what
            )
        return value

    def enrich(self, fixture: Fixture) -> Optional[EnrichedMatch]:
        """
        Gather statistics for one fixture.

        Parameters
        ----------
        fixture : Fixture
            The fixture to enrich.

        Returns
        -------
        EnrichedMatch | None
            None when either team's statistics could not be obtained or the
            match could not be classified.
        """
        pool = ThreadPoolExecutor(
            max_workers=LOOKUPS_PER_FIXTURE,
            thread_name_prefix=f"fixture-{fixture.fixture_id}",
        )
        try:
            home_future = pool.submit(
                self.source.get_team_stats,
                fixture.home_team_id,
                fixture.league_id,
                fixture.season,
            )
            away_future = pool.submit(
                self.source.get_team_stats,
                fixture.away_team_id,
                fixture.league_id,
                fixture.season,
            )
            h2h_future = pool.submit(
                self.source.get_head_to_head,
                fixture.home_team_id,
                fixture.away_team_id,
            )
            injuries_future = pool.submit(self._fetch_injuries, fixture)

            home_stats = self._resolve(home_future, "home team stats", fixture, True)
            away_stats = self._resolve(away_future, "away team stats", fixture, True)
            h2h = self._resolve(h2h_future, "head-to-head", fixture, False)
            injuries = self._resolve(injuries_future, "injuries", fixture, False)
        finally:
            # Do not block on lookups that already timed out
            pool.shutdown(wait=False, cancel_futures=True)

        if home_stats is None or away_stats is None:
            logger.warning(
                "Dropping fixture %s (%s vs %s): team statistics unavailable.",
                fixture.fixture_id,
                fixture.home_team,
                fixture.away_team,
            )
            return None

        if h2h is None:
            h2h = H2HRecord.default()
        if injuries is None:
            injuries = InjuryReport.unavailable()

        try:
            return EnrichedMatch(
                fixture=fixture,
                home_stats=home_stats,
                away_stats=away_stats,
                h2h=h2h,
                injuries=injuries,
                is_derby=classifier.is_derby(fixture.home_team, fixture.away_team),
                is_rivalry=classifier.is_rivalry(fixture.home_team, fixture.away_team),
                motivation=classifier.motivation(
                    home_stats, away_stats, fixture.league_name
                ),
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Dropping fixture %s: classification failed: %s",
                fixture.fixture_id,
                exc,
            )
            return None

    def enrich_batch(self, fixtures: Iterable[Fixture]) -> List[EnrichedMatch]:
        """
        Enrich a batch of fixtures concurrently.

        The batch is capped at `config.max_fixtures` before any lookup. The
        result keeps the input order; dropped fixtures are simply absent.
        """
        batch = list(fixtures)
        if len(batch) > self.config.max_fixtures:
            logger.info(
                "Capping batch of %d fixtures to %d.",
                len(batch),
                self.config.max_fixtures,
            )
            batch = batch[: self.config.max_fixtures]

        if not batch:
            return []

        workers = min(len(batch), self.config.max_workers or len(batch))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(self.enrich, batch))

        enriched = [match for match in results if match is not None]
        logger.info(
            "Enriched %d of %d fixtures (%d dropped).",
            len(enriched),
            len(batch),
            len(batch) - len(enriched),
        )
        return enriched
