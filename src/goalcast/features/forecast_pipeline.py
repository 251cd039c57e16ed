"""
End-to-end forecast pipeline for GoalCast.

Usage (from project root, with FOOTBALL_API_KEY set):

    python -m goalcast.features.forecast_pipeline --date 2026-10-24

This will:
- List fixtures for the given dates and keep major-league ones.
- Enrich up to MAX_FIXTURES_PER_BATCH fixtures concurrently.
- Forecast the total goals of every fixture that survived enrichment.
- Save the forecasts to data/processed/forecasts.csv.
"""

from __future__ import annotations

import argparse
from datetime import date
from typing import Iterable, List, Sequence

from goalcast.config import MAJOR_LEAGUES
from goalcast.data.api_football import ApiFootballSource
from goalcast.data.data_loader import save_forecasts
from goalcast.data.schema import Fixture, MatchForecast
from goalcast.data.sources import StatSource
from goalcast.errors import MalformedBatchInput
from goalcast.features.enricher import EnrichmentConfig, FixtureEnricher
from goalcast.models.predictor import (
    AveragesPredictor,
    FullContextPredictor,
    GoalsPredictor,
    confidence_level,
)
from goalcast.utils.logging_utils import get_logger

logger = get_logger(__name__)

PREDICTORS = {
    FullContextPredictor.name: FullContextPredictor,
    AveragesPredictor.name: AveragesPredictor,
}


def validate_dates(dates: Sequence[str]) -> List[str]:
    """
    Check a date selection before any external call is made.

    Raises
    ------
    MalformedBatchInput
        If `dates` is not a non-empty list of ISO dates (YYYY-MM-DD).
    """
    if isinstance(dates, str) or not isinstance(dates, (list, tuple)):
        raise MalformedBatchInput("Invalid dates parameter: expected a list of dates.")
    if not dates:
        raise MalformedBatchInput("Invalid dates parameter: no dates given.")

    invalid = []
    for day in dates:
        try:
            date.fromisoformat(day)
        except (TypeError, ValueError):
            invalid.append(day)
    if invalid:
        raise MalformedBatchInput(f"Invalid dates parameter: {invalid}")

    return list(dates)


def select_fixtures(
    fixtures: Iterable[Fixture],
    leagues: Sequence[str] = MAJOR_LEAGUES,
) -> List[Fixture]:
    """Keep fixtures whose league name matches one of `leagues` (either way round)."""
    return [
        fixture
        for fixture in fixtures
        if any(
            league in fixture.league_name or fixture.league_name in league
            for league in leagues
        )
    ]


def run_forecast_pipeline(
    fixtures: Sequence[Fixture],
    source: StatSource,
    predictor: GoalsPredictor | None = None,
    config: EnrichmentConfig | None = None,
) -> List[MatchForecast]:
    """
    Enrich and forecast a batch of fixtures.

    Parameters
    ----------
    fixtures : Sequence[Fixture]
        Candidate fixtures, already selected upstream. Only the first
        `config.max_fixtures` are processed.
    source : StatSource
        Where team statistics, head-to-head and injuries come from.
    predictor : GoalsPredictor | None
        Goals model. Defaults to FullContextPredictor.
    config : EnrichmentConfig | None
        Enrichment settings. If None, uses defaults from config.py.

    Returns
    -------
    List[MatchForecast]
        Forecasts in input order. Fixtures that could not be enriched or
        forecast are omitted.
    """
    predictor = predictor or FullContextPredictor()
    enricher = FixtureEnricher(source, config)

    logger.info(
        "Starting forecast pipeline for %d fixtures with the %s model...",
        len(fixtures),
        predictor.name,
    )
    enriched = enricher.enrich_batch(fixtures)

    forecasts: List[MatchForecast] = []
    for match in enriched:
        try:
            forecast = predictor.predict(match)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Dropping fixture %s: prediction failed: %s",
                match.fixture.fixture_id,
                exc,
            )
            continue
        forecasts.append(MatchForecast(match=match, forecast=forecast))

    logger.info("Forecast pipeline produced %d forecasts.", len(forecasts))
    return forecasts


def forecast_dates(
    dates: Sequence[str],
    source: StatSource,
    predictor: GoalsPredictor | None = None,
    config: EnrichmentConfig | None = None,
) -> List[MatchForecast]:
    """
    Forecast the major-league fixtures scheduled on `dates`.

    Raises
    ------
    MalformedBatchInput
        If the date selection is invalid; nothing is fetched in that case.
    """
    days = validate_dates(dates)
    fixtures = select_fixtures(source.list_fixtures(days))
    logger.info("Selected %d major-league fixtures.", len(fixtures))
    return run_forecast_pipeline(fixtures, source, predictor, config)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run GoalCast forecast pipeline.")
    parser.add_argument(
        "--date",
        dest="dates",
        action="append",
        required=True,
        help="Match date (YYYY-MM-DD). Repeat for several dates.",
    )
    parser.add_argument(
        "--model",
        choices=sorted(PREDICTORS),
        default=FullContextPredictor.name,
        help="Goals model to use.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-lookup timeout in seconds (a slow lookup counts as failed).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="CSV path. If not provided, uses data/processed/forecasts.csv.",
    )
    args = parser.parse_args()

    forecasts = forecast_dates(
        args.dates,
        ApiFootballSource(),
        predictor=PREDICTORS[args.model](),
        config=EnrichmentConfig(lookup_timeout=args.timeout),
    )
    for item in forecasts:
        fixture = item.match.fixture
        logger.info(
            "%s %s vs %s: %.2f goals (%s, confidence %s) - %s",
            fixture.date,
            fixture.home_team,
            fixture.away_team,
            item.forecast.expected_goals,
            item.forecast.bucket or "no bucket",
            confidence_level(item.forecast.confidence),
            item.forecast.reasoning,
        )
    save_forecasts(forecasts, args.output)


if __name__ == "__main__":
    main()
