"""
Data loading utilities for GoalCast.

This module flattens forecasts into a table and stores / loads that table
as CSV, so forecasts can be resolved against final scores later.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from goalcast.data.schema import FORECAST_COLUMNS, MatchForecast, validate_forecasts_df
from goalcast.utils.logging_utils import get_logger
from goalcast.utils.paths import get_processed_data_path

logger = get_logger(__name__)


def forecasts_to_frame(forecasts: Sequence[MatchForecast]) -> pd.DataFrame:
    """
    Flatten forecasts into one row per fixture.

    Parameters
    ----------
    forecasts : Sequence[MatchForecast]
        Pipeline output.

    Returns
    -------
    pandas.DataFrame
        DataFrame with FORECAST_COLUMNS, in input order.
    """
    rows = []
    for item in forecasts:
        fixture = item.match.fixture
        forecast = item.forecast
        rows.append(
            {
                "id": fixture.fixture_id,
                "date": fixture.date,
                "time": fixture.time,
                "home_team": fixture.home_team,
                "away_team": fixture.away_team,
                "league": fixture.league_name,
                "is_derby": item.match.is_derby,
                "is_rivalry": item.match.is_rivalry,
                "motivation": item.match.motivation.value,
                "prediction": forecast.bucket,
                "expected_goals": forecast.expected_goals,
                "confidence": forecast.confidence,
                "range_min": forecast.goal_range.min,
                "range_max": forecast.goal_range.max,
                "reasoning": forecast.reasoning,
            }
        )
    return pd.DataFrame(rows, columns=FORECAST_COLUMNS)


def save_forecasts(
    forecasts: Sequence[MatchForecast],
    path: Optional[Path | str] = None,
) -> Path:
    """
    Write forecasts to CSV.

    Parameters
    ----------
    forecasts : Sequence[MatchForecast]
        Forecasts to store.
    path : pathlib.Path | str | None
        Target CSV. If None, uses the default forecasts file in the
        processed data directory.

    Returns
    -------
    pathlib.Path
        The written file.
    """
    csv_path = Path(path) if path is not None else get_processed_data_path()
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    df = forecasts_to_frame(forecasts)
    df.to_csv(csv_path, index=False)
    logger.info("Saved %d forecasts to %s", len(df), csv_path)
    return csv_path


def load_forecasts(path: Optional[Path | str] = None) -> pd.DataFrame:
    """
    Load a forecast table from CSV and validate it.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    csv_path = Path(path) if path is not None else get_processed_data_path()
    if not csv_path.exists():
        raise FileNotFoundError(
            f"Forecasts file not found: {csv_path}. "
            f"Run the forecast pipeline first."
        )

    logger.info("Loading forecasts from %s", csv_path)
    df = pd.read_csv(csv_path)
    df = validate_forecasts_df(df)
    logger.info("Loaded %d forecasts.", len(df))
    return df
