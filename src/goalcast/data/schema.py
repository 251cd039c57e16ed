"""
Domain types for fixtures, team statistics and forecasts.

Every record here is a frozen dataclass: once a source has produced it, the
enrichment and prediction steps only read it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from goalcast.config import (
    DEFAULT_H2H_AVERAGE,
    DEFAULT_H2H_RECENT,
    INJURY_DATA_UNAVAILABLE,
    NO_INJURY_CONCERNS,
    RECENT_FORM_WINDOW,
)
from goalcast.utils.logging_utils import get_logger

logger = get_logger(__name__)


class FormResult(str, Enum):
    """Outcome of one past match from a team's perspective."""

    WIN = "W"
    DRAW = "D"
    LOSS = "L"
    UNKNOWN = "?"

    @classmethod
    def from_symbol(cls, symbol: str) -> "FormResult":
        """Map a provider symbol (W/D/L) to a result; anything else is UNKNOWN."""
        try:
            return cls(symbol.upper())
        except ValueError:
            return cls.UNKNOWN


def parse_form(form: Optional[str], window: int = RECENT_FORM_WINDOW) -> Tuple[FormResult, ...]:
    """
    Parse a provider form string into a most-recent-first tuple.

    Providers list results oldest first (e.g. "LWDWW" ends with the latest
    match). A missing form string yields `window` UNKNOWN results.
    """
    if not form:
        return tuple(FormResult.UNKNOWN for _ in range(window))
    latest_first = reversed(form.strip()[-window:])
    return tuple(FormResult.from_symbol(ch) for ch in latest_first)


class Motivation(str, Enum):
    """Categorical stakes of a fixture."""

    CONTINENTAL = "European competition"
    TITLE_RACE = "title race potential"
    RELEGATION = "relegation battle"
    MID_TABLE = "mid-table clash"


@dataclass(frozen=True)
class Fixture:
    """A scheduled match between two teams, as listed by a source."""

    fixture_id: int
    kickoff: datetime
    league_id: int
    league_name: str
    season: int
    home_team_id: int
    home_team: str
    away_team_id: int
    away_team: str

    @property
    def date(self) -> str:
        return self.kickoff.strftime("%Y-%m-%d")

    @property
    def time(self) -> str:
        return self.kickoff.strftime("%H:%M")


@dataclass(frozen=True)
class TeamStats:
    """Season averages and recent form for one team."""

    goals_scored: float
    goals_conceded: float
    home_performance: float
    away_performance: float
    form: Tuple[FormResult, ...] = ()
    matches_played: int = 0

    def __post_init__(self) -> None:
        averages = {
            "goals_scored": self.goals_scored,
            "goals_conceded": self.goals_conceded,
            "home_performance": self.home_performance,
            "away_performance": self.away_performance,
        }
        negative = [name for name, value in averages.items() if value < 0]
        if negative:
            raise ValueError(f"Team averages must be non-negative: {negative}")
        if len(self.form) > RECENT_FORM_WINDOW:
            raise ValueError(
                f"Form holds {len(self.form)} results, "
                f"window is {RECENT_FORM_WINDOW}"
            )

    @property
    def wins(self) -> int:
        return sum(1 for result in self.form if result is FormResult.WIN)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "goalsScored": self.goals_scored,
            "goalsConceded": self.goals_conceded,
            "form": [result.value for result in self.form],
            "homePerf": self.home_performance,
            "awayPerf": self.away_performance,
            "played": self.matches_played,
        }


@dataclass(frozen=True)
class H2HRecord:
    """Goals in recent meetings between two teams (most recent first)."""

    average: float
    recent_totals: Tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.recent_totals:
            raise ValueError("H2HRecord needs at least one meeting; use H2HRecord.default()")

    @classmethod
    def default(cls) -> "H2HRecord":
        return cls(average=DEFAULT_H2H_AVERAGE, recent_totals=DEFAULT_H2H_RECENT)

    @classmethod
    def from_totals(cls, totals: Sequence[int]) -> "H2HRecord":
        """Build a record from per-meeting totals, or the default when empty."""
        if not totals:
            return cls.default()
        average = round(sum(totals) / len(totals), 1)
        return cls(average=average, recent_totals=tuple(totals))

    def to_dict(self) -> Dict[str, Any]:
        return {"avg": self.average, "last5": list(self.recent_totals)}


@dataclass(frozen=True)
class InjuryReport:
    """
    Injury notes per side.

    An available report with no notes means "no concerns"; a report with
    `available=False` means the source could not be read.
    """

    home: Tuple[str, ...] = ()
    away: Tuple[str, ...] = ()
    available: bool = True

    @classmethod
    def unavailable(cls) -> "InjuryReport":
        return cls(available=False)

    @property
    def injury_count(self) -> int:
        if not self.available:
            return 0
        return len(self.home) + len(self.away)

    @property
    def notes(self) -> List[str]:
        if not self.available:
            return [INJURY_DATA_UNAVAILABLE]
        notes: List[str] = []
        if self.home:
            notes.append(f"{len(self.home)} player(s) injured (home)")
        if self.away:
            notes.append(f"{len(self.away)} player(s) injured (away)")
        return notes or [NO_INJURY_CONCERNS]


@dataclass(frozen=True)
class EnrichedMatch:
    """A fixture with everything the full-context predictor needs."""

    fixture: Fixture
    home_stats: TeamStats
    away_stats: TeamStats
    h2h: H2HRecord
    injuries: InjuryReport
    is_derby: bool
    is_rivalry: bool
    motivation: Motivation


@dataclass(frozen=True)
class MatchAverages:
    """Reduced input of the averages-only predictor."""

    match_id: str
    home_team: str
    away_team: str
    home_avg_goals: float
    away_avg_goals: float
    home_form: Tuple[FormResult, ...] = ()
    away_form: Tuple[FormResult, ...] = ()
    h2h_totals: Tuple[int, ...] = ()

    @classmethod
    def from_enriched(cls, match: EnrichedMatch) -> "MatchAverages":
        return cls(
            match_id=str(match.fixture.fixture_id),
            home_team=match.fixture.home_team,
            away_team=match.fixture.away_team,
            home_avg_goals=match.home_stats.goals_scored,
            away_avg_goals=match.away_stats.goals_scored,
            home_form=match.home_stats.form,
            away_form=match.away_stats.form,
            h2h_totals=match.h2h.recent_totals,
        )


@dataclass(frozen=True)
class GoalRange:
    min: float
    max: float

    def contains(self, goals: float) -> bool:
        return self.min <= goals <= self.max


@dataclass(frozen=True)
class Forecast:
    """Output of a goals predictor for one match."""

    expected_goals: float
    confidence: float
    goal_range: GoalRange
    reasoning: str
    bucket: Optional[str] = None
    home_goals: Optional[float] = None
    away_goals: Optional[float] = None
    model: str = ""


@dataclass(frozen=True)
class MatchForecast:
    """An enriched match paired with its forecast."""

    match: EnrichedMatch
    forecast: Forecast

    def to_record(self) -> Dict[str, Any]:
        """Flatten into the record shape consumed by persistence and UI."""
        fixture = self.match.fixture
        return {
            "id": fixture.fixture_id,
            "date": fixture.date,
            "time": fixture.time,
            "homeTeam": fixture.home_team,
            "awayTeam": fixture.away_team,
            "league": fixture.league_name,
            "isDerby": self.match.is_derby,
            "isRivalry": self.match.is_rivalry,
            "homeStats": self.match.home_stats.to_dict(),
            "awayStats": self.match.away_stats.to_dict(),
            "h2h": self.match.h2h.to_dict(),
            "motivation": self.match.motivation.value,
            "injuries": self.match.injuries.notes,
            "confidence": self.forecast.confidence,
            "prediction": self.forecast.bucket,
            "expectedGoals": self.forecast.expected_goals,
            "range": {
                "min": self.forecast.goal_range.min,
                "max": self.forecast.goal_range.max,
            },
            "reasoning": self.forecast.reasoning,
        }


# Columns of the flat forecast table written by data_loader
FORECAST_COLUMNS: List[str] = [
    "id",
    "date",
    "time",
    "home_team",
    "away_team",
    "league",
    "is_derby",
    "is_rivalry",
    "motivation",
    "prediction",
    "expected_goals",
    "confidence",
    "range_min",
    "range_max",
    "reasoning",
]


def validate_forecasts_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Validate that a DataFrame conforms to the flat forecast schema.

    Checks:
    - All required columns are present.
    - Duplicate fixture ids are dropped (the last row wins).

    Parameters
    ----------
    df : pandas.DataFrame
        Forecast table, e.g. loaded from CSV.

    Returns
    -------
    pandas.DataFrame
        A validated copy.

    Raises
    ------
    ValueError
        If required columns are missing.
    """
    missing = [col for col in FORECAST_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required forecast columns: {missing}")

    df = df.copy()
    before = len(df)
    df = df.drop_duplicates(subset="id", keep="last")
    if len(df) < before:
        logger.info("Dropped %d duplicate forecast rows.", before - len(df))

    return df
