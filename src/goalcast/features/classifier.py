"""
Match context tags: derby, rivalry and motivation.

All functions are pure. Pair lookups use substring containment so that
"Manchester United FC" or "AC Milan" still match the listed names.
"""

from __future__ import annotations

from typing import List, Tuple

from goalcast.config import (
    CONTINENTAL_KEYWORDS,
    DERBY_PAIRS,
    RELEGATION_GOALS_THRESHOLD,
    RIVALRY_PAIRS,
    TITLE_RACE_GOALS_THRESHOLD,
)
from goalcast.data.schema import Motivation, TeamStats


def _matches_pair(team_a: str, team_b: str, pairs: List[Tuple[str, str]]) -> bool:
    return any(
        (first in team_a and second in team_b)
        or (second in team_a and first in team_b)
        for first, second in pairs
    )


def is_derby(team_a: str, team_b: str) -> bool:
    """True if the two teams form a known derby, in either order."""
    return _matches_pair(team_a, team_b, DERBY_PAIRS)


def is_rivalry(team_a: str, team_b: str) -> bool:
    """True if the two teams form a known (non-derby) rivalry, in either order."""
    return _matches_pair(team_a, team_b, RIVALRY_PAIRS)


def motivation(
    home_stats: TeamStats,
    away_stats: TeamStats,
    league_name: str,
) -> Motivation:
    """
    Tag the stakes of a fixture.

    Continental competitions win outright; otherwise the mean goals-scored
    average of both teams separates title races from relegation battles.

    Parameters
    ----------
    home_stats, away_stats : TeamStats
        Season statistics of both teams.
    league_name : str
        Competition name as listed by the source.

    Returns
    -------
    Motivation
        Exactly one motivation tag.
    """
    if any(keyword in league_name for keyword in CONTINENTAL_KEYWORDS):
        return Motivation.CONTINENTAL

    mean_scored = (home_stats.goals_scored + away_stats.goals_scored) / 2
    if mean_scored > TITLE_RACE_GOALS_THRESHOLD:
        return Motivation.TITLE_RACE
    if mean_scored < RELEGATION_GOALS_THRESHOLD:
        return Motivation.RELEGATION
    return Motivation.MID_TABLE
