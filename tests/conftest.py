from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Set

import pytest

from goalcast.data.schema import (
    EnrichedMatch,
    Fixture,
    FormResult,
    H2HRecord,
    InjuryReport,
    Motivation,
    TeamStats,
)
from goalcast.data.sources import StatSource
from goalcast.errors import SourceError


def make_fixture(
    fixture_id: int = 1,
    home_team: str = "Home FC",
    away_team: str = "Away FC",
    league_name: str = "Premier League",
    home_team_id: Optional[int] = None,
    away_team_id: Optional[int] = None,
) -> Fixture:
    return Fixture(
        fixture_id=fixture_id,
        kickoff=datetime(2026, 10, 24, 15, 0, tzinfo=timezone.utc),
        league_id=39,
        league_name=league_name,
        season=2026,
        home_team_id=home_team_id if home_team_id is not None else fixture_id * 100 + 1,
        home_team=home_team,
        away_team_id=away_team_id if away_team_id is not None else fixture_id * 100 + 2,
        away_team=away_team,
    )


def make_stats(
    goals_scored: float = 1.8,
    home_performance: float = 1.8,
    away_performance: float = 1.8,
    form: Sequence[FormResult] = (),
) -> TeamStats:
    return TeamStats(
        goals_scored=goals_scored,
        goals_conceded=1.2,
        home_performance=home_performance,
        away_performance=away_performance,
        form=tuple(form),
        matches_played=10,
    )


def make_match(
    home: Optional[TeamStats] = None,
    away: Optional[TeamStats] = None,
    h2h: Optional[H2HRecord] = None,
    injuries: Optional[InjuryReport] = None,
    is_derby: bool = False,
    is_rivalry: bool = False,
    motivation: Motivation = Motivation.MID_TABLE,
    fixture: Optional[Fixture] = None,
) -> EnrichedMatch:
    return EnrichedMatch(
        fixture=fixture or make_fixture(),
        home_stats=home or make_stats(),
        away_stats=away or make_stats(),
        h2h=h2h or H2HRecord.default(),
        injuries=injuries or InjuryReport(),
        is_derby=is_derby,
        is_rivalry=is_rivalry,
        motivation=motivation,
    )


class FakeStatSource(StatSource):
    """
    Canned StatSource.

    Team ids in `failing_teams` raise SourceError from get_team_stats, ids in
    `empty_teams` return None. `h2h_fails` / `injuries_fail` make the
    optional lookups raise.
    """

    def __init__(
        self,
        fixtures: Sequence[Fixture] = (),
        stats: Optional[Dict[int, TeamStats]] = None,
        failing_teams: Set[int] = frozenset(),
        empty_teams: Set[int] = frozenset(),
        h2h: Optional[H2HRecord] = None,
        h2h_fails: bool = False,
        injuries: Optional[Dict[int, List[str]]] = None,
        injuries_fail: bool = False,
    ):
        self.fixtures = list(fixtures)
        self.stats = stats or {}
        self.failing_teams = set(failing_teams)
        self.empty_teams = set(empty_teams)
        self.h2h = h2h
        self.h2h_fails = h2h_fails
        self.injuries = injuries or {}
        self.injuries_fail = injuries_fail
        self.listed_dates: List[Sequence[str]] = []
        self.stats_calls: List[int] = []

    def list_fixtures(self, dates):
        self.listed_dates.append(dates)
        return list(self.fixtures)

    def get_team_stats(self, team_id, league_id, season):
        self.stats_calls.append(team_id)
        if team_id in self.failing_teams:
            raise SourceError(f"stats unavailable for team {team_id}")
        if team_id in self.empty_teams:
            return None
        return self.stats.get(team_id, make_stats())

    def get_head_to_head(self, team_a, team_b):
        if self.h2h_fails:
            raise SourceError("h2h endpoint down")
        return self.h2h or H2HRecord.from_totals([2, 3, 1])

    def get_injuries(self, team_id):
        if self.injuries_fail:
            raise SourceError("injuries endpoint down")
        return self.injuries.get(team_id, [])


@pytest.fixture
def fake_source() -> FakeStatSource:
    fixtures = [make_fixture(fixture_id=i) for i in range(1, 4)]
    return FakeStatSource(fixtures=fixtures)
