"""
API-Football (v3) stat source.

Works against API-Sports directly (host `v3.football.api-sports.io`) or
through RapidAPI; the host decides which auth headers are sent.

The `parse_*` helpers turn raw response items into domain types and are
kept separate from the HTTP calls so they can be tested on canned payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import requests

from goalcast.config import (
    API_FOOTBALL_HOST,
    API_FOOTBALL_KEY,
    DEFAULT_TEAM_AVERAGE,
    FINISHED_STATUSES,
    H2H_RECENT_MEETINGS,
    RECENT_FORM_WINDOW,
    REQUEST_TIMEOUT_SECONDS,
)
from goalcast.data.schema import Fixture, H2HRecord, TeamStats, parse_form
from goalcast.data.sources import StatSource
from goalcast.errors import SourceError
from goalcast.utils.logging_utils import get_logger

logger = get_logger(__name__)


def _average(value: Any) -> float:
    """Parse a provider average ("1.7", 1.7, None), defaulting when absent or zero."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return DEFAULT_TEAM_AVERAGE
    return round(parsed, 1) if parsed else DEFAULT_TEAM_AVERAGE


def parse_fixture(item: Dict[str, Any]) -> Fixture:
    """Build a Fixture from one item of the `/fixtures` response."""
    fixture = item["fixture"]
    league = item["league"]
    teams = item["teams"]
    return Fixture(
        fixture_id=int(fixture["id"]),
        kickoff=datetime.fromisoformat(fixture["date"]),
        league_id=int(league["id"]),
        league_name=league["name"],
        season=int(league["season"]),
        home_team_id=int(teams["home"]["id"]),
        home_team=teams["home"]["name"],
        away_team_id=int(teams["away"]["id"]),
        away_team=teams["away"]["name"],
    )


def parse_team_statistics(
    stats: Optional[Dict[str, Any]],
    form_window: int = RECENT_FORM_WINDOW,
) -> Optional[TeamStats]:
    """
    Build TeamStats from the `/teams/statistics` response object.

    Returns None when the payload carries no fixtures block, which the
    provider does for teams without a season in that league.
    """
    if not stats or not stats.get("fixtures"):
        return None

    goals = stats.get("goals") or {}
    scored = (goals.get("for") or {}).get("average") or {}
    conceded = (goals.get("against") or {}).get("average") or {}
    played = ((stats["fixtures"].get("played") or {}).get("total")) or 0

    return TeamStats(
        goals_scored=_average(scored.get("total")),
        goals_conceded=_average(conceded.get("total")),
        home_performance=_average(scored.get("home")),
        away_performance=_average(scored.get("away")),
        form=parse_form(stats.get("form"), form_window),
        matches_played=int(played),
    )


def _is_finished(meeting: Dict[str, Any]) -> bool:
    fixture = meeting.get("fixture") or {}
    if not fixture.get("date"):
        return False
    status = (fixture.get("status") or {}).get("short")
    if status is not None:
        return status in FINISHED_STATUSES
    goals = meeting.get("goals") or {}
    return goals.get("home") is not None and goals.get("away") is not None


def parse_head_to_head(
    meetings: Sequence[Dict[str, Any]],
    limit: int = H2H_RECENT_MEETINGS,
) -> H2HRecord:
    """Reduce `/fixtures/headtohead` items to the totals of the latest meetings."""
    finished = [m for m in meetings if _is_finished(m)]
    finished.sort(key=lambda m: m["fixture"]["date"], reverse=True)

    totals: List[int] = []
    for meeting in finished[:limit]:
        goals = meeting.get("goals") or {}
        totals.append((goals.get("home") or 0) + (goals.get("away") or 0))

    return H2HRecord.from_totals(totals)


def parse_injuries(items: Sequence[Dict[str, Any]]) -> List[str]:
    """One "<player> (<reason>)" note per `/injuries` item."""
    notes: List[str] = []
    for item in items:
        player = item.get("player") or {}
        name = player.get("name") or "Unknown player"
        reason = player.get("reason")
        notes.append(f"{name} ({reason})" if reason else name)
    return notes


class ApiFootballSource(StatSource):
    """StatSource backed by the API-Football REST API."""

    def __init__(
        self,
        api_key: str = API_FOOTBALL_KEY,
        host: str = API_FOOTBALL_HOST,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("An API-Football key is required (set FOOTBALL_API_KEY).")

        if "api-sports.io" in host:
            self.base_url = f"https://{host}"
            self.headers = {"x-apisports-key": api_key}
        else:
            self.base_url = f"https://{host}/v3"
            self.headers = {
                "X-RapidAPI-Key": api_key,
                "X-RapidAPI-Host": host,
            }
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/{endpoint}"
        logger.debug("GET %s %s", url, params)

        try:
            response = self.session.get(
                url, params=params, headers=self.headers, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise SourceError(f"{endpoint} request failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise SourceError(
                f"{endpoint} returned an unexpected payload: {type(payload).__name__}"
            )

        # The API reports quota and parameter problems with HTTP 200
        errors = payload.get("errors")
        if errors:
            raise SourceError(f"{endpoint} returned errors: {errors}")

        return payload.get("response")

    def list_fixtures(self, dates: Sequence[str]) -> List[Fixture]:
        fixtures: List[Fixture] = []
        for day in dates:
            items = self._get("fixtures", {"date": day}) or []
            for item in items:
                try:
                    fixtures.append(parse_fixture(item))
                except (KeyError, TypeError, ValueError) as exc:
                    logger.warning("Skipping unparsable fixture item: %s", exc)
        logger.info("Listed %d fixtures for %d date(s).", len(fixtures), len(dates))
        return fixtures

    def get_team_stats(
        self, team_id: int, league_id: int, season: int
    ) -> Optional[TeamStats]:
        stats = self._get(
            "teams/statistics",
            {"team": team_id, "league": league_id, "season": season},
        )
        return parse_team_statistics(stats)

    def get_head_to_head(self, team_a: int, team_b: int) -> Optional[H2HRecord]:
        meetings = self._get("fixtures/headtohead", {"h2h": f"{team_a}-{team_b}"})
        return parse_head_to_head(meetings or [])

    def get_injuries(self, team_id: int) -> List[str]:
        items = self._get("injuries", {"team": team_id})
        return parse_injuries(items or [])
