"""
Stat source interface.

The enrichment pipeline only talks to this interface, so the transport
(REST API, cache, test double) is chosen by whoever builds the pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from goalcast.data.schema import Fixture, H2HRecord, TeamStats


class StatSource(ABC):
    """
    Provider of fixtures and per-team statistics.

    Lookups signal failure either by raising (typically
    `goalcast.errors.SourceError`) or by returning None.
    """

    @abstractmethod
    def list_fixtures(self, dates: Sequence[str]) -> List[Fixture]:
        """
        List fixtures scheduled on the given dates.

        Args:
            dates: ISO dates (YYYY-MM-DD)

        Returns:
            Fixtures in provider order
        """

    @abstractmethod
    def get_team_stats(
        self, team_id: int, league_id: int, season: int
    ) -> Optional[TeamStats]:
        """
        Fetch season statistics for one team in one league.

        Returns:
            TeamStats or None if the provider has no usable data
        """

    @abstractmethod
    def get_head_to_head(self, team_a: int, team_b: int) -> Optional[H2HRecord]:
        """Fetch goals in recent meetings between two teams."""

    @abstractmethod
    def get_injuries(self, team_id: int) -> List[str]:
        """
        Fetch current injury notes for one team.

        Returns:
            One note per injured player; empty when there are no concerns
        """
