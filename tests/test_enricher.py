import threading
import time

from goalcast.config import DEFAULT_H2H_AVERAGE, DEFAULT_H2H_RECENT, INJURY_DATA_UNAVAILABLE
from goalcast.data.schema import H2HRecord, Motivation
from goalcast.features.enricher import EnrichmentConfig, FixtureEnricher

from conftest import FakeStatSource, make_fixture, make_stats


def test_enrich_builds_classified_match():
    fixture = make_fixture(home_team="Arsenal", away_team="Tottenham Hotspur")
    source = FakeStatSource(
        stats={
            fixture.home_team_id: make_stats(goals_scored=2.8),
            fixture.away_team_id: make_stats(goals_scored=1.2),
        },
        injuries={fixture.home_team_id: ["Saka (Hamstring)"]},
    )

    match = FixtureEnricher(source).enrich(fixture)

    assert match is not None
    assert match.fixture == fixture
    assert match.home_stats.goals_scored == 2.8
    assert match.is_derby
    assert not match.is_rivalry
    assert match.motivation is Motivation.MID_TABLE
    assert match.h2h == H2HRecord.from_totals([2, 3, 1])
    assert match.injuries.home == ("Saka (Hamstring)",)
    assert match.injuries.injury_count == 1


def test_failed_home_stats_drops_fixture():
    fixture = make_fixture()
    source = FakeStatSource(failing_teams={fixture.home_team_id})
    assert FixtureEnricher(source).enrich(fixture) is None


def test_empty_away_stats_drops_fixture():
    fixture = make_fixture()
    source = FakeStatSource(empty_teams={fixture.away_team_id})
    assert FixtureEnricher(source).enrich(fixture) is None


def test_drop_does_not_depend_on_optional_sources():
    fixture = make_fixture()
    for h2h_fails in (False, True):
        for injuries_fail in (False, True):
            source = FakeStatSource(
                failing_teams={fixture.home_team_id},
                h2h_fails=h2h_fails,
                injuries_fail=injuries_fail,
            )
            assert FixtureEnricher(source).enrich(fixture) is None

            healthy = FakeStatSource(h2h_fails=h2h_fails, injuries_fail=injuries_fail)
            assert FixtureEnricher(healthy).enrich(fixture) is not None


def test_failed_h2h_uses_default_record():
    source = FakeStatSource(h2h_fails=True)
    match = FixtureEnricher(source).enrich(make_fixture())

    assert match is not None
    assert match.h2h.average == DEFAULT_H2H_AVERAGE
    assert match.h2h.recent_totals == DEFAULT_H2H_RECENT


def test_failed_injuries_marked_unavailable():
    source = FakeStatSource(injuries_fail=True)
    match = FixtureEnricher(source).enrich(make_fixture())

    assert match is not None
    assert not match.injuries.available
    assert match.injuries.notes == [INJURY_DATA_UNAVAILABLE]
    assert match.injuries.injury_count == 0


def test_no_injuries_is_distinct_from_unavailable():
    match = FixtureEnricher(FakeStatSource()).enrich(make_fixture())
    assert match.injuries.available
    assert match.injuries.notes == ["No major injury concerns"]


def test_batch_preserves_order_and_omits_dropped():
    fixtures = [make_fixture(fixture_id=i) for i in range(1, 6)]
    source = FakeStatSource(failing_teams={fixtures[1].home_team_id, fixtures[3].away_team_id})

    enriched = FixtureEnricher(source).enrich_batch(fixtures)

    assert [m.fixture.fixture_id for m in enriched] == [1, 3, 5]


def test_batch_is_capped_before_enrichment():
    fixtures = [make_fixture(fixture_id=i) for i in range(1, 16)]
    source = FakeStatSource()

    enriched = FixtureEnricher(source, EnrichmentConfig(max_fixtures=10)).enrich_batch(fixtures)

    assert [m.fixture.fixture_id for m in enriched] == list(range(1, 11))
    # two team lookups per processed fixture, none for the rest
    assert len(source.stats_calls) == 20


def test_empty_batch():
    assert FixtureEnricher(FakeStatSource()).enrich_batch([]) == []


class _BarrierSource(FakeStatSource):
    """Every lookup waits until all four lookups of the fixture are in flight."""

    def __init__(self):
        super().__init__()
        self.barrier = threading.Barrier(4, timeout=5)

    def get_team_stats(self, team_id, league_id, season):
        self.barrier.wait()
        return super().get_team_stats(team_id, league_id, season)

    def get_head_to_head(self, team_a, team_b):
        self.barrier.wait()
        return super().get_head_to_head(team_a, team_b)

    def get_injuries(self, team_id):
        if team_id % 100 == 1:
            self.barrier.wait()
        return super().get_injuries(team_id)


def test_lookups_within_a_fixture_run_concurrently():
    # Sequential lookups would break the barrier and drop the fixture
    match = FixtureEnricher(_BarrierSource()).enrich(make_fixture())
    assert match is not None
    assert match.h2h == H2HRecord.from_totals([2, 3, 1])
    assert match.injuries.available


class _SlowH2HSource(FakeStatSource):
    def get_head_to_head(self, team_a, team_b):
        time.sleep(1.0)
        return super().get_head_to_head(team_a, team_b)


def test_timed_out_optional_lookup_uses_default():
    enricher = FixtureEnricher(_SlowH2HSource(), EnrichmentConfig(lookup_timeout=0.1))
    match = enricher.enrich(make_fixture())

    assert match is not None
    assert match.h2h == H2HRecord.default()


class _OverlapCountingSource(FakeStatSource):
    """Records how many head-to-head lookups (one per fixture) overlap."""

    def __init__(self):
        super().__init__()
        self.lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def get_head_to_head(self, team_a, team_b):
        with self.lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.05)
        with self.lock:
            self.active -= 1
        return super().get_head_to_head(team_a, team_b)


def test_max_workers_limits_fixtures_in_flight():
    fixtures = [make_fixture(fixture_id=i) for i in range(1, 5)]
    source = _OverlapCountingSource()

    enriched = FixtureEnricher(source, EnrichmentConfig(max_workers=1)).enrich_batch(fixtures)

    assert [m.fixture.fixture_id for m in enriched] == [1, 2, 3, 4]
    assert source.peak == 1
