import pytest

from goalcast.config import DEFAULT_H2H_AVERAGE
from goalcast.data.schema import Motivation
from goalcast.errors import MalformedBatchInput
from goalcast.features.enricher import EnrichmentConfig
from goalcast.features.forecast_pipeline import (
    forecast_dates,
    run_forecast_pipeline,
    select_fixtures,
    validate_dates,
)
from goalcast.models.predictor import AveragesPredictor, FullContextPredictor

from conftest import FakeStatSource, make_fixture, make_stats


@pytest.mark.parametrize("dates", [[], (), "2026-10-24", None, ["24/10/2026"], ["2026-10-24", "soon"]])
def test_malformed_dates_are_rejected_before_any_lookup(dates, fake_source):
    with pytest.raises(MalformedBatchInput):
        forecast_dates(dates, fake_source)
    assert fake_source.listed_dates == []
    assert fake_source.stats_calls == []


def test_validate_dates_keeps_order():
    assert validate_dates(["2026-10-25", "2026-10-24"]) == ["2026-10-25", "2026-10-24"]


def test_select_fixtures_keeps_major_leagues_in_order():
    fixtures = [
        make_fixture(fixture_id=1, league_name="Premier League"),
        make_fixture(fixture_id=2, league_name="Regionalliga West"),
        make_fixture(fixture_id=3, league_name="UEFA Champions League"),
        make_fixture(fixture_id=4, league_name="Serie A"),
    ]
    assert [f.fixture_id for f in select_fixtures(fixtures)] == [1, 3, 4]


def test_forecast_dates_end_to_end(fake_source):
    forecasts = forecast_dates(["2026-10-24"], fake_source)

    assert fake_source.listed_dates == [["2026-10-24"]]
    assert [f.match.fixture.fixture_id for f in forecasts] == [1, 2, 3]
    for item in forecasts:
        assert item.forecast.bucket is not None
        assert item.forecast.expected_goals >= 0


def test_home_stats_failure_omits_only_that_fixture():
    fixtures = [make_fixture(fixture_id=i) for i in range(1, 4)]
    source = FakeStatSource(
        fixtures=fixtures,
        failing_teams={fixtures[1].home_team_id},
        h2h_fails=True,
        injuries_fail=True,
    )

    forecasts = run_forecast_pipeline(fixtures, source)

    assert [f.match.fixture.fixture_id for f in forecasts] == [1, 3]


def test_failed_h2h_still_forecasts_with_default_average():
    fixture = make_fixture()
    source = FakeStatSource(
        stats={
            fixture.home_team_id: make_stats(goals_scored=2.8, home_performance=2.5),
            fixture.away_team_id: make_stats(goals_scored=1.2, away_performance=1.0),
        },
        h2h_fails=True,
    )

    [item] = run_forecast_pipeline([fixture], source)

    assert item.match.h2h.average == DEFAULT_H2H_AVERAGE
    assert item.match.motivation is Motivation.MID_TABLE
    assert "Strong home attack" in item.forecast.reasoning
    assert item.forecast.bucket in ("3+", "4+")


def test_pipeline_caps_batch(fake_source):
    fixtures = [make_fixture(fixture_id=i) for i in range(1, 13)]
    forecasts = run_forecast_pipeline(
        fixtures, fake_source, config=EnrichmentConfig(max_fixtures=10)
    )
    assert len(forecasts) == 10


class _ExplodingPredictor(FullContextPredictor):
    def predict(self, match):
        if match.fixture.fixture_id == 2:
            raise ZeroDivisionError("boom")
        return super().predict(match)


def test_prediction_failure_drops_fixture(fake_source):
    fixtures = [make_fixture(fixture_id=i) for i in range(1, 4)]
    forecasts = run_forecast_pipeline(fixtures, fake_source, predictor=_ExplodingPredictor())
    assert [f.match.fixture.fixture_id for f in forecasts] == [1, 3]


def test_averages_model_in_pipeline(fake_source):
    forecasts = forecast_dates(["2026-10-24"], fake_source, predictor=AveragesPredictor())
    assert len(forecasts) == 3
    for item in forecasts:
        assert item.forecast.bucket is None
        assert 0.5 <= item.forecast.confidence <= 0.95


def test_forecast_record_shape(fake_source):
    [record, *_] = [f.to_record() for f in forecast_dates(["2026-10-24"], fake_source)]

    assert set(record) >= {
        "id",
        "date",
        "time",
        "homeTeam",
        "awayTeam",
        "league",
        "isDerby",
        "isRivalry",
        "homeStats",
        "awayStats",
        "h2h",
        "motivation",
        "injuries",
        "confidence",
        "prediction",
        "expectedGoals",
        "reasoning",
    }
    assert record["date"] == "2026-10-24"
    assert record["time"] == "15:00"
    assert record["injuries"] == ["No major injury concerns"]
    assert record["h2h"] == {"avg": 2.0, "last5": [2, 3, 1]}
    assert record["range"]["min"] <= record["expectedGoals"] <= record["range"]["max"]
