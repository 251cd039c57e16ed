# path: src/goalcast/models/predictor.py
"""
Total-goals predictors.

Two hand-tuned variants share the GoalsPredictor interface:

- FullContextPredictor works on an EnrichedMatch (season averages, form,
  head-to-head, injuries, derby/rivalry and motivation tags) and maps the
  expected total onto a discrete "N+ goals" bucket.
- AveragesPredictor works on MatchAverages (goal averages, form and
  head-to-head totals only) and reports a per-side split, an evidence-based
  confidence and a range, without a bucket.

Both are deterministic and perform no I/O. The variants are intentionally
not reconciled: the bucket ladder never goes below "3+" while the
continuous range can.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple, Union

from goalcast.config import (
    AVG_GOALS_WEIGHT,
    AWAY_FORM_SCALE,
    AWAY_WIN_FORM_WEIGHT,
    BASE_CONFIDENCE,
    BUCKET_FLOOR,
    BUCKET_LADDER,
    DEFAULT_REASONING,
    DERBY_MULTIPLIER,
    FORM_BALANCE_BONUS,
    FORM_BALANCE_THRESHOLD,
    FORM_BONUS_SCALE,
    FORM_SAMPLE_STEPS,
    FORM_WEIGHT,
    FULL_CONTEXT_CONFIDENCE,
    H2H_BLEND_WEIGHT,
    H2H_SAMPLE_BONUS,
    H2H_SAMPLE_MIN,
    HEAVY_INJURY_COUNT,
    HEAVY_INJURY_MULTIPLIER,
    HIGH_SCORING_H2H_THRESHOLD,
    HOME_ADVANTAGE,
    HOME_FORM_SCALE,
    HOME_WIN_FORM_WEIGHT,
    LIGHT_INJURY_MULTIPLIER,
    MAX_CONFIDENCE,
    MID_TABLE_MULTIPLIER,
    MIN_CONFIDENCE,
    NEUTRAL_FORM_RATIO,
    POTENT_AWAY_OFFENSE_THRESHOLD,
    RANGE_HIGH_FACTOR,
    RANGE_LOW_FACTOR,
    REASONING_SEPARATOR,
    RELEGATION_MULTIPLIER,
    RIVALRY_MULTIPLIER,
    STRONG_HOME_ATTACK_THRESHOLD,
    TITLE_RACE_MULTIPLIER,
)
from goalcast.data.schema import (
    EnrichedMatch,
    Forecast,
    FormResult,
    GoalRange,
    MatchAverages,
    Motivation,
)

MOTIVATION_MULTIPLIERS = {
    Motivation.CONTINENTAL: TITLE_RACE_MULTIPLIER,
    Motivation.TITLE_RACE: TITLE_RACE_MULTIPLIER,
    Motivation.RELEGATION: RELEGATION_MULTIPLIER,
    Motivation.MID_TABLE: MID_TABLE_MULTIPLIER,
}

HIGH_STAKES = (Motivation.TITLE_RACE, Motivation.CONTINENTAL)


def bucket_for(expected_goals: float) -> str:
    """Map expected goals onto the "N+" ladder (top-down, first match wins)."""
    for threshold, label in BUCKET_LADDER:
        if expected_goals >= threshold:
            return label
    return BUCKET_FLOOR


def bucket_floor(bucket: str) -> int:
    """Numeric lower bound of a bucket label, e.g. "4+" -> 4."""
    return int(bucket.rstrip("+"))


def goal_range(expected_goals: float, ndigits: int = 1) -> GoalRange:
    return GoalRange(
        min=round(expected_goals * RANGE_LOW_FACTOR, ndigits),
        max=round(expected_goals * RANGE_HIGH_FACTOR, ndigits),
    )


def confidence_level(confidence: float) -> str:
    """Human label for a confidence score."""
    if confidence >= 0.85:
        return "Very High"
    if confidence >= 0.75:
        return "High"
    if confidence >= 0.65:
        return "Medium"
    return "Low"


def _join_reasons(reasons: List[str]) -> str:
    return REASONING_SEPARATOR.join(reasons) if reasons else DEFAULT_REASONING


def _attack_reasons(home_scored: float, away_scored: float, h2h_average: float) -> List[str]:
    reasons = []
    if home_scored > STRONG_HOME_ATTACK_THRESHOLD:
        reasons.append("Strong home attack")
    if away_scored > POTENT_AWAY_OFFENSE_THRESHOLD:
        reasons.append("Potent away offense")
    if h2h_average > HIGH_SCORING_H2H_THRESHOLD:
        reasons.append("High-scoring H2H history")
    return reasons


class GoalsPredictor(ABC):
    """Common interface of the goals models."""

    name: str = ""

    @abstractmethod
    def predict(self, match) -> Forecast:
        """Compute a forecast for one match."""


class FullContextPredictor(GoalsPredictor):
    """Weighted goals model over a fully enriched match, with a discrete bucket."""

    name = "full_context"

    def expected_goals(self, match: EnrichedMatch) -> float:
        """
        Expected total goals, before rounding.

        Each step works on the running value, so the multiplicative context
        adjustments compound on the blended estimate.
        """
        home, away = match.home_stats, match.away_stats

        # 1) Base attack expectation
        expected = (home.goals_scored + home.home_performance) / 2 + (
            away.goals_scored + away.away_performance
        ) / 2

        # 2) Form bonus
        form_bonus = home.wins * HOME_WIN_FORM_WEIGHT + away.wins * AWAY_WIN_FORM_WEIGHT
        expected += form_bonus * FORM_BONUS_SCALE

        # 3) Head-to-head blend
        expected = expected * (1 - H2H_BLEND_WEIGHT) + match.h2h.average * H2H_BLEND_WEIGHT

        # 4) Context
        if match.is_derby:
            expected *= DERBY_MULTIPLIER
        if match.is_rivalry:
            expected *= RIVALRY_MULTIPLIER
        expected *= MOTIVATION_MULTIPLIERS[match.motivation]

        # 5) Injuries
        injury_count = match.injuries.injury_count
        if injury_count > HEAVY_INJURY_COUNT:
            expected *= HEAVY_INJURY_MULTIPLIER
        elif injury_count > 0:
            expected *= LIGHT_INJURY_MULTIPLIER

        return max(expected, 0.0)

    def reasoning(self, match: EnrichedMatch) -> str:
        reasons = _attack_reasons(
            match.home_stats.goals_scored,
            match.away_stats.goals_scored,
            match.h2h.average,
        )
        if match.is_derby or match.is_rivalry:
            reasons.append("Derby/Rivalry intensity")
        if match.motivation in HIGH_STAKES:
            reasons.append("High stakes motivation")
        return _join_reasons(reasons)

    def predict(self, match: EnrichedMatch) -> Forecast:
        expected = round(self.expected_goals(match), 2)
        return Forecast(
            expected_goals=expected,
            confidence=FULL_CONTEXT_CONFIDENCE,
            goal_range=goal_range(expected, ndigits=2),
            reasoning=self.reasoning(match),
            bucket=bucket_for(expected),
            model=self.name,
        )


def form_ratio(form: Sequence[FormResult]) -> float:
    """Share of wins among known results; neutral when nothing is known."""
    known = [result for result in form if result is not FormResult.UNKNOWN]
    if not known:
        return NEUTRAL_FORM_RATIO
    return sum(1 for result in known if result is FormResult.WIN) / len(known)


class AveragesPredictor(GoalsPredictor):
    """
    Continuous goals model for matches with averages, form and H2H only.

    Accepts MatchAverages, or an EnrichedMatch which is reduced to its
    averages first.
    """

    name = "averages"

    def side_goals(self, match: MatchAverages) -> Tuple[float, float]:
        """Expected goals per side after the head-to-head rescale."""
        home_form = form_ratio(match.home_form)
        away_form = form_ratio(match.away_form)

        home = (
            match.home_avg_goals * AVG_GOALS_WEIGHT
            + home_form * FORM_WEIGHT * HOME_FORM_SCALE
            + HOME_ADVANTAGE
        )
        away = match.away_avg_goals * AVG_GOALS_WEIGHT + away_form * FORM_WEIGHT * AWAY_FORM_SCALE

        if match.h2h_totals:
            h2h_average = sum(match.h2h_totals) / len(match.h2h_totals)
            current = home + away
            target = current * (1 - H2H_BLEND_WEIGHT) + h2h_average * H2H_BLEND_WEIGHT
            if current > 0:
                ratio = target / current
                home, away = home * ratio, away * ratio
            else:
                home = away = target / 2

        return max(home, 0.0), max(away, 0.0)

    def confidence(self, match: MatchAverages) -> float:
        """Base confidence plus fixed increments for each evidence signal, clamped."""
        confidence = BASE_CONFIDENCE

        sample = sum(1 for result in match.home_form if result is not FormResult.UNKNOWN)
        for min_sample, bonus in FORM_SAMPLE_STEPS:
            if sample >= min_sample:
                confidence += bonus

        if len(match.h2h_totals) >= H2H_SAMPLE_MIN:
            confidence += H2H_SAMPLE_BONUS

        if abs(form_ratio(match.home_form) - form_ratio(match.away_form)) < FORM_BALANCE_THRESHOLD:
            confidence += FORM_BALANCE_BONUS

        return round(min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence)), 2)

    def predict(self, match: Union[MatchAverages, EnrichedMatch]) -> Forecast:
        if isinstance(match, EnrichedMatch):
            match = MatchAverages.from_enriched(match)

        home, away = self.side_goals(match)
        total = home + away
        h2h_average = (
            sum(match.h2h_totals) / len(match.h2h_totals) if match.h2h_totals else 0.0
        )

        return Forecast(
            expected_goals=round(total, 1),
            confidence=self.confidence(match),
            goal_range=goal_range(total),
            reasoning=_join_reasons(
                _attack_reasons(match.home_avg_goals, match.away_avg_goals, h2h_average)
            ),
            home_goals=round(home, 1),
            away_goals=round(away, 1),
            model=self.name,
        )


def select_predictor(match: Union[EnrichedMatch, MatchAverages]) -> GoalsPredictor:
    """Pick the variant suited to the richness of the input."""
    if isinstance(match, EnrichedMatch):
        return FullContextPredictor()
    if isinstance(match, MatchAverages):
        return AveragesPredictor()
    raise TypeError(f"No goals predictor for {type(match).__name__}")


def predict_goals(match: Union[EnrichedMatch, MatchAverages]) -> Forecast:
    return select_predictor(match).predict(match)
