# path: src/goalcast/models/metrics.py
"""
Metrics utilities for GoalCast forecasts.

Forecasts are resolved after the match against the observed goal total.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

import pandas as pd

from goalcast.data.schema import Forecast
from goalcast.models.predictor import bucket_floor

# (max absolute error, accuracy score), checked in order
ACCURACY_LADDER = [
    (0.0, 100.0),
    (0.5, 95.0),
    (1.0, 85.0),
    (1.5, 70.0),
    (2.0, 55.0),
]


def accuracy(predicted: float, actual: float) -> float:
    """
    Score a goals forecast against the observed total, from 0 to 100.

    Small errors map onto a fixed ladder; beyond two goals the score falls
    by ten points per goal and is clamped at zero.
    """
    difference = abs(predicted - actual)
    for max_difference, score in ACCURACY_LADDER:
        if difference <= max_difference:
            return score
    return max(0.0, 50.0 - difference * 10)


def bucket_hit(bucket: str, actual_goals: int) -> bool:
    """An "N+" bucket is correct when at least N goals were scored."""
    return actual_goals >= bucket_floor(bucket)


def score_forecast(forecast: Forecast, actual_goals: int) -> Dict[str, Any]:
    """
    Resolve one forecast against the final score.

    Parameters
    ----------
    forecast : Forecast
        The stored forecast.
    actual_goals : int
        Total goals scored in the match.

    Returns
    -------
    dict
        {
          "actual_goals": int,
          "accuracy": float,
          "result": "correct" | "incorrect",
        }
        Bucketed forecasts are judged by their bucket, continuous ones by
        whether the total fell inside the forecast range.
    """
    if forecast.bucket is not None:
        correct = bucket_hit(forecast.bucket, actual_goals)
    else:
        correct = forecast.goal_range.contains(actual_goals)

    return {
        "actual_goals": actual_goals,
        "accuracy": accuracy(forecast.expected_goals, actual_goals),
        "result": "correct" if correct else "incorrect",
    }


def resolve_forecasts(
    forecasts_df: pd.DataFrame,
    actual_goals: Mapping[int, int],
) -> pd.DataFrame:
    """
    Attach observed totals, accuracy and result to a forecast table.

    Rows whose fixture id is not in `actual_goals` stay unresolved (NaN
    accuracy, "pending" result).
    """
    df = forecasts_df.copy()
    df["actual_goals"] = df["id"].map(actual_goals)

    resolved = df["actual_goals"].notna()
    df["accuracy"] = float("nan")
    if resolved.any():
        df.loc[resolved, "accuracy"] = [
            accuracy(pred, act)
            for pred, act in zip(
                df.loc[resolved, "expected_goals"], df.loc[resolved, "actual_goals"]
            )
        ]

    def _result(row) -> str:
        if pd.isna(row["actual_goals"]):
            return "pending"
        if isinstance(row["prediction"], str) and row["prediction"]:
            hit = bucket_hit(row["prediction"], int(row["actual_goals"]))
        else:
            hit = row["range_min"] <= row["actual_goals"] <= row["range_max"]
        return "correct" if hit else "incorrect"

    df["result"] = df.apply(_result, axis=1) if len(df) else pd.Series(dtype=str)
    return df


def summarize_accuracy(resolved_df: pd.DataFrame) -> Dict[str, Any]:
    """
    Aggregate model statistics over resolved forecasts.

    Returns
    -------
    dict
        {
          "total_predictions": int,
          "correct_predictions": int,
          "accuracy_percentage": float,   # share of correct results
          "average_accuracy": float,      # mean accuracy score
        }
    """
    resolved = resolved_df[resolved_df["result"].isin(["correct", "incorrect"])]
    total = int(len(resolved))
    correct = int((resolved["result"] == "correct").sum())

    return {
        "total_predictions": total,
        "correct_predictions": correct,
        "accuracy_percentage": round(correct / total * 100, 2) if total else 0.0,
        "average_accuracy": round(float(resolved["accuracy"].mean()), 2)
        if total
        else 0.0,
    }
