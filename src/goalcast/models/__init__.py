"""
Goals models and forecast scoring for GoalCast.

- `predictor` holds the full-context and averages-only goals models.
- `metrics` scores forecasts against final results.
"""
