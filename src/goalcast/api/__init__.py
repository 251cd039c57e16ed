"""
FastAPI service for GoalCast.

Exposes endpoints to:
- Forecast total goals for the fixtures on a set of dates.
- Score a forecast against the final result.
"""
