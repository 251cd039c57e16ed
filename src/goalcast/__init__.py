"""
GoalCast: total-goals forecasts for upcoming football fixtures.

Subpackages:
- `data`: domain types, stat-source ports and the API-Football adapter
- `features`: fixture enrichment, classification and the batch pipeline
- `models`: the goals predictors and accuracy scoring
- `api`: a thin FastAPI surface over the pipeline
"""

__version__ = "0.1.0"
