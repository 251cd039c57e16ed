"""
Fixture enrichment and the forecast pipeline for GoalCast.

- `classifier` tags derbies, rivalries and motivation.
- `enricher` gathers team statistics for fixtures concurrently.
- `forecast_pipeline` wires everything together into a CLI-style script.
"""
