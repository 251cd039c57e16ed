"""
Data layer for GoalCast.

Includes:
- Domain types and forecast table validation (`schema`)
- The stat source interface (`sources`)
- The API-Football implementation of that interface (`api_football`)
- Forecast export/loading utilities (`data_loader`)
"""
