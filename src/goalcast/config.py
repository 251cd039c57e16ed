"""
Global configuration for the GoalCast project.

This module centralizes paths, data-source settings and every hand-tuned
weight of the goals model, so you can tweak them in one place.
"""

import os
from pathlib import Path
from typing import List, Tuple

# Project root = folder that contains "src", "data", etc.
PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]

# Data directories
DATA_DIR: Path = PROJECT_ROOT / "data"
PROCESSED_DATA_DIR: Path = DATA_DIR / "processed"
FORECASTS_FILENAME: str = "forecasts.csv"

# ---------------------------------------------------------------------------
# External data source (API-Football v3)
# ---------------------------------------------------------------------------
API_FOOTBALL_HOST: str = os.environ.get(
    "FOOTBALL_API_HOST", "v3.football.api-sports.io"
)
API_FOOTBALL_KEY: str = os.environ.get("FOOTBALL_API_KEY", "")
REQUEST_TIMEOUT_SECONDS: float = 10.0

# Leagues considered when selecting fixtures for a batch
MAJOR_LEAGUES: List[str] = [
    "Premier League",
    "La Liga",
    "Serie A",
    "Bundesliga",
    "Ligue 1",
    "Champions League",
    "Europa League",
    "Championship",
    "Eredivisie",
    "Primeira Liga",
    "Liga MX",
    "MLS",
    "Brasileirão Serie A",
]

# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------
MAX_FIXTURES_PER_BATCH: int = 10
RECENT_FORM_WINDOW: int = 5  # number of most recent results kept per team
H2H_RECENT_MEETINGS: int = 5

# Used when a source omits an average
DEFAULT_TEAM_AVERAGE: float = 1.5

# Substituted when the head-to-head lookup fails or finds no meetings
DEFAULT_H2H_AVERAGE: float = 2.5
DEFAULT_H2H_RECENT: Tuple[int, ...] = (3, 2, 3, 2, 3)
# fixture status codes of meetings that were played to a result
FINISHED_STATUSES: Tuple[str, ...] = ("FT", "AET", "PEN")

INJURY_DATA_UNAVAILABLE: str = "Injury data unavailable"
NO_INJURY_CONCERNS: str = "No major injury concerns"

# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------
DERBY_PAIRS: List[Tuple[str, str]] = [
    ("Manchester United", "Manchester City"),
    ("Barcelona", "Real Madrid"),
    ("Arsenal", "Tottenham"),
    ("Liverpool", "Everton"),
    ("Milan", "Inter"),
    ("Celtic", "Rangers"),
    ("Boca Juniors", "River Plate"),
]

RIVALRY_PAIRS: List[Tuple[str, str]] = [
    ("Liverpool", "Manchester United"),
    ("Arsenal", "Manchester United"),
    ("Chelsea", "Arsenal"),
    ("Real Madrid", "Atletico Madrid"),
    ("Bayern Munich", "Borussia Dortmund"),
]

CONTINENTAL_KEYWORDS: List[str] = ["Champions", "Europa"]
TITLE_RACE_GOALS_THRESHOLD: float = 2.5  # mean goals scored above -> title race
RELEGATION_GOALS_THRESHOLD: float = 1.5  # mean goals scored below -> relegation

# ---------------------------------------------------------------------------
# Full-context goals model (discrete bucket)
# ---------------------------------------------------------------------------
HOME_WIN_FORM_WEIGHT: float = 0.3
AWAY_WIN_FORM_WEIGHT: float = 0.2
FORM_BONUS_SCALE: float = 0.5
H2H_BLEND_WEIGHT: float = 0.4  # current estimate keeps 1 - this

DERBY_MULTIPLIER: float = 1.15
RIVALRY_MULTIPLIER: float = 1.10
TITLE_RACE_MULTIPLIER: float = 1.05  # also used for continental competition
RELEGATION_MULTIPLIER: float = 1.08
MID_TABLE_MULTIPLIER: float = 0.95

HEAVY_INJURY_COUNT: int = 3
HEAVY_INJURY_MULTIPLIER: float = 0.90
LIGHT_INJURY_MULTIPLIER: float = 0.95

# Ordered top-down, first match wins; anything lower maps to BUCKET_FLOOR
BUCKET_LADDER: List[Tuple[float, str]] = [
    (6.5, "7+"),
    (5.5, "6+"),
    (4.5, "5+"),
    (3.5, "4+"),
]
BUCKET_FLOOR: str = "3+"

FULL_CONTEXT_CONFIDENCE: float = 0.75

# Reasoning thresholds
STRONG_HOME_ATTACK_THRESHOLD: float = 2.5
POTENT_AWAY_OFFENSE_THRESHOLD: float = 2.3
HIGH_SCORING_H2H_THRESHOLD: float = 4.0
REASONING_SEPARATOR: str = " • "
DEFAULT_REASONING: str = "Standard match expectations"

# ---------------------------------------------------------------------------
# Averages-only goals model (continuous, with confidence)
# ---------------------------------------------------------------------------
HOME_ADVANTAGE: float = 0.35
AVG_GOALS_WEIGHT: float = 0.5
FORM_WEIGHT: float = 0.4
HOME_FORM_SCALE: float = 2.5
AWAY_FORM_SCALE: float = 2.0
NEUTRAL_FORM_RATIO: float = 0.5  # used when no known results are available

BASE_CONFIDENCE: float = 0.70
FORM_SAMPLE_STEPS: List[Tuple[int, float]] = [(5, 0.05), (10, 0.05)]
H2H_SAMPLE_MIN: int = 3
H2H_SAMPLE_BONUS: float = 0.08
FORM_BALANCE_THRESHOLD: float = 0.3
FORM_BALANCE_BONUS: float = 0.05
MIN_CONFIDENCE: float = 0.5
MAX_CONFIDENCE: float = 0.95

RANGE_LOW_FACTOR: float = 0.75
RANGE_HIGH_FACTOR: float = 1.25
