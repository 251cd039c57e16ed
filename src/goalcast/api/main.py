# path: src/goalcast/api/main.py
"""
FastAPI app exposing GoalCast forecast endpoints.

Endpoints:
- GET  /health      -> simple health check
- POST /forecasts   -> goal forecasts for the major-league fixtures on given dates
- POST /accuracy    -> score a forecast against the observed total
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from goalcast import __version__
from goalcast.config import API_FOOTBALL_KEY
from goalcast.data.api_football import ApiFootballSource
from goalcast.data.sources import StatSource
from goalcast.errors import MalformedBatchInput, SourceError
from goalcast.features.forecast_pipeline import PREDICTORS, forecast_dates
from goalcast.models.metrics import accuracy, bucket_hit
from goalcast.models.predictor import FullContextPredictor
from goalcast.utils.logging_utils import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="GoalCast API",
    version=__version__,
    description="Total-goals forecasts for upcoming football fixtures",
)


class ForecastRequest(BaseModel):
    dates: List[str]
    model: str = FullContextPredictor.name


class AccuracyRequest(BaseModel):
    predicted: float = Field(ge=0)
    actual: int = Field(ge=0)
    bucket: Optional[str] = None


def get_stat_source() -> StatSource:
    """Build the stat source used by the forecast endpoint."""
    if not API_FOOTBALL_KEY:
        raise HTTPException(status_code=400, detail="API key not configured")
    return ApiFootballSource(api_key=API_FOOTBALL_KEY)


@app.get("/health")
def health() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/forecasts")
def create_forecasts(
    payload: ForecastRequest,
    source: StatSource = Depends(get_stat_source),
) -> List[Dict[str, Any]]:
    """
    Forecast total goals for the fixtures scheduled on the given dates.

    Request:
        { "dates": ["2026-10-24", ...], "model": "full_context" | "averages" }

    Response:
        A list of forecast records (id, date, time, homeTeam, awayTeam,
        league, isDerby, isRivalry, homeStats, awayStats, h2h, motivation,
        injuries, confidence, prediction, expectedGoals, range, reasoning).
        Fixtures without enough data are simply absent.
    """
    if payload.model not in PREDICTORS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown model {payload.model!r}; expected one of {sorted(PREDICTORS)}",
        )

    try:
        forecasts = forecast_dates(
            payload.dates, source, predictor=PREDICTORS[payload.model]()
        )
    except MalformedBatchInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SourceError as exc:
        logger.error("Fixture listing failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return [item.to_record() for item in forecasts]


@app.post("/accuracy")
def score_accuracy(payload: AccuracyRequest) -> Dict[str, Any]:
    """Accuracy score (0-100) of a forecast, plus the bucket verdict when given."""
    result: Dict[str, Any] = {
        "accuracy": accuracy(payload.predicted, payload.actual),
    }
    if payload.bucket:
        try:
            result["correct"] = bucket_hit(payload.bucket, payload.actual)
        except ValueError as exc:
            raise HTTPException(
                status_code=400, detail=f"Invalid bucket {payload.bucket!r}"
            ) from exc
    return result
