# engagement_forecast/api.py
# FastAPI wrapper around the ensembled engagement predictor.

import logging
import time
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator
from starlette.concurrency import run_in_threadpool

from . import config
from .exceptions import (
    DataSourceError,
    EngagementForecastError,
    InvalidCandidateError,
    PredictionDeadlineExceeded,
)
from .predictor import CandidatePost, predict_engagement
from .sampling import EngagementFilter

logger = logging.getLogger(__name__)

app = FastAPI(title="Engagement Forecast API", version="1.0.0")


# ---------- Schemas ----------

class NewAd(BaseModel):
    created_at: str = Field(..., description="Scheduled publish time, ISO-8601")
    hashtags: str = Field("", description="Whitespace separated hashtags")
    text: Optional[str] = Field(None, description="Post body; not used by the model")

    @field_validator("created_at")
    @classmethod
    def non_empty_timestamp(cls, v: str):
        if not v.strip():
            raise ValueError("created_at must not be empty")
        return v


class PredictRequest(BaseModel):
    new_ad: NewAd
    runs: int = Field(config.SERVING_RUNS, ge=1, le=20, description="Ensemble runs to average")


class PredictResponse(BaseModel):
    likes: int
    shares: int
    comments: int


def _compute(req: PredictRequest) -> PredictResponse:
    candidate = CandidatePost(
        created_at=req.new_ad.created_at,
        hashtags=req.new_ad.hashtags,
        text=req.new_ad.text,
    )
    result = predict_engagement(
        candidate,
        posts_path=config.POSTS_PATH,
        comments_path=config.COMMENTS_PATH,
        runs=req.runs,
        engagement_filter=EngagementFilter.COMMENTS_AND_LIKES,
        deadline=config.PREDICT_DEADLINE,
    )
    return PredictResponse(**result.prediction.to_dict())


# ---------- Routes ----------

@app.get("/healthz")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/")
def root() -> Dict[str, str]:
    return {"name": "Engagement Forecast API", "version": app.version}


@app.post("/predict", response_model=PredictResponse)
async def predict(req: PredictRequest) -> PredictResponse:
    """
    Predict likes, shares and comments for a scheduled post.
    """
    t0 = time.perf_counter()
    try:
        resp = await run_in_threadpool(lambda: _compute(req))
    except InvalidCandidateError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except DataSourceError as e:
        logger.error(f"Data source failure: {e}")
        raise HTTPException(status_code=503, detail=f"Data unavailable: {e}") from e
    except PredictionDeadlineExceeded as e:
        raise HTTPException(status_code=504, detail=str(e)) from e
    except EngagementForecastError as e:
        logger.error(f"Prediction failed: {e}")
        raise HTTPException(status_code=500, detail=f"Prediction failed: {e}") from e

    elapsed_ms = int(round((time.perf_counter() - t0) * 1000))
    logger.info(f"Predicted {resp.likes}/{resp.shares}/{resp.comments} in {elapsed_ms} ms")
    return resp
