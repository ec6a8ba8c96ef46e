# api/v1/analyze.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.errors import AnalysisError, AnalysisFailed
from core.meal_pipeline import MealAnalysisPipeline
from services import meal_store
from services.db import get_session
from api.v1.deps import get_pipeline
from api.v1.schemas import AnalysisFailure, AnalysisOut

_LOG = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=AnalysisOut,
    status_code=status.HTTP_200_OK,
    summary="Upload a meal photo and get an AI nutrition estimate",
    responses={400: {"model": AnalysisFailure}, 500: {"model": AnalysisFailure}},
)
async def analyze_meal(
    image: UploadFile | None = File(None),
    userId: str | None = Form(None),
    pipeline: MealAnalysisPipeline = Depends(get_pipeline),
    db: AsyncSession = Depends(get_session),
) -> AnalysisOut:
    """
    Runs the analysis pipeline.  The returned meal is *not* stored;
    the client confirms (and maybe edits) it, then calls `POST /meals`.
    """
    data = await image.read() if image is not None else None
    content_type = image.content_type if image is not None else None

    # blocking chain (upload → probe → inference) goes to the thread pool
    try:
        result = await run_in_threadpool(pipeline.analyze, data, userId, content_type)
    except AnalysisError:
        raise
    except Exception as exc:
        _LOG.exception("meal analysis crashed for user %s", userId)
        raise AnalysisFailed(str(exc)) from exc

    try:
        await meal_store.insert_ai_log(
            db, userId, result.prompt, result.raw_response, result.image_url  # type: ignore[arg-type]
        )
    except SQLAlchemyError as exc:
        _LOG.warning("could not record AI log for user %s: %s", userId, exc)
        await db.rollback()

    return AnalysisOut(meal=result.meal, image_url=result.image_url)
