from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from config import Settings, get_settings
from core.errors import AnalysisError
from core.goal_calculator import InvalidInput
from core.meal_pipeline import MealAnalysisPipeline
from services.db import Database
from services.gemini import GeminiVisionClient
from services.storage import HttpReachabilityProbe, SupabaseImageStorage
from api.v1.router import api_router


def build_pipeline(s: Settings) -> MealAnalysisPipeline:
    return MealAnalysisPipeline(
        storage=SupabaseImageStorage.from_settings(s),
        probe=HttpReachabilityProbe(),
        vision=GeminiVisionClient.from_settings(s),
        max_image_bytes=s.max_image_bytes,
    )


def create_app(
    settings: Settings | None = None,
    pipeline: MealAnalysisPipeline | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.db.create_all()
        yield
        await app.state.db.dispose()
        app.state.pipeline.close()

    app = FastAPI(title="Calorie Tracker API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = Database(settings.database_url)
    app.state.pipeline = pipeline or build_pipeline(settings)

    # CORS (public demo only – lock down in prod)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AnalysisError)
    async def _analysis_error(_: Request, exc: AnalysisError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(InvalidInput)
    async def _invalid_input(_: Request, exc: InvalidInput) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "fields": exc.fields},
        )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.env_name}

    return app


app = create_app()
