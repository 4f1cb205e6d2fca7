"""FastAPI application with lifespan, health endpoint, and the scrape endpoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from content_board.config import get_settings
from content_board.extraction.pipeline import ExtractionPipeline
from content_board.logging_config import configure_logging
from content_board.models.content import ExtractionResult

logger = logging.getLogger(__name__)


class ScrapeRequest(BaseModel):
    """Body of POST /api/scrape. Validation happens in the pipeline so bad input gets a result body."""

    url: str = ""
    type: str | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging and build the extraction pipeline on startup."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    app.state.pipeline = ExtractionPipeline.from_settings(settings)
    yield


app = FastAPI(
    title="Content Board",
    lifespan=lifespan,
)


def get_pipeline(request: Request) -> ExtractionPipeline:
    """Pipeline built in the lifespan. Overridden in tests."""
    return request.app.state.pipeline


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "content-board",
        "version": "0.1.0",
    }


@app.post(
    "/api/scrape",
    response_model=ExtractionResult,
    response_model_exclude_none=True,
)
async def scrape(body: ScrapeRequest, pipeline: ExtractionPipeline = Depends(get_pipeline)):
    """Extract one URL for the board.

    Returns 400 when the URL is missing and 500 on unexpected errors; every
    other outcome, including extraction failures, is a 200 with ``success``
    set accordingly.
    """
    if not body.url.strip():
        return JSONResponse({"success": False, "error": "URL is required"}, status_code=400)

    try:
        return await pipeline.extract(body.url, body.type)
    except Exception as exc:
        logger.exception("Unexpected extraction error for %s", body.url)
        return JSONResponse(
            {"success": False, "error": str(exc) or "Internal server error"},
            status_code=500,
        )
