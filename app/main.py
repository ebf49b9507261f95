from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from contextlib import asynccontextmanager
import logging
import json
import os

from app.api.endpoints import (
    contact,
    spot_tee,
    birthday_music,
)
from app.core.config import settings
from app.core.logging import setup_logging
from app.services.rate_limit_service import contact_rate_limiter, InMemoryRateLimitStore

setup_logging()
logger = logging.getLogger(__name__)

with open(os.path.join(os.path.dirname(__file__), "log_config.json"), "r") as file:
    LOGGING_CONFIG = json.load(file)


class PreflightCORSMiddleware(CORSMiddleware):
    """CORS middleware that answers every preflight with 200 and no body.

    Requests asking for a header or method outside the allow list still get
    the permissive headers; the browser enforces the list itself.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            logger.debug(f"Preflight outside the allow list: {response.body!r}")

        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = BackgroundScheduler()

    # Redis expires keys on its own
    store = contact_rate_limiter.store
    if isinstance(store, InMemoryRateLimitStore):
        scheduler.add_job(
            store.sweep_expired,
            IntervalTrigger(minutes=settings.RATE_LIMIT_SWEEP_MINUTES),
        )

    scheduler.start()
    yield
    scheduler.shutdown()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Serverless functions behind the Blacklabspots storefront: contact form email, spot tee image generation and birthday music",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

app.include_router(
    contact.router,
    prefix=settings.API_V1_STR,
    tags=["contact"],
)

app.include_router(
    spot_tee.router,
    prefix=settings.API_V1_STR,
    tags=["spot tee"],
)

app.include_router(
    birthday_music.router,
    prefix=settings.API_V1_STR,
    tags=["birthday music"],
)


FUNCTION_NAMES = (
    "send-contact-email",
    "generate-spot-tee-image",
    "generate-birthday-music",
)


@app.options(f"{settings.API_V1_STR}/{{function_name}}", include_in_schema=False)
async def function_options(function_name: str):
    """Answer bare OPTIONS requests that are not CORS preflights."""
    if function_name not in FUNCTION_NAMES:
        raise HTTPException(status_code=404, detail="Not Found")

    return Response(
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": ", ".join(settings.CORS_ALLOW_HEADERS),
        }
    )


@app.get("/", tags=["status"])
async def root():
    return {"status": "online", "service": settings.PROJECT_NAME}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_config=LOGGING_CONFIG,
    )
