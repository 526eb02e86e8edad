"""
Top-Up API Application

Thin HTTP wrapper around `apps.topup.pipeline.run_pipeline`. Every request is
an independent in-memory run; nothing is written to disk.
"""

import logging
from typing import Any, Optional

import orjson
from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from apps.topup.pipeline import run_pipeline
from utils.config import Settings, get_settings
from utils.schemas import CompanyGroup, ErrorResponse, ProcessRequest, ProcessResponse

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    payload = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=payload)


def group_payload(group: CompanyGroup) -> dict[str, Any]:
    """Serialize a group for the browser client.

    Users also carry `new_balance` and `email_sent`, the names the UI reads.
    """
    payload = group.model_dump(mode="json")
    for user in payload["users"]:
        user["new_balance"] = user["new_token_balance"]
        user["email_sent"] = user["should_send_email"]
    return payload


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Token Top-Up API",
        description="Computes token top-ups for active users and renders the company report",
        version=settings.APP_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
        allow_headers=["content-type", "if-modified-since"],
        expose_headers=["location", "link"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error(exc.status_code, "Endpoint not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Server error: %s", exc, exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {
            "status": "ok",
            "message": "Token Top-Up API is running",
            "version": settings.APP_VERSION,
        }

    @app.post("/api/process", response_model=ProcessResponse)
    async def process(request: Request) -> Any:
        """Run the pipeline over the uploaded users and companies."""
        body = await request.body()
        logger.info("Received process request: bytes=%d", len(body))

        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            logger.warning("Invalid JSON payload: %s", e)
            return _error(status.HTTP_400_BAD_REQUEST, "Invalid JSON format", str(e))

        try:
            data = ProcessRequest.model_validate(payload)
        except ValidationError:
            return _error(status.HTTP_400_BAD_REQUEST, "Missing required fields: users and companies")

        if data.users is None or data.companies is None:
            return _error(status.HTTP_400_BAD_REQUEST, "Missing required fields: users and companies")

        if not isinstance(data.users, list) or not isinstance(data.companies, list):
            return _error(status.HTTP_400_BAD_REQUEST, "Users and companies must be arrays")

        logger.info("Users count: %d, companies count: %d", len(data.users), len(data.companies))

        result = await run_in_threadpool(run_pipeline, data.companies, data.users)

        return ProcessResponse(
            output=result.text,
            result=[group_payload(group) for group in result.groups],
            rejected=result.rejected,
            stats=result.stats,
        )

    return app


app = create_app()
