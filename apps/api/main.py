"""FastAPI wrapper for the glossary build pipeline."""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Literal

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from core.config.settings_loader import load_settings
from core.orchestrator.pipeline import build_from_texts
from core.utils.errors import GlossaryError, SourceError

app = FastAPI(title="glossc API", version="0.1.0")
logger = logging.getLogger("glossc.api")

_REQUEST_ID_HEADER = "X-Glossc-Request-Id"
_UNRESOLVED_HEADER = "X-Glossc-Unresolved-Links"


class SourceText(BaseModel):
    """One in-memory source file; ``name`` decides its order."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    content: str


class CompileRequest(BaseModel):
    """Body of ``POST /v1/compile``."""

    model_config = ConfigDict(extra="forbid")

    files: list[SourceText] = Field(min_length=1)
    title: str | None = None
    unresolved_links: Literal["warn", "error"] | None = None


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Ensure every response has a request id header."""

    request_id = uuid.uuid4().hex
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:  # noqa: BLE001
        _log_event(logging.ERROR, "error", request_id, error_code="INTERNAL_ERROR")
        response = _error_response(
            status_code=500,
            error_code="INTERNAL_ERROR",
            message="internal server error",
            request_id=request_id,
            detail={"path": request.url.path},
        )
    response.headers.setdefault(_REQUEST_ID_HEADER, request_id)
    return response


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness endpoint."""

    return {"status": "ok"}


@app.post("/v1/compile", response_model=None)
def compile_v1(body: CompileRequest, request: Request) -> HTMLResponse | JSONResponse:
    """Compile posted sources into one HTML document."""

    request_id = _request_id_from_request(request)
    request_started = time.perf_counter()
    _log_event(logging.INFO, "start", request_id, file_count=len(body.files))

    settings = load_settings()
    overrides: dict[str, Any] = {}
    if body.title is not None:
        overrides["title"] = body.title
    if body.unresolved_links is not None:
        overrides["unresolved_links"] = body.unresolved_links
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        output = build_from_texts(
            [(source.name, source.content) for source in body.files],
            settings,
        )
    except GlossaryError as exc:
        status_code = 400 if isinstance(exc, SourceError) else 422
        _log_event(
            logging.ERROR,
            "error",
            request_id,
            error_code=exc.code,
            failure_stage=exc.stage,
            total_ms=_elapsed_ms(request_started),
        )
        return _error_response(
            status_code=status_code,
            error_code=exc.code,
            message=str(exc),
            request_id=request_id,
            detail={"stage": exc.stage, **exc.detail()},
        )

    _log_event(
        logging.INFO,
        "done",
        request_id,
        item_count=output.report.item_count,
        unresolved_count=output.report.unresolved_count,
        total_ms=_elapsed_ms(request_started),
    )
    return HTMLResponse(
        content=output.html,
        headers={
            _REQUEST_ID_HEADER: request_id,
            _UNRESOLVED_HEADER: str(output.report.unresolved_count),
        },
    )


def _request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    generated = uuid.uuid4().hex
    request.state.request_id = generated
    return generated


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _error_response(
    *,
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    detail: dict[str, Any] | None = None,
) -> JSONResponse:
    payload_detail = dict(detail or {})
    payload_detail["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        headers={_REQUEST_ID_HEADER: request_id},
        content={
            "error_code": error_code,
            "message": message,
            "detail": payload_detail,
        },
    )


def _log_event(level: int, event: str, request_id: str, **fields: Any) -> None:
    payload = {
        "event": event,
        "request_id": request_id,
        **fields,
    }
    logger.log(level, _dump_json(payload))
