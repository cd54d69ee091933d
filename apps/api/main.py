"""
MediScript API - FastAPI application entry point.
"""
from __future__ import annotations

import logging
import sys
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware

from apps.api.routes.drafts import router as drafts_router
from apps.api.routes.summaries import router as summaries_router
from packages.shared.utils.env_utils import parse_bool_env, parse_csv_env, parse_int_env

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("mediscript")

VERSION = "0.1.0"
# Logo data URLs dominate request size; 5 MB leaves room for a large one.
DEFAULT_MAX_REQUEST_BYTES = 5 * 1024 * 1024
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

app = FastAPI(
    title="MediScript API",
    description="Discharge summary preview and export",
    version=VERSION,
)

# Runtime settings
cors_allow_origins = parse_csv_env(
    "CORS_ALLOW_ORIGINS",
    ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"],
)
cors_allow_credentials = parse_bool_env("CORS_ALLOW_CREDENTIALS", True)
max_request_bytes = parse_int_env("MAX_REQUEST_BYTES", DEFAULT_MAX_REQUEST_BYTES)
allowed_hosts = parse_csv_env("ALLOWED_HOSTS", ["*"])
security_headers_enabled = parse_bool_env("SECURITY_HEADERS_ENABLED", True)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_credentials=cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id"],
    expose_headers=["Content-Disposition", "X-Request-Id", "X-Export-Id"],
)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)


def _declared_size(request: Request) -> int | None:
    raw = request.headers.get("Content-Length")
    if not raw or not raw.isdigit():
        return None
    return int(raw)


def _finish(response: Response, request_id: str) -> Response:
    response.headers["X-Request-Id"] = request_id
    if security_headers_enabled:
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
    return response


@app.middleware("http")
async def summary_request_middleware(request: Request, call_next):
    """Reject oversized drafts, tag every response with a request id and log it."""
    started = time.perf_counter()
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex

    size = _declared_size(request)
    if size is not None and size > max_request_bytes:
        logger.warning("request_rejected request_id=%s path=%s bytes=%s", request_id, request.url.path, size)
        response = JSONResponse(status_code=413, content={"detail": "Request entity too large"})
    else:
        response = await call_next(request)

    logger.info(
        "request request_id=%s method=%s path=%s status=%s duration_ms=%s",
        request_id,
        request.method,
        request.url.path,
        response.status_code,
        int((time.perf_counter() - started) * 1000),
    )
    return _finish(response, request_id)


app.include_router(summaries_router)
app.include_router(drafts_router)


@app.get("/health")
def health():
    return {"status": "ok", "version": VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("apps.api.main:app", host="0.0.0.0", port=8000, reload=True)
