"""FastAPI application entrypoint.

Builds the app, wires the routers under their versioned prefixes and
installs the exception handlers that turn domain errors into the
failure envelope `{"success": false, "message": ...}`.

Mounted groups:
- /api/v1/category/career-categories
- /api/v1/category/provinces
- /api/v1/category/communes
- /api/v1/system-admin/overview
- /api/v1/system-admin/schools
- /api/v1/system-admin/classes
- /api/v1/question-manage/questions
- /api/v1/question-manage/question-categories
- /api/v1/careers-manage/careers
- /api/v1/careers-manage/career-criteria
- /api/v1/careers-manage/career-orders
- /api/v1/careers-manage/career-school-licenses
- /api/v2/public
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .api import (
    career_categories,
    career_criteria,
    career_orders,
    careers,
    communes,
    licenses,
    overview,
    provinces,
    public,
    question_categories,
    questions,
    schools,
)
from .api.common import failure
from .config import settings
from .database import create_db_and_tables, dispose_engine
from .errors import AppError, RequestError

logger = logging.getLogger("careerguide.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    create_db_and_tables()
    logger.info("database ready env=%s", settings.ENV)
    yield
    dispose_engine()


app = FastAPI(title="Career Guidance API", lifespan=lifespan)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _request_log(request: Request, req_id: str, started: float, **extra) -> str:
    return json.dumps(
        {
            "request_id": req_id,
            "path": request.url.path,
            "method": request.method,
            **extra,
            "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
            "client": request.client.host if request.client else "unknown",
        },
        ensure_ascii=True,
    )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    logged = request.url.path.startswith("/api")
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        if logged:
            logger.exception("request_failed %s", _request_log(request, req_id, started))
        raise
    response.headers["X-Request-ID"] = req_id
    if logged:
        logger.info("request_done %s", _request_log(request, req_id, started, status_code=response.status_code))
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    status_code = exc.status_code
    if settings.LEGACY_ERROR_STATUS and not isinstance(exc, RequestError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, status_code, exc.message)
    return failure(exc.message, status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return failure(message, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return failure("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


app.include_router(career_categories.router, prefix="/api/v1/category/career-categories", tags=["career-categories"])
app.include_router(provinces.router, prefix="/api/v1/category/provinces", tags=["provinces"])
app.include_router(communes.router, prefix="/api/v1/category/communes", tags=["communes"])
app.include_router(overview.router, prefix="/api/v1/system-admin/overview", tags=["overview"])
app.include_router(schools.router, prefix="/api/v1/system-admin/schools", tags=["schools"])
app.include_router(schools.classes_router, prefix="/api/v1/system-admin/classes", tags=["classes"])
app.include_router(questions.router, prefix="/api/v1/question-manage/questions", tags=["questions"])
app.include_router(
    question_categories.router, prefix="/api/v1/question-manage/question-categories", tags=["question-categories"]
)
app.include_router(careers.router, prefix="/api/v1/careers-manage/careers", tags=["careers"])
app.include_router(career_criteria.router, prefix="/api/v1/careers-manage/career-criteria", tags=["career-criteria"])
app.include_router(career_orders.router, prefix="/api/v1/careers-manage/career-orders", tags=["career-orders"])
app.include_router(licenses.router, prefix="/api/v1/careers-manage/career-school-licenses", tags=["licenses"])
app.include_router(public.router, prefix="/api/v2/public", tags=["public"])


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
