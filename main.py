from __future__ import annotations
import datetime as dt
import logging
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfoNotFoundError

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.responses import JSONResponse

from api_router import router
from badi_core.badi_core import default_engine
from badi_core.errors import BadiDateError, OccasionNotFound, AstronomyError
from badi_core.occasions import OCCASIONS
from schemas import ErrorResponse, ErrorEnvelope, ErrorDetail
from settings import APP_NAME, APP_VERSION, CORS_ALLOW_ORIGINS, TRUSTED_HOSTS, GZIP_MIN_SIZE, REQUEST_LOGGING, LOG_LEVEL
from middleware import RequestIDMiddleware, LoggingMiddleware

logging.basicConfig(level=LOG_LEVEL.upper(), format="[%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("badi_calendar")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s v%s starting up", APP_NAME, APP_VERSION)
    yield
    logger.info("shutdown")


app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    description="Badi calendar conversion, holy days and sunset times.",
    lifespan=lifespan,
)

# --- Middleware ---
app.add_middleware(RequestIDMiddleware)
app.add_middleware(LoggingMiddleware, mode=REQUEST_LOGGING)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=GZIP_MIN_SIZE)
app.add_middleware(TrustedHostMiddleware, allowed_hosts=TRUSTED_HOSTS or ["*"])


# --- Exception handlers -> uniform envelope ---
def _envelope(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    err = ErrorEnvelope(code=code, message=message, details=details)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=err).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def on_http_exception(request: Request, exc: StarletteHTTPException):
    status_code = int(getattr(exc, "status_code", 500))
    detail = getattr(exc, "detail", None)
    message = detail if isinstance(detail, str) and detail else str(exc)

    if status_code == status.HTTP_400_BAD_REQUEST:
        code = "BAD_REQUEST"
    elif status_code == status.HTTP_404_NOT_FOUND:
        code = "NOT_FOUND"
    elif status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        code = "METHOD_NOT_ALLOWED"
    else:
        code = f"HTTP_{status_code}"
    return _envelope(status_code, code, message)


@app.exception_handler(RequestValidationError)
async def on_validation_error(request: Request, exc: RequestValidationError):
    return _envelope(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "UNPROCESSABLE_ENTITY",
        "Validation error",
        details=[ErrorDetail(issue=str(exc))],
    )


@app.exception_handler(BadiDateError)
async def on_calendar_error(request: Request, exc: BadiDateError):
    if isinstance(exc, OccasionNotFound):
        return _envelope(status.HTTP_404_NOT_FOUND, "NOT_FOUND", str(exc))
    if isinstance(exc, AstronomyError):
        logger.error("astronomy failure: %s", exc)
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "ASTRONOMY_ERROR", str(exc))
    return _envelope(status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", str(exc))


@app.exception_handler(ZoneInfoNotFoundError)
async def on_unknown_time_zone(request: Request, exc: ZoneInfoNotFoundError):
    # KeyError repr quotes its message; use the first argument
    message = exc.args[0] if exc.args else "Unknown time zone"
    return _envelope(status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", str(message))


@app.exception_handler(Exception)
async def on_any_error(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "SERVER_ERROR", str(exc))


@app.get("/")
async def landing():
    return {"Welcome to the Badi Calendar": True, "ts": dt.datetime.now(dt.UTC).isoformat()}

# --- Liveness/Readiness ---
@app.get("/healthz")
async def healthz():
    return {"Badi Calendar is OK": True, "ts": dt.datetime.now(dt.UTC).isoformat()}


@app.get("/readyz")
async def readyz():
    # Occasion tables load at import; the engine touches the ephemeris lazily
    default_engine()
    return {"ready": True, "occasions": len(OCCASIONS)}


# --- Routes ---
app.include_router(router)


# Optional: dev run
if __name__ == "__main__":
    try:
        import uvicorn  # type: ignore
    except Exception as e:
        raise SystemExit("Uvicorn is required. Install dependencies first.")
    uvicorn.run("main:app", host="127.0.0.1", port=8787, reload=True)
