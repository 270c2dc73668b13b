import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from sitelens.config import get_settings
from sitelens.routers.analyze import limiter, router as analyze_router

# One JSON object per line.  Counts and other event fields are part of the
# message itself; ``extra=`` fields are for handlers that read LogRecords.
LOG_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"message": "%(message)s"}'
)


def configure_logging(level: str = "INFO") -> None:
    """Send every log record to stderr as a JSON line at *level*.

    httpx logs each provider request at INFO; it is held to WARNING so the
    analysis events stay readable.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "loggers": {
                "httpx": {"level": "WARNING"},
                "httpcore": {"level": "WARNING"},
            },
            "root": {"level": level.upper(), "handlers": ["console"]},
        }
    )


configure_logging(get_settings().log_level)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SiteLens – Website Analysis API",
    description=(
        "Fetches a website through a scraping provider and returns a structured "
        "fingerprint of its technologies, layout, design and content structure."
    ),
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(analyze_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from SiteLens"}
