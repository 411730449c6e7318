import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from inkwell.config import get_settings
from inkwell.errors import FieldError, FormValidationError
from inkwell.routers.contact import limiter, router as contact_router
from inkwell.routers.content import router as content_router
from inkwell.routers.settings import router as settings_router
from inkwell.services.email_settings import EmailSettingsStore
from inkwell.services.secret_codec import DecodingError

settings = get_settings()

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": settings.log_level.upper(), "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Inkwell – Blog Content API",
    description=(
        "Validates editor forms, renders rich-text documents to sanitized HTML, "
        "and manages the site's SMTP settings and contact form."
    ),
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Stand-in for the settings row of the external database
app.state.email_settings_store = EmailSettingsStore()


def _errors_response(errors: list) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"errors": [{"field": e.field, "message": e.message} for e in errors]},
    )


def _field_error(error: dict) -> FieldError:
    # Drop the "body" prefix FastAPI adds; the client only knows its own fields
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        message = str(error["ctx"]["error"])
    else:
        message = error.get("msg", "Invalid value")
    return FieldError(".".join(loc) or "body", message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Never echo the submitted input back: it may contain the SMTP password
    return _errors_response([_field_error(err) for err in exc.errors()])


@app.exception_handler(FormValidationError)
async def form_validation_handler(request: Request, exc: FormValidationError) -> JSONResponse:
    return _errors_response(exc.errors)


@app.exception_handler(DecodingError)
async def decoding_error_handler(request: Request, exc: DecodingError) -> JSONResponse:
    logger.error("Stored secret could not be decrypted for %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Could not process settings."})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(content_router)
app.include_router(settings_router)
app.include_router(contact_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from Inkwell"}
