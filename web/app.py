"""
web/app.py
----------
FastAPI application factory for the form intake service.

Routes:
    GET  /      - plain-text welcome
    GET  /form  - registration form
    POST /form  - validate, store and announce a submission
"""

from pathlib import Path
from typing import Sequence

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from errors import StorageError, ValidationError
from security.rate_limiter import RateLimiter
from services.intake_service import IntakeService
from utils.logger import get_logger
from web.middleware import install_middleware

logger = get_logger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

SUCCESS_MESSAGE = "User data successfully inserted"
STORAGE_FAILURE_MESSAGE = "Failed to save user data"


async def _read_submission(request: Request):
    """Parse the body as JSON or as HTML form fields, depending on Content-Type."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            return await request.json()
        except ValueError:
            raise ValidationError([{"field": "body", "message": "malformed JSON"}])
    form = await request.form()
    return dict(form)


def create_app(
    service: IntakeService,
    *,
    request_logging: bool = True,
    rate_limiter: RateLimiter | None = None,
    gzip: bool = True,
    cors_origins: Sequence[str] = ("*",),
) -> FastAPI:
    """
    Build the web app around an already-constructed IntakeService.

    Args:
        service: Pipeline used by POST /form.
        request_logging: Log every request.
        rate_limiter: Per-client limiter; None disables rate limiting.
        gzip: Compress large responses.
        cors_origins: Allowed CORS origins; empty disables CORS.
    """
    app = FastAPI(title="FormIntake")
    app.state.intake_service = service
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    install_middleware(
        app,
        request_logging=request_logging,
        rate_limiter=rate_limiter,
        gzip=gzip,
        cors_origins=cors_origins,
    )

    # ── Error mapping ─────────────────────────────────────
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info(f"Rejected submission: {exc}")
        return JSONResponse(status_code=400, content={"errors": exc.errors})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"message": STORAGE_FAILURE_MESSAGE})

    # ── Routes ────────────────────────────────────────────
    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return "Welcome to FormIntake! Fill in the form at /form."

    @app.get("/form", response_class=HTMLResponse)
    async def form_page(request: Request):
        return templates.TemplateResponse(request, "form.html")

    @app.post("/form", status_code=201)
    async def submit_form(request: Request):
        raw = await _read_submission(request)
        await request.app.state.intake_service.submit(raw)
        return {"message": SUCCESS_MESSAGE}

    return app
