import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from tagcard.core.config import get_settings
from tagcard.core.logging import configure_logging
from tagcard.routers import public as public_router
from tagcard.routers import support as support_router
from tagcard.services.identifier_service import IdentifierService
from tagcard.services.share_service import ShareService
from tagcard.services.view_recorder import ViewRecorder

BASE = os.path.dirname(__file__)
TEMPLATES_DIR = os.path.join(BASE, "templates")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "img-src 'self' data: https:; "
            "style-src 'self' 'unsafe-inline'; "
            "script-src 'self' 'unsafe-inline'; "
            "connect-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class CachedStaticFiles(StaticFiles):
    def file_response(self, *args, **kwargs):
        # uploads are referenced with a ?v=<etag> suffix
        response = super().file_response(*args, **kwargs)
        response.headers["Cache-Control"] = "public, max-age=31536000, immutable"
        return response


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn tagcard.app:create_app --factory``)."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="TagCard API")

    os.makedirs(settings.uploads_dir, exist_ok=True)
    app.mount("/static/uploads", CachedStaticFiles(directory=settings.uploads_dir), name="uploads")

    allowed_cors = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed_cors.update(
            {
                "http://localhost:8000",
                "http://127.0.0.1:8000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.state.templates = Jinja2Templates(directory=TEMPLATES_DIR)
    app.state.identifier_service = IdentifierService()
    app.state.view_recorder = ViewRecorder()
    app.state.share_service = ShareService()

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    app.include_router(support_router.router)
    app.include_router(public_router.router)

    logger.info("TagCard API ready (env={}, base={})", settings.app_env, settings.public_base_url)
    return app
