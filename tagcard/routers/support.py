from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Form, HTTPException, Request
from fastapi.responses import JSONResponse

from tagcard.core.config import get_settings
from tagcard.core.rate_limiter import rate_limit_ip
from tagcard.services.support_service import (
    SupportRequestError,
    send_help_request,
    validate_help_request,
)

router = APIRouter(prefix="/support", tags=["support"])


@router.post("")
def support_request(
    request: Request,
    background_tasks: BackgroundTasks,
    email: str = Form(""),
    subject: str = Form(""),
    message: str = Form(""),
):
    settings = get_settings()
    rate_limit_ip(request, "support", limit=max(1, settings.support_rate_limit), window_seconds=3600)
    try:
        help_request = validate_help_request(email, subject, message)
    except SupportRequestError as exc:
        raise HTTPException(400, str(exc))
    background_tasks.add_task(send_help_request, help_request)
    return JSONResponse({"ok": True}, status_code=202)
