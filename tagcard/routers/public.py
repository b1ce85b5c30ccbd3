from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from tagcard.core.utils import share_url
from tagcard.domain.visibility import normalize_preset
from tagcard.services.card_render import card_filename, card_pdf, card_png, render_card
from tagcard.services.errors import (
    ArtifactGenerationError,
    ProfileNotFoundError,
    TransientBackendError,
    UnknownShareTargetError,
)
from tagcard.services.identifier_service import IdentifierService, ResolvedProfile
from tagcard.services.qr_service import QR_VARIANT_DYNAMIC, QR_VARIANTS, qr_payload, qr_png, qr_svg
from tagcard.services.share_service import ACTION_REDIRECT, SHARE_TARGETS, ShareService
from tagcard.services.vcard_service import VCARD_MEDIA_TYPE, build_vcard, vcard_filename
from tagcard.services.view_recorder import ViewRecorder

router = APIRouter(prefix="/p", tags=["public"])

NOT_FOUND_DETAIL = "Profile not found"
BACKEND_DETAIL = "Could not load this profile right now. Please reload the page."
ARTIFACT_DETAIL = "Could not generate the file. Please try again."


def _state(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured")
    return value


def _templates(request: Request):
    return _state(request, "templates")


def _identifier_service(request: Request) -> IdentifierService:
    return _state(request, "identifier_service")


def _view_recorder(request: Request) -> ViewRecorder:
    return _state(request, "view_recorder")


def _share_service(request: Request) -> ShareService:
    return _state(request, "share_service")


def _resolve(request: Request, public_id: str) -> ResolvedProfile:
    try:
        return _identifier_service(request).resolve(public_id)
    except ProfileNotFoundError:
        raise HTTPException(404, NOT_FOUND_DETAIL)
    except TransientBackendError:
        raise HTTPException(503, BACKEND_DETAIL)


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/{public_id}", response_class=HTMLResponse)
def public_profile(
    public_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    preset: str = "",
    q: str = "",
):
    templates = _templates(request)
    try:
        resolved = _identifier_service(request).resolve(public_id)
    except ProfileNotFoundError:
        return templates.TemplateResponse(request, "not_found.html", {}, status_code=404)
    except TransientBackendError:
        return templates.TemplateResponse(
            request, "error.html", {"message": BACKEND_DETAIL}, status_code=503
        )

    background_tasks.add_task(
        _view_recorder(request).record_view,
        resolved.profile.id,
        request.headers.get("referer"),
        request.headers.get("user-agent"),
    )

    preset_name = normalize_preset(preset)
    view = resolved.public_view(query=q, preset=preset_name)
    url = share_url(view.public_id, preset_name)
    suffix = f"?preset={preset_name}" if preset_name else ""
    context = {
        "view": view,
        "query": q,
        "preset": preset_name,
        "share_url": url,
        "artifact_suffix": suffix,
        "base_path": f"/p/{view.public_id}",
        "share_targets": [t for t in SHARE_TARGETS if t not in ("native", "copy")],
    }
    return templates.TemplateResponse(request, "public_profile.html", context)


@router.get("/{public_id}/view.json")
def public_view_json(public_id: str, request: Request, preset: str = "", q: str = ""):
    view = _resolve(request, public_id).public_view(query=q, preset=preset)
    payload = view.as_dict()
    payload["share_url"] = share_url(view.public_id, view.preset)
    return JSONResponse(payload)


def _qr_payload(request: Request, public_id: str, variant: str, preset: str) -> str:
    if variant not in QR_VARIANTS:
        raise HTTPException(400, f"variant must be one of: {', '.join(QR_VARIANTS)}")
    view = _resolve(request, public_id).public_view(preset=preset)
    return qr_payload(view, share_url(view.public_id, view.preset), variant)


@router.get("/{public_id}/qr.png")
def profile_qr_png(public_id: str, request: Request, variant: str = QR_VARIANT_DYNAMIC, preset: str = ""):
    payload = _qr_payload(request, public_id, variant, preset)
    try:
        data = qr_png(payload)
    except ArtifactGenerationError:
        raise HTTPException(500, ARTIFACT_DETAIL)
    return Response(data, media_type="image/png")


@router.get("/{public_id}/qr.svg")
def profile_qr_svg(public_id: str, request: Request, variant: str = QR_VARIANT_DYNAMIC, preset: str = ""):
    payload = _qr_payload(request, public_id, variant, preset)
    try:
        data = qr_svg(payload)
    except ArtifactGenerationError:
        raise HTTPException(500, ARTIFACT_DETAIL)
    return Response(data, media_type="image/svg+xml")


@router.get("/{public_id}/contact.vcf")
def profile_vcard(public_id: str, request: Request, preset: str = ""):
    view = _resolve(request, public_id).public_view(preset=preset)
    return Response(
        build_vcard(view),
        media_type=f"{VCARD_MEDIA_TYPE}; charset=utf-8",
        headers=_attachment(vcard_filename(view)),
    )


async def _render(request: Request, public_id: str, preset: str):
    # the lookup is blocking SQL; keep it off the event loop
    resolved = await run_in_threadpool(_resolve, request, public_id)
    view = resolved.public_view(preset=preset)
    try:
        image = await render_card(view, share_url(view.public_id, view.preset))
    except ArtifactGenerationError:
        raise HTTPException(500, ARTIFACT_DETAIL)
    return view, image


@router.get("/{public_id}/card.png")
async def profile_card_png(public_id: str, request: Request, preset: str = ""):
    view, image = await _render(request, public_id, preset)
    try:
        data = await run_in_threadpool(card_png, image)
    except ArtifactGenerationError:
        raise HTTPException(500, ARTIFACT_DETAIL)
    return Response(data, media_type="image/png", headers=_attachment(card_filename(view, "png")))


@router.get("/{public_id}/card.pdf")
async def profile_card_pdf(public_id: str, request: Request, preset: str = ""):
    view, image = await _render(request, public_id, preset)
    try:
        data = await run_in_threadpool(card_pdf, image)
    except ArtifactGenerationError:
        raise HTTPException(500, ARTIFACT_DETAIL)
    return Response(data, media_type="application/pdf", headers=_attachment(card_filename(view, "pdf")))


@router.get("/{public_id}/share/{target}")
def profile_share(public_id: str, target: str, request: Request, preset: str = ""):
    view = _resolve(request, public_id).public_view(preset=preset)
    try:
        plan = _share_service(request).plan(target, view, share_url(view.public_id, view.preset))
    except UnknownShareTargetError:
        raise HTTPException(404, "Unknown share target")
    if plan.action == ACTION_REDIRECT:
        return RedirectResponse(plan.href, status_code=303)
    return JSONResponse(plan.as_dict())
