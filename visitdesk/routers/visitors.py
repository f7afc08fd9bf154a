"""Kiosk endpoints: visitor sign-in, self sign-out, who is on site, badge."""
import re

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import Response

from visitdesk.config import Settings
from visitdesk.dependencies import get_app_settings, get_storage
from visitdesk.schemas.visitor import VisitorSignIn, VisitorSignOut, VisitorResponse
from visitdesk.services.badges import visitor_badge_pdf
from visitdesk.services.notifications import notify_host_of_arrival
from visitdesk.storage import Storage

router = APIRouter(prefix="/api/visitors", tags=["visitors"])


@router.post("/signin", response_model=VisitorResponse)
def sign_in(
    data: VisitorSignIn,
    background_tasks: BackgroundTasks,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    visitor = storage.create_visitor(
        name=data.name,
        host_name=data.host_name,
        visit_reason=data.visit_reason,
        company=data.company,
        photo_data=data.photo_data,
    )
    # Runs after the response is sent; a failed email never fails the sign-in
    background_tasks.add_task(notify_host_of_arrival, storage, settings, visitor)
    return VisitorResponse.model_validate(visitor)


@router.post("/signout", response_model=VisitorResponse)
def sign_out(data: VisitorSignOut, storage: Storage = Depends(get_storage)):
    visitor = storage.sign_out_visitor_by_name(data.name, storage.clock())
    if not visitor:
        raise HTTPException(status_code=404, detail="Visitor not found or already signed out")
    return VisitorResponse.model_validate(visitor)


@router.get("/current", response_model=list[VisitorResponse])
def current_visitors(storage: Storage = Depends(get_storage)):
    return [VisitorResponse.model_validate(v) for v in storage.list_current_visitors()]


@router.get("/{visitor_id}/badge")
def visitor_badge(visitor_id: str, storage: Storage = Depends(get_storage)):
    """Printable badge PDF, offered to the visitor right after sign-in."""
    visitor = storage.get_visitor(visitor_id)
    if not visitor:
        raise HTTPException(status_code=404, detail="Visitor not found")
    pdf = visitor_badge_pdf(visitor)
    slug = re.sub(r"[^a-z0-9]+", "-", visitor.name.lower()).strip("-") or "visitor"
    filename = f"visitor-badge-{slug}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
