"""Admin dashboard: login/logout, visitor oversight, statistics and export."""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from visitdesk.config import Settings
from visitdesk.dependencies import get_app_settings, get_optional_admin, get_sessions, get_storage, require_admin
from visitdesk.schemas.auth import AdminLogin, AdminSummary, LoginResponse, LogoutResponse, SessionStatus
from visitdesk.schemas.dashboard import AuditLogEntryResponse, ExportResponse, StatsResponse
from visitdesk.schemas.visitor import VisitorResponse
from visitdesk.services.audit_log import ACTION_ADMIN_LOGIN, ACTION_ADMIN_LOGOUT, ENTITY_ADMIN_USER
from visitdesk.services.auth import AdminSession, AdminSessions
from visitdesk.storage import Storage

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.post("/login", response_model=LoginResponse)
def login(
    data: AdminLogin,
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage),
    sessions: AdminSessions = Depends(get_sessions),
    settings: Settings = Depends(get_app_settings),
):
    user = storage.verify_admin_credentials(data.username, data.password)
    if not user:
        log.warning("Admin login failed for username=%r from %s", data.username, _client_ip(request))
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = sessions.issue(user)
    storage.append_audit_log(
        ACTION_ADMIN_LOGIN,
        ENTITY_ADMIN_USER,
        user.id,
        user_id=user.id,
        details={"username": user.username, "ipAddress": _client_ip(request)},
    )
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return LoginResponse(user=AdminSummary(id=user.id, username=user.username), token=token)


@router.post("/logout", response_model=LogoutResponse)
def logout(
    response: Response,
    admin: AdminSession = Depends(require_admin),
    storage: Storage = Depends(get_storage),
    sessions: AdminSessions = Depends(get_sessions),
    settings: Settings = Depends(get_app_settings),
):
    sessions.revoke(admin)
    storage.append_audit_log(ACTION_ADMIN_LOGOUT, ENTITY_ADMIN_USER, admin.user_id, user_id=admin.user_id, details={"username": admin.username})
    response.delete_cookie(settings.session_cookie_name)
    return LogoutResponse()


@router.get("/session", response_model=SessionStatus)
def session_status(admin: AdminSession | None = Depends(get_optional_admin)):
    if admin is None:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, user=AdminSummary(id=admin.user_id, username=admin.username))


@router.get("/visitors", response_model=list[VisitorResponse])
def list_visitors(
    admin: AdminSession = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """All visitors, photos stripped to keep the payload small. Fetch one visitor for the photo."""
    return [VisitorResponse.model_validate(v) for v in storage.list_all_visitors_redacted()]


@router.get("/visitors/{visitor_id}", response_model=VisitorResponse)
def get_visitor(
    visitor_id: str,
    admin: AdminSession = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    visitor = storage.get_visitor(visitor_id)
    if not visitor:
        raise HTTPException(status_code=404, detail="Visitor not found")
    return VisitorResponse.model_validate(visitor)


@router.post("/visitors/{visitor_id}/signout", response_model=VisitorResponse)
def admin_sign_out(
    visitor_id: str,
    admin: AdminSession = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    visitor = storage.sign_out_visitor(visitor_id, storage.clock(), actor_id=admin.user_id)
    if not visitor:
        raise HTTPException(status_code=404, detail="Visitor not found")
    return VisitorResponse.model_validate(visitor)


@router.get("/stats", response_model=StatsResponse)
def stats(
    admin: AdminSession = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return StatsResponse(**storage.get_today_stats())


@router.get("/export")
def export_data(
    admin: AdminSession = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """Download visitors (without photos) and the full audit trail as JSON."""
    exported_at: datetime = storage.clock()
    export = ExportResponse(
        visitors=[VisitorResponse.model_validate(v) for v in storage.list_all_visitors_redacted()],
        audit_logs=[AuditLogEntryResponse.model_validate(e) for e in storage.list_audit_logs()],
        exported_at=exported_at,
        exported_by=admin.username,
    )
    return JSONResponse(
        content=export.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f"attachment; filename=visitor-data-{exported_at.date().isoformat()}.json"},
    )
