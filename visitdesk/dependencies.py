"""Shared dependencies: storage handle, settings, admin session."""
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from visitdesk.config import Settings
from visitdesk.services.auth import AdminSession, AdminSessions
from visitdesk.storage import Storage

security = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sessions(request: Request) -> AdminSessions:
    return request.app.state.sessions


def session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    """Bearer header first, then the session cookie set at login."""
    if credentials and credentials.credentials:
        return credentials.credentials.strip()
    settings: Settings = request.app.state.settings
    return request.cookies.get(settings.session_cookie_name)


def get_optional_admin(
    token: str | None = Depends(session_token),
    sessions: AdminSessions = Depends(get_sessions),
) -> AdminSession | None:
    return sessions.resolve(token)


def require_admin(admin: AdminSession | None = Depends(get_optional_admin)) -> AdminSession:
    if admin is None:
        raise HTTPException(status_code=401, detail="Admin authentication required")
    return admin
