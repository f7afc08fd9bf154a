from visitdesk.schemas.auth import AdminLogin, AdminSummary, LoginResponse, LogoutResponse, SessionStatus
from visitdesk.schemas.visitor import VisitReason, VisitorSignIn, VisitorSignOut, VisitorResponse
from visitdesk.schemas.dashboard import StatsResponse, AuditLogEntryResponse, ExportResponse
