"""Host notifications (Mailgun/SendGrid email). Best effort: never raises to callers."""
import html
import logging
import re

from visitdesk.config import Settings
from visitdesk.records import VisitorRecord
from visitdesk.storage import Storage

log = logging.getLogger("uvicorn.error")

MAILGUN_US_BASE = "https://api.mailgun.net"
MAILGUN_EU_BASE = "https://api.eu.mailgun.net"


def send_email(settings: Settings, to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    """Send email via Mailgun (preferred) or SendGrid. Returns True only if a provider accepted it."""
    if settings.mailgun_api_key and settings.mailgun_domain:
        log.info("[Email] Calling Mailgun API: to=%s subject=%s domain=%s", to_email, subject, settings.mailgun_domain)
        return _send_email_mailgun(settings, to_email, subject, html_content, text_content=text_content)
    if settings.sendgrid_api_key:
        return _send_email_sendgrid(settings, to_email, subject, html_content, text_content=text_content)
    log.warning(
        "[Email] NOT SENT: to=%s subject=%s. Set MAILGUN_API_KEY and MAILGUN_DOMAIN (or SENDGRID_API_KEY) in .env.",
        to_email,
        subject,
    )
    return False


def _send_email_mailgun(settings: Settings, to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    import httpx

    base = (settings.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
    domain = (settings.mailgun_domain or "").strip().lower()
    from_addr = (settings.mailgun_from_email or "").strip()
    from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
    if domain and from_domain != domain:
        # Mailgun only delivers when the sender matches the sending domain
        from_addr = f"noreply@{domain}"
    data = {
        "from": f"{settings.mailgun_from_name} <{from_addr}>",
        "to": to_email,
        "subject": subject,
        "text": text_content or "",
        "html": html_content or "",
    }
    try:
        with httpx.Client(timeout=10.0) as client:
            r = client.post(f"{base}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
            if 200 <= r.status_code < 300:
                log.info("[Mailgun] API success: to=%s status=%s", to_email, r.status_code)
                return True
            if r.status_code == 401 and base == MAILGUN_US_BASE:
                log.info("[Mailgun] 401 with US endpoint. Retrying with EU endpoint...")
                r2 = client.post(f"{MAILGUN_EU_BASE}/v3/{domain}/messages", auth=("api", settings.mailgun_api_key), data=data)
                if 200 <= r2.status_code < 300:
                    log.info("[Mailgun] API success (EU): to=%s", to_email)
                    return True
                log.warning("[Mailgun] EU request failed: status=%s body=%s", r2.status_code, r2.text[:500])
                return False
            log.warning("[Mailgun] API failed: status=%s to=%s body=%s", r.status_code, to_email, r.text[:500])
            return False
    except httpx.HTTPError as e:
        log.warning("[Mailgun] Exception: to=%s error=%s: %s", to_email, type(e).__name__, e)
        return False


def _send_email_sendgrid(settings: Settings, to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    from sendgrid import SendGridAPIClient
    from sendgrid.helpers.mail import Mail

    message = Mail(
        from_email=(settings.sendgrid_from_email, settings.sendgrid_from_name),
        to_emails=to_email,
        subject=subject,
        html_content=html_content,
        plain_text_content=text_content or "",
    )
    try:
        SendGridAPIClient(settings.sendgrid_api_key).send(message)
    except Exception as e:
        # python-http-client raises per-status HTTPError subclasses plus urllib errors
        log.warning("[SendGrid] Exception: to=%s error=%s: %s", to_email, type(e).__name__, e)
        return False
    return True


def host_email_address(host_name: str, domain: str) -> str:
    """'Sarah Johnson' -> 'sarah.johnson@<domain>'."""
    local = re.sub(r"\s+", ".", host_name.strip().lower())
    return f"{local}@{domain}"


def send_host_arrival_email(settings: Settings, visitor: VisitorRecord) -> bool:
    """Tell the host their visitor has arrived at reception."""
    to_email = host_email_address(visitor.host_name, settings.host_email_domain)
    company = visitor.company or "Not specified"
    arrived = visitor.sign_in_time.strftime("%Y-%m-%d %H:%M")
    subject = f"Visitor Arrival: {visitor.name}"
    text = (
        f"Visitor: {visitor.name}\nCompany: {company}\nReason: {visitor.visit_reason}\n"
        f"Arrival Time: {arrived}\n\nPlease meet your visitor at the reception area."
    )
    esc = html.escape
    html_content = f"""
    <h2>Visitor Arrival Notification</h2>
    <p><strong>Visitor:</strong> {esc(visitor.name)}</p>
    <p><strong>Company:</strong> {esc(company)}</p>
    <p><strong>Reason:</strong> {esc(visitor.visit_reason)}</p>
    <p><strong>Arrival Time:</strong> {arrived}</p>
    <p>Please meet your visitor at the reception area.</p>
    """
    return send_email(settings, to_email, subject, html_content, text_content=text)


def notify_host_of_arrival(storage: Storage, settings: Settings, visitor: VisitorRecord) -> None:
    """Background task run after sign-in. Marks email_sent only when delivery succeeded;
    any failure is logged and dropped so the sign-in itself is never affected."""
    try:
        if send_host_arrival_email(settings, visitor):
            storage.update_visitor(visitor.id, {"email_sent": True})
    except Exception:
        log.exception("Failed to send email notification for visitor %s", visitor.id)
