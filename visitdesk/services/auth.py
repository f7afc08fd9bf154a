"""Admin auth: password hashing and session tokens."""
from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from visitdesk.config import Settings
from visitdesk.records import AdminUserRecord

BCRYPT_ROUNDS = 10


def _pwd_bytes(password: str, max_len: int = 72) -> bytes:
    return password.encode("utf-8")[:max_len]


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


@dataclass(frozen=True)
class AdminSession:
    """Capability handed to every admin-only operation."""
    session_id: str
    user_id: str
    username: str


class AdminSessions:
    """Issues and revokes admin session tokens.

    A token is a signed JWT naming the admin and a random session id. The id is
    also kept here, so logout invalidates the token before it expires. Entries
    past their expiry are dropped whenever a session is issued or resolved.
    """

    def __init__(self, settings: Settings):
        self._secret = settings.session_secret_key
        self._algorithm = settings.session_algorithm
        self._max_age = timedelta(minutes=settings.session_max_age_minutes)
        self._active: dict[str, tuple[AdminSession, datetime]] = {}
        self._lock = threading.Lock()

    def active_count(self) -> int:
        with self._lock:
            return len(self._active)

    def _prune(self, now: datetime) -> None:
        # Caller holds the lock
        expired = [sid for sid, (_, expires) in self._active.items() if expires <= now]
        for sid in expired:
            del self._active[sid]

    def issue(self, admin: AdminUserRecord) -> str:
        session = AdminSession(session_id=secrets.token_urlsafe(24), user_id=admin.id, username=admin.username)
        now = datetime.now(timezone.utc)
        expire = now + self._max_age
        # PyJWT expects "sub" to be a string
        payload = {"sub": admin.id, "username": admin.username, "sid": session.session_id, "exp": expire}
        raw = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        with self._lock:
            self._prune(now)
            if expire > now:
                self._active[session.session_id] = (session, expire)
        return raw if isinstance(raw, str) else raw.decode("utf-8")

    def resolve(self, token: str | None) -> AdminSession | None:
        payload, _ = self.decode_with_error(token)
        with self._lock:
            self._prune(datetime.now(timezone.utc))
            if not payload:
                return None
            entry = self._active.get(payload.get("sid") or "")
        if entry is None or entry[0].user_id != payload.get("sub"):
            return None
        return entry[0]

    def revoke(self, session: AdminSession) -> None:
        with self._lock:
            self._active.pop(session.session_id, None)

    def decode_with_error(self, token: str | None) -> tuple[dict | None, str | None]:
        """Decode JWT; returns (payload, error_message)."""
        if not token or not isinstance(token, str):
            return None, "empty token"
        try:
            payload = jwt.decode(token.strip(), self._secret, algorithms=[self._algorithm])
            return payload, None
        except jwt.PyJWTError as e:
            return None, str(e)
