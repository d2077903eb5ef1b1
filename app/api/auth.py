"""Admin dashboard authentication."""
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Request, Response, HTTPException
from pydantic import BaseModel

from app.core.config import settings

router = APIRouter()

SESSION_COOKIE = "admin_session"
SESSION_TTL = timedelta(hours=12)

# token -> expiry; process-local, cleared on restart
_sessions: dict[str, datetime] = {}


class LoginRequest(BaseModel):
    """Login request model."""
    password: str


class SessionInfo(BaseModel):
    """Session information response."""
    authenticated: bool
    expires_at: Optional[str] = None


def _session_expiry(request: Request) -> Optional[datetime]:
    """Expiry of the request's session, or None if it has none or it lapsed."""
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        return None

    expires_at = _sessions.get(token)
    if expires_at is None:
        return None
    if datetime.utcnow() > expires_at:
        del _sessions[token]
        return None
    return expires_at


async def require_admin(request: Request) -> bool:
    """Dependency for endpoints that change prices or order state."""
    if _session_expiry(request) is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return True


@router.post("/api/auth/login")
async def login(login_req: LoginRequest, response: Response):
    """Start an admin session."""
    if not secrets.compare_digest(
        login_req.password.encode(), settings.dashboard_password.encode()
    ):
        raise HTTPException(status_code=401, detail="Invalid password")

    token = secrets.token_urlsafe(32)
    expires_at = datetime.utcnow() + SESSION_TTL
    _sessions[token] = expires_at
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        max_age=int(SESSION_TTL.total_seconds()),
        samesite="lax",
    )
    return {"success": True, "expires_at": expires_at.isoformat()}


@router.post("/api/auth/logout")
async def logout(request: Request, response: Response):
    """End the admin session."""
    _sessions.pop(request.cookies.get(SESSION_COOKIE, ""), None)
    response.delete_cookie(SESSION_COOKIE)
    return {"success": True}


@router.get("/api/auth/session", response_model=SessionInfo)
async def get_session_info(request: Request) -> SessionInfo:
    """Report whether the caller has a live admin session."""
    expires_at = _session_expiry(request)
    if expires_at is None:
        return SessionInfo(authenticated=False)
    return SessionInfo(authenticated=True, expires_at=expires_at.isoformat())
