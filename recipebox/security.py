from __future__ import annotations
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
import uuid

import jwt
from fastapi import Header, HTTPException

from .config import settings
from .services.session import SessionSnapshot

ALGO = "HS256"
PURPOSE_ACCESS = "access"
PURPOSE_MAGIC = "magic"

# jti -> exp de tokens cerrados con /auth/logout (en memoria, 1 proceso)
_revoked: Dict[str, int] = {}


def _encode(sub: str, email: str, purpose: str, expires_minutes: int) -> str:
    now = datetime.now(tz=timezone.utc)
    payload: Dict[str, Any] = {
        "sub": sub,
        "email": email,
        "purpose": purpose,
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGO)


def create_access_token(user_id: str, email: str, expires_minutes: int | None = None) -> str:
    return _encode(user_id, email, PURPOSE_ACCESS, expires_minutes or settings.jwt_expire_minutes)


def create_magic_token(email: str) -> str:
    return _encode(email, email, PURPOSE_MAGIC, settings.magic_link_expire_minutes)


def decode_token(token: str, purpose: str) -> Dict[str, Any]:
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[ALGO])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
    sub = data.get("sub")
    if not sub or not isinstance(sub, str) or data.get("purpose") != purpose:
        raise HTTPException(status_code=401, detail="Invalid token payload")
    if data.get("jti") in _revoked:
        raise HTTPException(status_code=401, detail="Token revoked")
    return data


def _prune_revoked(now: int) -> None:
    # los caducados ya los rechaza jwt.decode
    for jti in [j for j, exp in _revoked.items() if exp <= now]:
        del _revoked[jti]


def revoke_token(token: str) -> None:
    data = decode_token(token, PURPOSE_ACCESS)
    _prune_revoked(int(datetime.now(tz=timezone.utc).timestamp()))
    _revoked[data["jti"]] = int(data["exp"])


def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip() or None
    return None


def get_bearer_token(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> str:
    token = _extract_bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing credentials")
    return token


def get_optional_session(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Optional[SessionSnapshot]:
    """Sesión del llamador o None si es anónimo. Un token inválido sigue siendo 401."""
    token = _extract_bearer(authorization)
    if not token:
        return None
    data = decode_token(token, PURPOSE_ACCESS)
    return SessionSnapshot(user_id=data["sub"], email=data.get("email") or "")


def get_current_session(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> SessionSnapshot:
    session = get_optional_session(authorization)
    if session is None:
        raise HTTPException(status_code=401, detail="Missing credentials")
    return session
