from __future__ import annotations
import logging
import re
from typing import Optional
from pydantic import BaseModel, EmailStr
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..config import settings
from ..db import get_session
from ..errors import ErrorResponse, store_call
from ..models_db import Profile, utcnow
from ..schemas import SessionOut
from ..security import (
    PURPOSE_MAGIC, create_access_token, create_magic_token, decode_token,
    get_bearer_token, get_current_session, get_optional_session, revoke_token,
)
from ..services.roles import is_admin
from ..services.session import SessionSnapshot, auth_events, SIGNED_IN, SIGNED_OUT

logger = logging.getLogger("recipebox.auth")

router = APIRouter(prefix="/auth", tags=["auth"])

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


class MagicLinkRequest(BaseModel):
    email: EmailStr

class MagicLinkResponse(BaseModel):
    sent: bool = True
    magic_link: Optional[str] = None

class VerifyRequest(BaseModel):
    token: str

class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    is_admin: bool = False

class UsernameRequest(BaseModel):
    username: str


def get_or_create_profile(session: Session, email: str) -> Profile:
    email = email.strip().lower()
    with store_call("loading profile", session):
        prof = session.exec(select(Profile).where(Profile.email == email)).first()
        if prof:
            return prof
        prof = Profile(email=email, role="admin" if is_admin(email) else "user")
        session.add(prof)
        session.commit()
        session.refresh(prof)
    logger.info("Profile created for %s", email)
    return prof


def validate_username(raw: str) -> str:
    name = raw.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Username is required")
    if len(name) < 3:
        raise HTTPException(status_code=422, detail="Username must be at least 3 characters")
    if not USERNAME_RE.match(name):
        raise HTTPException(status_code=422, detail="Username may only contain letters, digits, '-' and '_'")
    return name


@router.post("/magic-link", response_model=MagicLinkResponse, summary="Enviar enlace mágico de acceso")
def send_magic_link(req: MagicLinkRequest = Body(..., examples=[{"email": "cook@example.com"}])):
    token = create_magic_token(str(req.email).lower())
    link = f"{settings.server_public_url.rstrip('/')}/auth/verify?token={token}"
    # sin proveedor de correo: el enlace queda en el log
    logger.info("Magic link for %s: %s", req.email, link)
    return MagicLinkResponse(sent=True, magic_link=link if settings.magic_link_echo else None)


@router.post(
    "/verify",
    response_model=LoginResponse,
    summary="Canjear el enlace mágico por un JWT",
    responses={401: {"model": ErrorResponse}},
)
def verify_magic_link(req: VerifyRequest, session: Session = Depends(get_session)):
    data = decode_token(req.token, PURPOSE_MAGIC)
    prof = get_or_create_profile(session, data["sub"])
    token = create_access_token(user_id=prof.id, email=prof.email)
    auth_events.emit(SIGNED_IN, SessionSnapshot(user_id=prof.id, email=prof.email))
    return LoginResponse(access_token=token, user_id=prof.id, email=prof.email, is_admin=is_admin(prof.email))


@router.get("/session", response_model=Optional[SessionOut], summary="Sesión actual (null si anónimo)")
def current_session(
    snapshot: Optional[SessionSnapshot] = Depends(get_optional_session),
    session: Session = Depends(get_session),
):
    if snapshot is None:
        return None
    with store_call("loading profile", session):
        prof = session.get(Profile, snapshot.user_id)
    return SessionOut(
        user_id=snapshot.user_id,
        email=snapshot.email,
        is_admin=is_admin(snapshot.email),
        username=prof.username if prof else None,
    )


@router.post("/logout", summary="Cerrar sesión (revoca el token)")
def logout(
    token: str = Depends(get_bearer_token),
    snapshot: SessionSnapshot = Depends(get_current_session),
):
    revoke_token(token)
    auth_events.emit(SIGNED_OUT, snapshot)
    return {"ok": True}


@router.put(
    "/username",
    response_model=SessionOut,
    summary="Elegir pseudónimo",
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def set_username(
    req: UsernameRequest,
    snapshot: SessionSnapshot = Depends(get_current_session),
    session: Session = Depends(get_session),
):
    name = validate_username(req.username)
    prof = get_or_create_profile(session, snapshot.email)
    prof.username = name
    prof.updated_at = utcnow()
    session.add(prof)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="Username already taken")
    return SessionOut(user_id=prof.id, email=prof.email, is_admin=is_admin(prof.email), username=prof.username)
