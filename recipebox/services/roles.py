"""
Puerta de roles para la interfaz: decide si se muestran editar/borrar.

No es una frontera de seguridad; las rutas vuelven a comprobar la propiedad
antes de escribir.
"""
from __future__ import annotations
from enum import Enum
from typing import Optional

from ..config import settings
from .session import SessionSnapshot


class Role(str, Enum):
    ANONYMOUS = "anonymous"
    OWNER = "owner"
    ADMIN = "admin"


def is_admin(email: Optional[str], admin_email: Optional[str] = None) -> bool:
    configured = settings.admin_email if admin_email is None else admin_email
    if not email or not configured.strip():
        return False
    return email.strip().lower() == configured.strip().lower()


def role_of(
    user_id: Optional[str],
    user_email: Optional[str],
    recipe_owner_id: Optional[str],
    admin_email: Optional[str] = None,
) -> Role:
    # un usuario con sesión que no es dueño no tiene más permisos que un anónimo
    if is_admin(user_email, admin_email):
        return Role.ADMIN
    if user_id is not None and recipe_owner_id is not None and user_id == recipe_owner_id:
        return Role.OWNER
    return Role.ANONYMOUS


def role_for_session(session: Optional[SessionSnapshot], recipe_owner_id: Optional[str]) -> Role:
    if session is None:
        return Role.ANONYMOUS
    return role_of(session.user_id, session.email, recipe_owner_id)


def can_edit(role: Role) -> bool:
    return role in (Role.ADMIN, Role.OWNER)
