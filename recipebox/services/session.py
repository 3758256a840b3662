from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger("recipebox.session")

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class SessionSnapshot:
    """Sesión actual (inmutable). Se pasa explícitamente; None = anónimo."""
    user_id: str
    email: str


AuthListener = Callable[[str, Optional[SessionSnapshot]], None]


class AuthEvents:
    """
    Notificaciones de cambio de sesión. subscribe() devuelve la función para
    darse de baja; hay que llamarla al desmontar.
    """

    def __init__(self) -> None:
        self._listeners: List[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: str, snapshot: Optional[SessionSnapshot]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, snapshot)
            except Exception:
                # un oyente roto no debe tumbar el login/logout
                logger.exception("Auth listener failed on %s", event)


auth_events = AuthEvents()


def audit_listener(event: str, snapshot: Optional[SessionSnapshot]) -> None:
    if snapshot is None:
        logger.info("auth event %s", event)
    else:
        logger.info("auth event %s user=%s", event, snapshot.user_id)
