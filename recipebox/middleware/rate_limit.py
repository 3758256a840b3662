from __future__ import annotations
import time
from collections import deque, defaultdict
from typing import Deque, Dict, Set

import jwt
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from ..config import settings
from ..errors import ErrorResponse

class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Límite sliding-window por usuario (sub del JWT) o IP, en memoria.
    Desarrollado para despliegue simple (1 proceso).
    """
    def __init__(self, app):
        super().__init__(app)
        self.window_s = 60.0
        self.limit = settings.rate_limit_rpm
        self.burst = settings.rate_limit_burst
        self.exempt: Set[str] = {"/health", "/metrics", "/docs", "/openapi.json"}
        self.buckets: Dict[str, Deque[float]] = defaultdict(deque)

    def _identity(self, request: Request) -> str:
        # Igual que security.get_optional_session, pero sin validar firma: sólo queremos una clave estable
        auth = request.headers.get("Authorization", "")
        if auth.lower().startswith("bearer "):
            token = auth.split(" ", 1)[1].strip()
            try:
                sub = jwt.decode(token, options={"verify_signature": False}).get("sub")
            except jwt.InvalidTokenError:
                sub = None
            if sub:
                return f"user:{sub}"
        host = request.client.host if request.client else "anonymous"
        return f"ip:{host}"

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt or request.method == "OPTIONS":
            return await call_next(request)

        key = self._identity(request)
        now = time.monotonic()
        q = self.buckets[key]

        # limpia fuera de ventana
        while q and (now - q[0]) > self.window_s:
            q.popleft()

        # aplica burst y límite
        if len(q) >= max(self.limit, self.burst):
            err = ErrorResponse(code="rate_limited", detail="Rate limit exceeded")
            return JSONResponse(err.model_dump(), status_code=429)

        q.append(now)
        return await call_next(request)
