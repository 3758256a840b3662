from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

logger = logging.getLogger("recipebox.errors")


class ErrorResponse(BaseModel):
    code: str = Field(examples=["bad_request"])
    detail: str = Field(examples=["Invalid input"])
    meta: dict | None = Field(default=None, examples=[{"field": "title"}])


class StoreError(Exception):
    """Fallo de una llamada al almacén (red, restricción, permisos...)."""

    def __init__(self, action: str, message: str):
        super().__init__(f"error {action}: {message}")
        self.action = action
        self.message = message


@contextmanager
def store_call(action: str, session: Optional[Session] = None) -> Iterator[None]:
    """
    Envuelve una llamada al almacén: registra el fallo una vez, deshace la
    transacción en curso y lo relanza como StoreError nombrando la acción.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store call failed: %s", action)
        if session is not None:
            session.rollback()
        raise StoreError(action, str(getattr(exc, "orig", None) or exc)) from exc


def install_exception_handlers(app: FastAPI):
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        code_map: Dict[int, str] = {
            400: "bad_request",
            401: "unauthorized",
            403: "forbidden",
            404: "not_found",
            409: "conflict",
            413: "payload_too_large",
            422: "validation_error",
            429: "rate_limited",
            500: "internal_error",
        }
        payload = ErrorResponse(code=code_map.get(exc.status_code, "error"), detail=str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=payload.model_dump(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()]
        payload = ErrorResponse(code="validation_error", detail="Validation failed", meta={"errors": errors})
        return JSONResponse(status_code=422, content=payload.model_dump())

    @app.exception_handler(StoreError)
    async def store_exception_handler(request: Request, exc: StoreError):
        payload = ErrorResponse(code="store_error", detail=str(exc), meta={"action": exc.action})
        return JSONResponse(status_code=503, content=payload.model_dump())
