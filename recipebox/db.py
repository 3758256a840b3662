from typing import Iterator
from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy import text
from sqlalchemy.pool import StaticPool
from .config import settings


def make_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # memoria: todas las sesiones deben ver la misma conexión
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=False, **kwargs)


engine = make_engine(settings.db_url)


def init_db() -> None:
    # registra las tablas en el metadata antes de crearlas
    from . import models_db  # noqa: F401
    SQLModel.metadata.create_all(engine)


def ping_db() -> bool:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True


def get_session() -> Iterator[Session]:
    # Desactiva la expiración de atributos tras commit (evita {} en respuestas)
    with Session(engine, expire_on_commit=False) as session:
        yield session
