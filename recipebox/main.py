import logging
import time

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .db import init_db, ping_db
from .routes.auth import router as auth_router
from .routes.recipes import router as recipes_router
from .routes.tags import router as tags_router
from .routes.ingredients import router as ingredients_router
from .routes.admin import router as admin_router
from .middleware.rate_limit import RateLimitMiddleware
from .middleware.size_limit import SizeLimitMiddleware
from .errors import install_exception_handlers
from .services.session import auth_events, audit_listener
from prometheus_fastapi_instrumentator import Instrumentator

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("recipebox.main")

TAGS_METADATA = [
    {"name": "auth", "description": "Acceso por enlace mágico y JWT."},
    {"name": "recipes", "description": "Catálogo: búsqueda, filtros, detalle, alta/edición/borrado y comentarios."},
    {"name": "tags", "description": "Vocabulario compartido de tags."},
    {"name": "ingredients", "description": "Emoji representativo por ingrediente."},
    {"name": "admin", "description": "Back office: moderación de recetas y tags."},
]

app = FastAPI(
    title="RecipeBox API",
    version="0.3.0",
    description="Catálogo de recetas: buscar, filtrar y valorar; los dueños editan las suyas y un admin modera.",
    default_response_class=ORJSONResponse,
    openapi_tags=TAGS_METADATA,
    license_info={"name": "MIT", "url": "https://opensource.org/licenses/MIT"},
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.parsed_cors(settings.cors_allow_origins),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.parsed_cors(settings.cors_allow_methods),
    allow_headers=settings.parsed_cors(settings.cors_allow_headers),
)

# Middlewares
app.add_middleware(SizeLimitMiddleware)     # 413 si Content-Length excede
app.add_middleware(RateLimitMiddleware)     # 429 si exceso RPM

# Prometheus
instrumentator = Instrumentator().instrument(app)
instrumentator.expose(app, include_in_schema=False, endpoint="/metrics")

# Exception handlers
install_exception_handlers(app)

@app.on_event("startup")
def startup():
    init_db()
    app.state.unsubscribe_audit = auth_events.subscribe(audit_listener)
    logger.info("RecipeBox started (env=%s)", settings.service_env)

@app.on_event("shutdown")
def shutdown():
    unsubscribe = getattr(app.state, "unsubscribe_audit", None)
    if unsubscribe:
        unsubscribe()
        app.state.unsubscribe_audit = None

# Routers
app.include_router(auth_router)
app.include_router(recipes_router)
app.include_router(tags_router)
app.include_router(ingredients_router)
app.include_router(admin_router)


@app.get("/health", tags=["admin"], summary="Healthcheck (incluye base de datos)")
def health():
    t0 = time.perf_counter()
    db_ok, db_err = True, None
    try:
        ping_db()
    except SQLAlchemyError as e:
        logger.warning("Database ping failed: %s", e)
        db_ok, db_err = False, str(e)
    return {
        "status": "ok" if db_ok else "degraded",
        "env": settings.service_env,
        "checks": {"db": {"ok": db_ok, "latency_ms": round((time.perf_counter() - t0) * 1000, 1), "error": db_err}},
    }

# --- OpenAPI servers ---
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        tags=TAGS_METADATA,
    )
    schema["servers"] = [{"url": settings.server_public_url, "description": f"{settings.service_env}"}]
    app.openapi_schema = schema
    return app.openapi_schema
app.openapi = custom_openapi  # type: ignore
