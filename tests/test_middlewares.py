from recipebox.config import settings
from recipebox.middleware.rate_limit import RateLimitMiddleware


def test_protected_endpoint_requires_token(client):
    """Endpoints con dependencia de autenticación deben devolver 401 sin token."""
    resp = client.post("/recipes", json={"title": "Crêpes"})
    assert resp.status_code == 401
    assert resp.json()["code"] == "unauthorized"


def test_invalid_token_is_rejected(client):
    resp = client.get("/recipes", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_size_limit_middleware(client):
    """El middleware debe rechazar cuerpos que exceden el límite configurado."""
    big_body = "x" * (settings.max_body_bytes + 1)
    resp = client.post("/auth/magic-link", content=big_body, headers={"Content-Type": "text/plain"})
    assert resp.status_code == 413
    assert resp.json()["code"] == "payload_too_large"


def test_rate_limit_middleware(client):
    """Al exceder el número de peticiones por ventana se debe obtener 429."""
    # Asegura que la pila de middlewares esté construida
    client.get("/health")
    layer = client.app.middleware_stack
    while not isinstance(layer, RateLimitMiddleware):
        layer = layer.app
    old = (layer.limit, layer.burst)
    layer.limit = layer.burst = 2
    layer.buckets.clear()
    try:
        assert client.get("/recipes/tags").status_code == 200
        assert client.get("/recipes/tags").status_code == 200
        resp = client.get("/recipes/tags")
        assert resp.status_code == 429
        assert resp.json()["code"] == "rate_limited"
        # /health está exento
        assert client.get("/health").status_code == 200
    finally:
        layer.limit, layer.burst = old
        layer.buckets.clear()
