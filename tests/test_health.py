"""Smoke tests for the application factory."""
from barangay import create_app


def test_health_endpoint() -> None:
    """Ensure the health check returns the expected response."""
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://"})
    with app.test_client() as client:
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}


def test_unknown_route_is_404(client) -> None:
    assert client.get("/api/nowhere").status_code == 404
