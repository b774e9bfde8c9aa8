"""Tests for application wiring."""


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


def test_root_redirect_to_register(client):
    """Test root redirects to registration on a fresh database."""
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers.get("location") == "/register"


def test_admin_unauthorized(client):
    """Test /admin returns the 401 envelope without a session."""
    response = client.get("/admin")
    assert response.status_code == 401
    assert response.json() == {"status": "ERR", "data": "Usuario no autorizado"}


def test_logout_without_session(client):
    """Test logout redirects to login even without a session."""
    response = client.get("/logout", follow_redirects=False)
    assert response.status_code == 302
    assert "/login" in response.headers.get("location", "")


def test_register_then_login_flow(client):
    """Test the full register, login and admin flow through the app."""
    response = client.post(
        "/register",
        json={
            "first_name": "Ana",
            "last_name": "García",
            "email": "ana@example.com",
            "age": 30,
            "password": "secreto",
        },
    )
    assert response.status_code == 200

    response = client.post(
        "/login",
        json={"mail": "ana@example.com", "pass": "secreto"},
        follow_redirects=False,
    )
    assert response.status_code == 302
    assert response.headers["location"] == "/products"

    response = client.get("/admin")
    assert response.status_code == 403


def test_scheduler_runs_during_lifespan(client):
    """Test the cleanup job is scheduled while the app is running."""
    from sessionauth.jobs.scheduler import get_scheduler

    scheduler = get_scheduler()
    assert scheduler is not None
    assert scheduler.get_job("session_cleanup") is not None
