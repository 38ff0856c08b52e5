from app.api import deps
from app.api.routes import auth as auth_routes
from app.core import ai
from app.core.config import settings
from app.core.security import create_access_token, create_refresh_token
from app.schemas.auth import TokenResponse


def _returns(value):
    async def fake(*args, **kwargs):
        return value

    return fake


# ── Public and document routes ──


def test_root(anon_client):
    response = anon_client.get("/")

    assert response.status_code == 200
    assert response.json()["version"] == settings.app_version


def test_request_id_is_echoed(anon_client):
    response = anon_client.get("/", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


def test_list_templates(client):
    all_templates = client.get("/api/resumes/templates").json()["templates"]
    latex = client.get("/api/resumes/templates", params={"kind": "latex"}).json()["templates"]

    assert len(all_templates) == 11
    assert [t["id"] for t in latex] == ["professional", "modern"]
    assert client.get("/api/resumes/templates", params={"kind": "pdf"}).status_code == 422


def test_preview_latex(client):
    response = client.post(
        "/api/resumes/preview/latex",
        json={
            "template": "modern",
            "content": {
                "full_name": "Jane Doe",
                "target_job_title": "Engineer",
                "summary": "Led R&D for 5% growth",
            },
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["template"] == "modern"
    assert body["format"] == "latex"
    assert r"R\&D" in body["content"]
    assert r"5\%" in body["content"]


def test_preview_requires_target_job_title(client):
    response = client.post("/api/resumes/preview/latex", json={"content": {"full_name": "Jane"}})

    assert response.status_code == 400
    assert response.json()["error"] == "SANITIZATION_ERROR"
    assert response.json()["details"] == {"field": "target_job_title"}


def test_categorize_keywords(client):
    response = client.post(
        "/api/keywords/categorize",
        json={"keywords": ["Python", "Docker", "AWS Certified Developer"]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["technicalSkills"] == ["Python"]
    assert body["tools"] == ["Docker"]
    assert body["certifications"] == ["AWS Certified Developer"]


def test_ats_score_for_empty_resume(client):
    response = client.post("/api/ai/ats-score", json={"content": {"target_job_title": "Engineer"}})

    assert response.status_code == 200
    body = response.json()
    assert body["general_score"] == 5
    assert body["job_specific_score"] is None
    assert body["keywords"] is None
    assert [f["priority"] for f in body["feedback"]] == ["high", "high", "high"]


def test_enhance_project_route(client, monkeypatch):
    monkeypatch.setattr(ai, "_chat", _returns("A sharper project paragraph."))

    response = client.post(
        "/api/ai/enhance-project",
        json={
            "job_title": "Backend Engineer",
            "job_description": "We need a backend engineer to build Python APIs and own our PostgreSQL schema.",
            "project": {"name": "Shop", "technologies": ["Python"]},
        },
    )

    assert response.status_code == 200
    assert response.json() == {"description": "A sharper project paragraph."}


def test_job_application_sql_injection_is_rejected(client, fake_db):
    response = client.post(
        "/api/job-applications",
        json={"company": "Acme'; DROP TABLE users; --", "job_title": "Engineer"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "SANITIZATION_ERROR"
    assert "SQL injection pattern detected" in body["message"]
    assert body["details"] == {"field": "company"}
    assert fake_db.commits == 0


def test_job_application_unknown_field_is_rejected(client):
    response = client.post(
        "/api/job-applications",
        json={"company": "Acme", "job_title": "Engineer", "user_id": "someone-else"},
    )

    assert response.status_code == 400
    assert "Unexpected fields detected: user_id" in response.json()["message"]


# ── Authentication ──


def test_login_sets_http_only_cookie(anon_client, monkeypatch):
    tokens = TokenResponse(access_token="access-abc", refresh_token="refresh-abc", expires_in=1800)
    monkeypatch.setattr(auth_routes.auth_service, "login", _returns(tokens))

    response = anon_client.post(
        "/api/auth/login", json={"email": "ada@example.com", "password": "password123"}
    )

    assert response.status_code == 200
    assert response.json()["access_token"] == "access-abc"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"{settings.auth_cookie_name}=access-abc")
    assert "HttpOnly" in cookie
    assert "samesite=lax" in cookie.lower()


def test_logout_clears_cookie(anon_client):
    response = anon_client.post("/api/auth/logout")

    assert response.status_code == 200
    assert f'{settings.auth_cookie_name}=""' in response.headers["set-cookie"]


def test_missing_token_is_unauthorized(anon_client):
    response = anon_client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["error"] == "UNAUTHORIZED"


def test_cookie_authenticates(anon_client, user, monkeypatch):
    monkeypatch.setattr(deps.user_repo, "get_active_by_id", _returns(user))
    anon_client.cookies.set(settings.auth_cookie_name, create_access_token({"sub": str(user.id)}))

    response = anon_client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json()["email"] == user.email


def test_bearer_header_authenticates(anon_client, user, monkeypatch):
    monkeypatch.setattr(deps.user_repo, "get_active_by_id", _returns(user))
    token = create_access_token({"sub": str(user.id)})

    response = anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200


def test_refresh_token_is_not_an_access_token(anon_client, user, monkeypatch):
    monkeypatch.setattr(deps.user_repo, "get_active_by_id", _returns(user))
    token = create_refresh_token({"sub": str(user.id)})

    response = anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"] == "INVALID_TOKEN"


def test_admin_routes_require_admin(client):
    response = client.get("/api/admin/stats")

    assert response.status_code == 403
    assert response.json()["error"] == "FORBIDDEN"
