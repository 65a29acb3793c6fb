"""Token verification and role gates."""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.api.errors import register_error_handlers
from app.core.security import Identity, optional_auth, require_admin, require_main_admin

from conftest import bearer, make_token


@pytest.fixture
def gated():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/admin")
    def admin_only(identity: Identity = Depends(require_admin)):
        return {"user": identity.user_id, "role": identity.role}

    @app.get("/main")
    def main_admin_only(identity: Identity = Depends(require_main_admin)):
        return {"user": identity.user_id}

    @app.get("/open")
    def open_route(identity=Depends(optional_auth)):
        return {"user": identity.user_id if identity else None}

    return TestClient(app)


def test_admin_passes_admin_gate_but_not_main_admin_gate(gated):
    headers = bearer(make_token("admin", user_id=42))
    resp = gated.get("/admin", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"user": "42", "role": "admin"}
    assert gated.get("/main", headers=headers).status_code == 403


def test_main_admin_passes_both_gates(gated):
    headers = bearer(make_token("main_admin"))
    assert gated.get("/admin", headers=headers).status_code == 200
    assert gated.get("/main", headers=headers).status_code == 200


@pytest.mark.parametrize("path", ["/admin", "/main"])
def test_missing_token_is_401_never_403(gated, path):
    resp = gated.get(path)
    assert resp.status_code == 401
    assert resp.json() == {"error": "No token provided"}


def test_non_bearer_scheme_counts_as_missing(gated):
    resp = gated.get("/admin", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert resp.status_code == 401


def test_expired_token(gated):
    resp = gated.get("/admin", headers=bearer(make_token("admin", expires_in=-60)))
    assert resp.status_code == 401
    assert resp.json() == {"error": "Token has expired"}


def test_wrong_signature(gated):
    token = make_token("admin", secret="another-secret-that-is-long-enough-for-hs256")
    resp = gated.get("/admin", headers=bearer(token))
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_malformed_token(gated):
    resp = gated.get("/admin", headers=bearer("not.a.jwt"))
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_viewer_role_is_forbidden(gated):
    resp = gated.get("/admin", headers=bearer(make_token("viewer")))
    assert resp.status_code == 403


def test_optional_auth_tolerates_missing_and_bad_tokens(gated):
    assert gated.get("/open").json() == {"user": None}
    assert gated.get("/open", headers=bearer("garbage")).json() == {"user": None}
    assert gated.get("/open", headers=bearer(make_token(user_id=5))).json() == {"user": "5"}
