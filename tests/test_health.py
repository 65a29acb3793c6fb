from fastapi.testclient import TestClient

import app.main as main


def test_health(monkeypatch):
    monkeypatch.setattr(main, "test_connection", lambda: True)
    resp = TestClient(main.app).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {
        "status": "healthy",
        "service": "voyage-cms",
        "version": main.VERSION,
        "database": True,
    }
