#!/usr/bin/env python3
"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from mizan import MorphologyEngine
from mizan.data import DEFAULT_SCHEMES, SAMPLE_ROOTS
from mizan.web.main import create_app


@pytest.fixture
def client():
    return TestClient(create_app(MorphologyEngine.with_defaults()))


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_add_root(client):
    response = client.post("/api/roots", json={"root": "نصر"})
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["status"] == "added"

    response = client.post("/api/roots", json={"root": "نصر"})
    assert response.json()["success"] is False
    assert response.json()["status"] == "already_exists"

    response = client.post("/api/roots", json={"root": "اكل"})
    assert response.status_code == 400


def test_list_roots(client):
    data = client.get("/api/roots", params={"search": "ق", "page": 1, "limit": 1}).json()
    assert data["roots"] == ["قرأ"]
    assert data["total"] == 2

    data = client.get("/api/roots", params={"search": "ق", "page": 2, "limit": 1}).json()
    assert data["roots"] == ["قول"]

    data = client.get("/api/roots", params={"page": 0, "limit": 0}).json()
    assert data["page"] == 1
    assert data["limit"] == 10
    assert data["total"] == len(SAMPLE_ROOTS)


def test_get_and_delete_root(client):
    data = client.get("/api/roots/قول").json()
    assert data["category"] == "HOLLOW"
    assert data["category_ar"] == "أجوف"

    assert client.get("/api/roots/نصر").status_code == 404

    assert client.delete("/api/roots/قول").json()["status"] == "removed"
    assert client.delete("/api/roots/قول").json()["status"] == "not_found"


def test_analyze_root(client):
    data = client.get("/api/roots/روي/analysis").json()
    assert data["category"] == "DOUBLY_WEAK"
    assert "connected" in data["explanation"]
    assert client.get("/api/roots/اكل/analysis").status_code == 400


def test_schemes(client):
    data = client.get("/api/schemes").json()
    assert [s["name"] for s in data] == [name for name, _ in DEFAULT_SCHEMES]

    data = client.get("/api/schemes/مَفْعُول").json()
    assert "PASSIVE_PARTICIPLE" in data["shapes"]

    response = client.post("/api/schemes", json={"name": "broken", "rule": "12"})
    assert response.status_code == 400

    data = client.put("/api/schemes/unknown", json={"rule": "1َ2َ3"}).json()
    assert data["status"] == "not_found"

    data = client.post("/api/schemes", json={"name": "فُعُول", "rule": "1ُ2ُو3"}).json()
    assert data["status"] == "added"
    data = client.put("/api/schemes/فُعُول", json={"rule": "1ُ2ُو3ٌ"}).json()
    assert data["status"] == "updated"
    assert client.delete("/api/schemes/فُعُول").json()["status"] == "removed"
    assert client.get("/api/schemes/فُعُول").status_code == 404


def test_generate(client):
    data = client.post("/api/generate", json={"root": "قول", "scheme": "فَاعِل"}).json()
    assert data["success"] is True
    assert data["surface"] == "قَائِل"
    assert data["category"] == "HOLLOW"

    data = client.post("/api/generate", json={"root": "قول", "scheme": "missing"}).json()
    assert data["success"] is False
    assert data["surface"] is None

    derivatives = client.get("/api/roots/قول/derivatives").json()
    assert derivatives == [{"surface": "قَائِل", "frequency": 1, "scheme": "فَاعِل"}]

    usage = client.get("/api/schemes/فَاعِل/usage").json()
    assert usage == [{"root": "قول", "surface": "قَائِل", "frequency": 1}]


def test_generate_family(client):
    data = client.get("/api/generate/كتب/family").json()
    assert len(data) == len(DEFAULT_SCHEMES)
    assert all(w["success"] for w in data)


def test_generate_by_scheme(client):
    data = client.post("/api/generate/by-scheme", json={"scheme": "فَاعِل"}).json()
    assert len(data) == len(SAMPLE_ROOTS)
    assert all(w["success"] and w["scheme"] == "فَاعِل" for w in data)

    data = client.post("/api/generate/by-scheme", json={"scheme": "missing"}).json()
    assert data == []


def test_decompose(client):
    data = client.post("/api/decompose", json={"word": "قَائِل"}).json()
    assert data["success"] is True
    assert data["results"][0]["root"] == "قول"
    assert data["results"][0]["scheme"] == "فَاعِل"

    data = client.post("/api/decompose", json={"word": "سيارة", "all": True}).json()
    assert data["success"] is False
    assert data["results"] == []


def test_validate(client):
    data = client.post("/api/validate", json={"word": "مَكْتُوب", "root": "كتب"}).json()
    assert data["valid"] is True
    assert data["scheme"] == "مَفْعُول"

    data = client.post("/api/validate", json={"word": "مَكْتُوب", "root": "نصر"}).json()
    assert data["valid"] is False


def test_imports(client):
    data = client.post("/api/roots/import", json={"content": "نصر\n# comment\n\nاكل\nكتب"}).json()
    assert data["added"] == 1
    assert data["skipped"] == 2

    data = client.post("/api/schemes/import", json={"content": "فَعُول|1َ2ُو3\nbad"}).json()
    assert data["added"] == 1
    assert data["skipped"] == 1


def test_statistics(client):
    data = client.get("/api/statistics").json()
    assert data["total_roots"] == len(SAMPLE_ROOTS)
    assert data["total_schemes"] == len(DEFAULT_SCHEMES)
    assert data["total_frequency"] == 0
