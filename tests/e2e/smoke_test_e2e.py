"""
E2E Smoke Tests for the BoweryConnect Crisis API.

These tests call a running server over HTTP. Chat scenarios that reach
the LLM need a valid ANTHROPIC_API_KEY on the server; without one they
still pass through the fallback path and only the shape is checked.

Scenarios:
1. Health check - verify service is up
2. Immediate crisis - deterministic hotline response, any language
3. Everyday need - LLM reply with triage fields
4. Resources - nearby lookup and unknown type
5. Survival tips - known and unknown category

Usage:
    CRISIS_API_URL=http://localhost:3000 pytest tests/e2e/smoke_test_e2e.py -v

Prerequisites:
    - Crisis API running at CRISIS_API_URL
"""

import os

import httpx
import pytest

# Configuration from environment
CRISIS_API_URL = os.getenv("CRISIS_API_URL", "")
TIMEOUT = float(os.getenv("E2E_TIMEOUT", "30"))

pytestmark = pytest.mark.skipif(
    not CRISIS_API_URL,
    reason="CRISIS_API_URL not set - start the server and export it to run smoke tests",
)


@pytest.fixture(scope="module")
def http():
    with httpx.Client(base_url=CRISIS_API_URL.rstrip("/"), timeout=TIMEOUT) as client:
        yield client


def test_health(http):
    resp = http.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.parametrize("language", ["en", "es", "zh", "ar", "ru"])
def test_immediate_crisis(http, language):
    resp = http.post(
        "/crisis-chat",
        json={"message": "I want to end it", "context": {"language": language}},
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["urgency"] == "immediate"
    assert data["actions"] == ["call_hotline", "find_er", "alert_caseworker"]
    assert "988" in data["message"]


def test_everyday_need(http):
    resp = http.post(
        "/crisis-chat",
        json={"message": "I'm hungry and it's so cold out here"},
    )

    data = resp.json()
    if data.get("fallback"):
        assert resp.status_code == 500
        assert data["urgency"] == "error"
        pytest.skip("Server answered with fallback (LLM not configured or unavailable)")

    assert resp.status_code == 200
    assert data["urgency"] == "high"
    assert {"find_food", "find_shelter"} <= set(data["actions"])
    assert data["message"]


def test_nearby_resources(http):
    resp = http.post(
        "/resources/nearby",
        json={"latitude": 40.7223, "longitude": -73.993, "type": "mental_health"},
    )

    assert resp.status_code == 200
    assert resp.json()["resources"]

    resp = http.post("/resources/nearby", json={"type": "spaceships"})
    assert resp.json() == {"resources": []}


def test_survival_tips(http):
    assert http.get("/survival-tips/safety").json()["tips"]
    assert http.get("/survival-tips/nothing").json() == {"tips": []}
