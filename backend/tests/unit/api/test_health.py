# tests/unit/api/test_health.py
from __future__ import annotations

import pytest
from folio.api import join_prefix


def test_health_reports_database(client):
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/nope")

    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["code"] == "not_found"


@pytest.mark.parametrize(
    "segments, expected",
    [
        (("/api", "v1", ""), "/api/v1"),
        (("/api/", "v1", "/users"), "/api/v1/users"),
        (("", "health"), "/health"),
    ],
)
def test_join_prefix(segments, expected):
    assert join_prefix(*segments) == expected
