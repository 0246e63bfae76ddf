# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from fastapi.testclient import TestClient


def test_liveness(client: TestClient):
    r = client.get("/health/liveness")
    assert r.status_code == 200, r.text
    assert r.json() == {"http_server_connectivity": "HEALTHY"}


def test_readiness(client: TestClient):
    r = client.get("/health/readiness")
    assert r.status_code == 200, r.text
    assert r.json() == {"http_server_connectivity": "HEALTHY", "db_connectivity": "HEALTHY"}


def test_debug(client: TestClient):
    r = client.get("/health/debug")
    assert r.status_code == 200, r.text
    assert r.json()["issuer_tables_present"] == "HEALTHY"
