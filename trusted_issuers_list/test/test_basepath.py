# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Tests serving the api under a configured basepath"""

import pytest

import trusted_issuers_list.config as conf
from trusted_issuers_list.trusted_list import create_app

DID = "did:elsi:happypets"


@pytest.mark.parametrize(
    "basepath,expected_prefix",
    [
        ("/", ""),
        ("", ""),
        ("/til", "/til"),
        ("/til/", "/til"),
        ("til", "/til"),
        ("/api/til/", "/api/til"),
    ],
)
def test_route_prefix(monkeypatch, basepath: str, expected_prefix: str):
    monkeypatch.setenv("GENERAL_BASEPATH", basepath)
    assert conf.TrustedIssuersListConfig().route_prefix == expected_prefix


def test_default_route_prefix(monkeypatch):
    monkeypatch.delenv("GENERAL_BASEPATH", raising=False)
    assert conf.TrustedIssuersListConfig().route_prefix == ""


def test_api_under_basepath(monkeypatch, client_for):
    monkeypatch.setenv("GENERAL_BASEPATH", "/til/")
    client = client_for(create_app())

    r = client.post("/til/issuer", json={"did": DID, "credentials": []})
    assert r.status_code == 201, r.text
    assert r.headers["Location"] == f"/til/v4/issuers/{DID}", "Location should carry the basepath"
    assert client.get(r.headers["Location"]).status_code == 200

    page = client.get("/til/v4/issuers").json()
    assert page["self"] == "http://localhost:8080/til/v4/issuers"
    assert page["items"] == [{"did": DID, "href": f"http://localhost:8080/til/v4/issuers/{DID}"}]
    assert page["links"]["first"] == "http://localhost:8080/til/v4/issuers?page[after]=0&page[size]=10"

    assert client.get(f"/til/issuer/{DID}").status_code == 200
    assert client.delete(f"/til/v4/issuers/{DID}").status_code == 204

    assert client.get("/v4/issuers").status_code == 404, "Routes are only served under the basepath"
    assert client.get("/til/health/liveness").status_code == 404
    assert client.get("/health/liveness").status_code == 200, "Health endpoints stay at the server root"


def test_basepath_behind_proxy(monkeypatch, client_for):
    monkeypatch.setenv("GENERAL_BASEPATH", "/til")
    client = client_for(create_app())
    client.post("/til/v4/issuers", json={"did": DID, "credentials": []})

    headers = {"X-Forwarded-Host": "example.com", "X-Forwarded-Port": "443", "X-Forwarded-Proto": "https", "X-Forwarded-Prefix": "/public"}
    page = client.get("/til/v4/issuers", headers=headers).json()
    assert page["self"] == "https://example.com/public/til/v4/issuers"
    assert page["items"][0]["href"] == f"https://example.com/public/til/v4/issuers/{DID}"
