# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Tests for the management of trusted issuers"""

import datetime

import pytest
from sqlalchemy import select, func

from fastapi.testclient import TestClient

import common.db.postgres as db
import trusted_issuers_list.db.issuer as issuer_db

DID_HAPPYPETS = "did:elsi:happypets"


def t_issuer(did: str = DID_HAPPYPETS) -> dict:
    return {
        "did": did,
        "credentials": [
            {
                "validFor": {"from": "2024-01-01T00:00:00Z", "to": "2030-01-01T12:30:00+01:00"},
                "credentialsType": "PacketDeliveryService",
                "claims": [
                    {"name": "roles", "allowedValues": ["GOLD_CUSTOMER", "STANDARD_CUSTOMER"]},
                    {"name": "level", "allowedValues": [1, 2.5, "three"]},
                ],
            },
            {"credentialsType": "VerifiableCredential", "claims": []},
        ],
    }


def count_rows(session: db.Session, table) -> int:
    return session.scalar(select(func.count()).select_from(table))


@pytest.mark.parametrize("path", ["/issuer", "/v4/issuers"])
def test_create_and_get(client: TestClient, path: str):
    issuer = t_issuer()
    r = client.post(path, json=issuer)
    assert r.status_code == 201, r.text
    assert r.headers["Location"] == f"/v4/issuers/{DID_HAPPYPETS}"

    r = client.get(f"/issuer/{DID_HAPPYPETS}")
    assert r.status_code == 200, r.text
    stored = r.json()
    assert stored["did"] == DID_HAPPYPETS
    assert len(stored["credentials"]) == 2

    credential = stored["credentials"][0]
    assert credential["credentialsType"] == "PacketDeliveryService"
    assert credential["claims"] == issuer["credentials"][0]["claims"], "Order and type of the allowed values should be kept"
    for bound in ("from", "to"):
        # Same instant, the representation of the offset may differ
        assert datetime.datetime.fromisoformat(credential["validFor"][bound]) == datetime.datetime.fromisoformat(
            issuer["credentials"][0]["validFor"][bound]
        )

    second = stored["credentials"][1]
    assert second == {"credentialsType": "VerifiableCredential", "claims": []}, "Missing validity should not be returned"


def test_create_conflict(client: TestClient):
    assert client.post("/issuer", json=t_issuer()).status_code == 201
    r = client.post("/v4/issuers", json=t_issuer())
    assert r.status_code == 409, r.text
    assert r.json() == {"detail": "Issuer already exists.", "did": DID_HAPPYPETS}


def test_create_is_atomic(client: TestClient, session: db.Session):
    client.post("/issuer", json=t_issuer())
    client.post("/issuer", json=t_issuer())
    assert count_rows(session, issuer_db.TrustedIssuer) == 1
    assert count_rows(session, issuer_db.Credential) == 2
    assert count_rows(session, issuer_db.Claim) == 2


@pytest.mark.parametrize(
    "body",
    [
        {"credentials": []},
        {"did": DID_HAPPYPETS, "credentials": [{"claims": []}]},
        {"did": DID_HAPPYPETS, "credentials": [{"credentialsType": "VerifiableCredential", "validFor": {"from": "yesterday"}}]},
        {"did": DID_HAPPYPETS, "credentials": [{"credentialsType": "VerifiableCredential", "claims": [{"allowedValues": []}]}]},
        {"did": "", "credentials": []},
        {"did": DID_HAPPYPETS, "credentials": [{"credentialsType": "VerifiableCredential", "claims": [{"name": "roles", "allowedValues": [True, "a"]}]}]},
        {"did": DID_HAPPYPETS, "credentials": [{"credentialsType": "VerifiableCredential", "claims": [{"name": "roles", "allowedValues": [{"a": 1}]}]}]},
    ],
)
def test_create_invalid(client: TestClient, body: dict):
    r = client.post("/issuer", json=body)
    assert r.status_code == 400, r.text
    assert client.get("/v4/issuers").json()["total"] == 0


def test_get_not_found(client: TestClient):
    r = client.get("/issuer/did:elsi:does-not-exist")
    assert r.status_code == 404, r.text
    assert r.json()["detail"]


def test_get_without_did_validation(client: TestClient):
    assert client.get("/issuer/my-did").status_code == 404, "Management api does not validate the did format"
    assert client.get("/v4/issuers/my-did").status_code == 400


@pytest.mark.parametrize("path", ["/issuer", "/v4/issuers"])
def test_update(client: TestClient, session: db.Session, path: str):
    client.post("/issuer", json=t_issuer())
    replacement = {
        "did": DID_HAPPYPETS,
        "credentials": [{"credentialsType": "NaturalPersonCredential", "claims": [{"name": "firstName", "allowedValues": ["Alice"]}]}],
    }

    r = client.put(f"{path}/{DID_HAPPYPETS}", json=replacement)
    assert r.status_code == 200, r.text
    assert r.json() == replacement

    stored = client.get(f"/issuer/{DID_HAPPYPETS}").json()
    assert stored == replacement, "All previous credentials should be replaced"
    assert count_rows(session, issuer_db.Credential) == 1
    assert count_rows(session, issuer_db.Claim) == 1

    attributes = client.get(f"/v4/issuers/{DID_HAPPYPETS}").json()["attributes"]
    assert len(attributes) == 1


def test_update_not_found(client: TestClient):
    r = client.put(f"/issuer/{DID_HAPPYPETS}", json=t_issuer())
    assert r.status_code == 404, r.text


def test_update_did_mismatch(client: TestClient):
    client.post("/issuer", json=t_issuer())
    r = client.put(f"/issuer/{DID_HAPPYPETS}", json=t_issuer("did:elsi:other"))
    assert r.status_code == 400, r.text
    assert len(client.get(f"/issuer/{DID_HAPPYPETS}").json()["credentials"]) == 2, "A rejected update should not change the issuer"
    assert client.get("/issuer/did:elsi:other").status_code == 404


@pytest.mark.parametrize("path", ["/issuer", "/v4/issuers"])
def test_delete(client: TestClient, session: db.Session, path: str):
    client.post("/issuer", json=t_issuer())
    client.post("/issuer", json=t_issuer("did:elsi:other"))

    r = client.delete(f"{path}/{DID_HAPPYPETS}")
    assert r.status_code == 204, r.text
    assert not r.content

    assert client.get(f"/issuer/{DID_HAPPYPETS}").status_code == 404
    assert client.delete(f"{path}/{DID_HAPPYPETS}").status_code == 404
    assert count_rows(session, issuer_db.TrustedIssuer) == 1
    assert count_rows(session, issuer_db.Credential) == 2, "Credentials of the deleted issuer should be removed"
    assert count_rows(session, issuer_db.Claim) == 2
