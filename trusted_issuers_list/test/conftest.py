# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Fixtures running the trusted issuers list against an in-memory database"""

import typing

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fastapi.testclient import TestClient

import common.db.postgres as db
import trusted_issuers_list.db.issuer as issuer_db
from trusted_issuers_list.trusted_list import app

# A single shared connection, every new connection would open an empty database
t_engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
db.create_tables(t_engine)
t_session_local = sessionmaker(bind=t_engine, expire_on_commit=False)


def t_session() -> typing.Generator[db.Session, None, None]:
    """Override function Database Injection using the in-memory database"""
    session = t_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="module")
def client() -> TestClient:
    client = TestClient(app)
    app.dependency_overrides[db.env_session] = t_session
    yield client
    client.close()
    app.dependency_overrides.clear()


@pytest.fixture()
def client_for() -> typing.Generator[typing.Callable, None, None]:
    """Creates clients for apps assembled within a test, using the in-memory database"""
    clients: list[TestClient] = []

    def create_client(test_app) -> TestClient:
        test_app.dependency_overrides[db.env_session] = t_session
        clients.append(TestClient(test_app))
        return clients[-1]

    yield create_client
    for test_client in clients:
        test_client.close()


@pytest.fixture(autouse=True)
def empty_database():
    """Every test starts without any issuer"""
    yield
    session = t_session_local()
    try:
        with db.transaction(session):
            issuer_db.delete_all(session)
    finally:
        session.close()


@pytest.fixture()
def session() -> typing.Generator[db.Session, None, None]:
    yield from t_session()
