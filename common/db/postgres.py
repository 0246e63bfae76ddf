# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import contextlib
import logging
from typing import Annotated
from collections.abc import Generator
from functools import cache

from common.config import inject_db_config

from sqlalchemy import create_engine, inspect, event, Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.schema import CreateSchema
import sqlalchemy.exc

from fastapi import Depends, status, HTTPException

#################
# DB Definition #
#################

_logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def create_tables(engine: Engine) -> None:
    """Creates all tables known to the metadata which do not exist yet"""
    Base.metadata.create_all(engine)
    _logger.info("Database tables created")


@cache
def _setup_db(db_connection_string: str, db_schema: str):
    """Sets up a DB connection with the schema"""
    engine = create_engine(db_connection_string, pool_pre_ping=True)

    if engine.dialect.name == "postgresql":

        @event.listens_for(engine, "connect", insert=True)
        def set_search_path(dbapi_connection, connection_record):
            """
            Setting Session search path every time a new connection is made
            https://docs.sqlalchemy.org/en/20/dialects/postgresql.html#setting-alternate-search-paths-on-connect
            """
            existing_autocommit = dbapi_connection.autocommit
            dbapi_connection.autocommit = True
            cursor = dbapi_connection.cursor()
            cursor.execute("SET SESSION search_path TO '%s'" % db_schema)
            cursor.close()
            dbapi_connection.autocommit = existing_autocommit

        inspector = inspect(engine)
        if db_schema not in inspector.get_schema_names():
            with engine.connect() as conn:
                conn.execute(CreateSchema(db_schema, if_not_exists=True))
                conn.commit()

    _session_local = sessionmaker(bind=engine, expire_on_commit=False)
    return engine, _session_local


def engine(db_connection_string: str, db_schema: str) -> Engine:
    return _setup_db(db_connection_string, db_schema)[0]


def session(db_connection_string: str, db_schema: str) -> Session:
    try:
        _, _session_local = _setup_db(db_connection_string, db_schema)
        db_session = _session_local()
        return db_session
    except sqlalchemy.exc.OperationalError:
        _logger.exception("Could not establish connection to database.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not establish connection to database",
        )


@contextlib.contextmanager
def transaction(db_session: Session) -> Generator[Session, None, None]:
    """
    Commits everything done within the block at once.
    Rolls back and re-raises on any error, so partial writes are never persisted.
    """
    try:
        yield db_session
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise


def env_session(db_config: inject_db_config) -> Generator[Session, None, None]:
    db_session = session(
        db_connection_string=db_config.SQLALCHEMY_DATABASE_URL,
        db_schema=db_config.SQLALCHEMY_DATABASE_SCHEMA,
    )
    try:
        yield db_session
    finally:
        db_session.close()


inject = Annotated[Session, Depends(env_session)]
