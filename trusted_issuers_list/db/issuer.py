# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Storage of trusted issuers and the credentials they are trusted for.

None of the functions commit. Callers group them in `common.db.postgres.transaction`,
so an issuer and all of its credentials are always written at once.
"""

import math
import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

import sqlalchemy.exc
import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import ForeignKey, Integer, TEXT, JSON, select, exists, func, delete

import common.db.postgres as db
from trusted_issuers_list.exception import ConflictError, NotFoundError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

##########
# Tables #
##########


class TrustedIssuer(db.Base):
    __tablename__ = "trusted_issuer"
    did: Mapped[str] = mapped_column(TEXT, primary_key=True)
    credentials: Mapped[list["Credential"]] = sa_orm.relationship(
        back_populates="issuer",
        cascade="all, delete-orphan",
        order_by="Credential.id",
    )


class Credential(db.Base):
    """
    A credential type the issuer is trusted for. Owned by exactly one issuer.
    """

    __tablename__ = "credential"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issuer_did: Mapped[str] = mapped_column(TEXT, ForeignKey(TrustedIssuer.did, ondelete="CASCADE"), nullable=False, index=True)
    issuer: Mapped[TrustedIssuer] = sa_orm.relationship(back_populates="credentials")
    credentials_type: Mapped[str] = mapped_column(TEXT, nullable=False)
    valid_from: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    """ISO8601 Format Datetime from when the trust is valid"""
    valid_to: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    """ISO8601 Format Datetime until when the trust is valid"""
    claims: Mapped[list["Claim"]] = sa_orm.relationship(
        back_populates="credential",
        cascade="all, delete-orphan",
        order_by="Claim.id",
    )


class Claim(db.Base):
    __tablename__ = "claim"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    credential_id: Mapped[int] = mapped_column(Integer, ForeignKey(Credential.id, ondelete="CASCADE"), nullable=False, index=True)
    credential: Mapped[Credential] = sa_orm.relationship(back_populates="claims")
    name: Mapped[str] = mapped_column(TEXT, nullable=False)
    allowed_values: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Strings and numbers, in the order they were provided"""


########
# Page #
########


@dataclass
class Page(Generic[T]):
    """Slice of a sorted result together with the size of the whole result"""

    items: list[T]
    page_index: int
    page_size: int
    total: int

    @property
    def number_of_elements(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index + 1 < self.total_pages

    @property
    def is_empty(self) -> bool:
        return not self.items


#############
# Functions #
#############


def exists_by_did(session: sa_orm.Session, did: str) -> bool:
    return session.scalar(select(exists().where(TrustedIssuer.did == did)))


def get_by_did(session: sa_orm.Session, did: str) -> TrustedIssuer | None:
    return session.scalars(select(TrustedIssuer).where(TrustedIssuer.did == did)).one_or_none()


def save(session: sa_orm.Session, issuer: TrustedIssuer) -> TrustedIssuer:
    """
    Adds a new issuer including its credentials.
    Raises ConflictError if an issuer with the same did is already stored.
    """
    if exists_by_did(session, issuer.did):
        raise ConflictError(issuer.did)
    session.add(issuer)
    try:
        session.flush()
    except sqlalchemy.exc.IntegrityError as e:
        # Concurrent insert of the same did
        raise ConflictError(issuer.did) from e
    return issuer


def update(session: sa_orm.Session, issuer: TrustedIssuer) -> TrustedIssuer:
    """
    Replaces the state of the stored issuer with the did of issuer by the given one.
    Raises NotFoundError if no issuer with this did is stored.
    """
    stored = get_by_did(session, issuer.did)
    if stored is None:
        raise NotFoundError(issuer.did)
    credentials = list(issuer.credentials)
    # Release the credentials first, the transient issuer must not cascade into the session
    issuer.credentials = []
    stored.credentials = credentials
    session.flush()
    return stored


def delete_by_did(session: sa_orm.Session, did: str) -> None:
    """Removes the issuer together with its credentials and claims."""
    stored = get_by_did(session, did)
    if stored is None:
        raise NotFoundError(did)
    session.delete(stored)
    session.flush()


def delete_credentials(session: sa_orm.Session, credentials: list[Credential]) -> None:
    """Removes the credentials (and their claims) from storage and from their issuers."""
    credentials = list(credentials)
    owners = {credential.issuer for credential in credentials}
    for credential in credentials:
        session.delete(credential)
    session.flush()
    for owner in owners:
        session.expire(owner, ["credentials"])


def delete_all(session: sa_orm.Session) -> None:
    session.execute(delete(Claim))
    session.execute(delete(Credential))
    session.execute(delete(TrustedIssuer))


def find_all(session: sa_orm.Session, page_index: int, page_size: int) -> Page[TrustedIssuer]:
    """
    Returns the page_index-th page of all issuers, ordered by did.

    Dids are compared as plain strings (did:elsi:10 < did:elsi:2).
    Items and total are read with a single statement and thereby consistent with each other.
    """
    did_order = TrustedIssuer.did
    if session.get_bind().dialect.name == "postgresql":
        # Byte order instead of the locale dependent default collation
        did_order = TrustedIssuer.did.collate("C")

    rows = session.execute(
        select(TrustedIssuer, func.count().over().label("total")).order_by(did_order).offset(page_index * page_size).limit(page_size)
    ).all()
    if rows:
        total = rows[0].total
    else:
        total = session.scalar(select(func.count()).select_from(TrustedIssuer))
    return Page(items=[row[0] for row in rows], page_index=page_index, page_size=page_size, total=total)
