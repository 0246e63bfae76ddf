# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Management of the trusted issuers (proprietary trusted list api).

Served under /issuer and, for all modifying operations, under /v4/issuers.
Reading by did is served under /issuer only, /v4/issuers/{did} is the registry view.
"""

import logging

from fastapi import APIRouter, Response, status

import common.db.postgres as db
from common.model.exception import HTTPError

from trusted_issuers_list import mapping
from trusted_issuers_list import models
import trusted_issuers_list.config as conf
import trusted_issuers_list.db.issuer as issuer_db
from trusted_issuers_list.exception import ConflictError, InvalidArgumentError, NotFoundError
from trusted_issuers_list.logging import IssuerListOperationsLogEntry as LogEntry

_logger = logging.getLogger(__name__)

TAG = "Trusted Issuers List"

HREF_TEMPLATE = "/v4/issuers/{did}"
"""Location of a created issuer in the registry"""

_not_found = {status.HTTP_404_NOT_FOUND: {"model": HTTPError, "description": "Issuer not found"}}

router = APIRouter(tags=[TAG])


@router.post(
    "/issuer",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": models.ConflictHTTPError, "description": "Issuer already exists"}},
    description="Registers a new trusted issuer",
)
@router.post(
    "/v4/issuers",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": models.ConflictHTTPError, "description": "Issuer already exists"}},
    description="Registers a new trusted issuer",
)
def create_trusted_issuer(trusted_issuer: models.TrustedIssuerVO, session: db.inject, config: conf.inject) -> Response:
    try:
        with db.transaction(session):
            persisted = issuer_db.save(session, mapping.to_trusted_issuer(trusted_issuer))
    except ConflictError:
        _logger.info(LogEntry.failed("Issuer already exists.", LogEntry.Operation.create, LogEntry.Step.validation, did=trusted_issuer.did))
        raise

    _logger.info(
        LogEntry.succeeded(
            "Issuer created.",
            LogEntry.Operation.create,
            LogEntry.Step.persistence,
            did=persisted.did,
            credential_count=len(trusted_issuer.credentials),
        )
    )
    # Relative to the server root, so it carries the basepath the registry is served under
    location = config.route_prefix + HREF_TEMPLATE.format(did=persisted.did)
    return Response(status_code=status.HTTP_201_CREATED, headers={"Location": location})


@router.get("/issuer/{did}", response_model_exclude_none=True, responses=_not_found, description="Returns the issuer with all of its credentials")
def get_issuer(did: str, session: db.inject) -> models.TrustedIssuerVO:
    issuer = issuer_db.get_by_did(session, did)
    if issuer is None:
        raise NotFoundError(did)
    return mapping.to_trusted_issuer_vo(issuer)


@router.put(
    "/issuer/{did}",
    response_model_exclude_none=True,
    responses={**_not_found, status.HTTP_400_BAD_REQUEST: {"model": HTTPError, "description": "Did of path and body differ"}},
    description="Replaces the issuer. All previously stored credentials are removed.",
)
@router.put(
    "/v4/issuers/{did}",
    response_model_exclude_none=True,
    responses={**_not_found, status.HTTP_400_BAD_REQUEST: {"model": HTTPError, "description": "Did of path and body differ"}},
    description="Replaces the issuer. All previously stored credentials are removed.",
)
def update_issuer(did: str, trusted_issuer: models.TrustedIssuerVO, session: db.inject) -> models.TrustedIssuerVO:
    with db.transaction(session):
        stored = issuer_db.get_by_did(session, did)
        if stored is None:
            raise NotFoundError(did)
        if did != trusted_issuer.did:
            raise InvalidArgumentError("Did does not match the issuer object.")

        replaced_credentials = len(stored.credentials)
        issuer_db.delete_credentials(session, stored.credentials)
        updated = issuer_db.update(session, mapping.to_trusted_issuer(trusted_issuer))

    _logger.info(
        LogEntry.succeeded(
            f"Issuer updated, replaced {replaced_credentials} credentials.",
            LogEntry.Operation.update,
            LogEntry.Step.credential_replacement,
            did=did,
            credential_count=len(updated.credentials),
        )
    )
    return mapping.to_trusted_issuer_vo(updated)


@router.delete("/issuer/{did}", status_code=status.HTTP_204_NO_CONTENT, responses=_not_found, description="Removes the issuer and all of its credentials")
@router.delete("/v4/issuers/{did}", status_code=status.HTTP_204_NO_CONTENT, responses=_not_found, description="Removes the issuer and all of its credentials")
def delete_issuer_by_id(did: str, session: db.inject) -> Response:
    with db.transaction(session):
        if not issuer_db.exists_by_did(session, did):
            raise NotFoundError(did)
        issuer_db.delete_by_did(session, did)

    _logger.info(LogEntry.succeeded("Issuer deleted.", LogEntry.Operation.delete, LogEntry.Step.persistence, did=did))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
