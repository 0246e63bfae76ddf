# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Translation between the wire models and the stored entities"""

import datetime

from common import parsing
from trusted_issuers_list import models
from trusted_issuers_list.db.issuer import TrustedIssuer, Credential, Claim
from trusted_issuers_list.exception import InvalidArgumentError

UNDEFINED_ISSUER_TYPE = "Undefined"


def _to_iso(value: datetime.datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_iso(value: str | None) -> datetime.datetime | None:
    return datetime.datetime.fromisoformat(value) if value is not None else None


###############
# VO -> Entity #
###############


def to_claim(claim_vo: models.ClaimVO) -> Claim:
    return Claim(name=claim_vo.name, allowed_values=list(claim_vo.allowed_values))


def to_credential(credentials_vo: models.CredentialsVO) -> Credential:
    valid_for = credentials_vo.valid_for or models.TimeRangeVO()
    return Credential(
        credentials_type=credentials_vo.credentials_type,
        valid_from=_to_iso(valid_for.from_),
        valid_to=_to_iso(valid_for.to),
        claims=[to_claim(claim) for claim in credentials_vo.claims],
    )


def to_trusted_issuer(trusted_issuer_vo: models.TrustedIssuerVO) -> TrustedIssuer:
    if not trusted_issuer_vo.did:
        raise InvalidArgumentError("The issuer requires a did.")
    return TrustedIssuer(
        did=trusted_issuer_vo.did,
        credentials=[to_credential(credential) for credential in trusted_issuer_vo.credentials],
    )


###############
# Entity -> VO #
###############


def to_claim_vo(claim: Claim) -> models.ClaimVO:
    return models.ClaimVO(name=claim.name, allowed_values=claim.allowed_values)


def to_credentials_vo(credential: Credential) -> models.CredentialsVO:
    valid_for = None
    if credential.valid_from is not None or credential.valid_to is not None:
        valid_for = models.TimeRangeVO(from_=_from_iso(credential.valid_from), to=_from_iso(credential.valid_to))
    return models.CredentialsVO(
        credentials_type=credential.credentials_type,
        valid_for=valid_for,
        claims=[to_claim_vo(claim) for claim in credential.claims],
    )


def to_trusted_issuer_vo(trusted_issuer: TrustedIssuer) -> models.TrustedIssuerVO:
    return models.TrustedIssuerVO(
        did=trusted_issuer.did,
        credentials=[to_credentials_vo(credential) for credential in trusted_issuer.credentials],
    )


def to_issuer_attribute_vo(credential: Credential) -> models.IssuerAttributeVO:
    """Embeds the credential as base64 encoded json, identified by the sha256 of the encoded body"""
    credential_json = to_credentials_vo(credential).model_dump(mode="json", by_alias=True, exclude_none=True)
    body = parsing.object_to_base64(credential_json)
    return models.IssuerAttributeVO(hash=parsing.sha256_hex(body), body=body, issuer_type=UNDEFINED_ISSUER_TYPE)


def to_issuer_vo(trusted_issuer: TrustedIssuer) -> models.IssuerVO:
    return models.IssuerVO(
        did=trusted_issuer.did,
        attributes=[to_issuer_attribute_vo(credential) for credential in trusted_issuer.credentials],
    )
