# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Wire representation of the trusted issuers list.

Trusted list (management) models follow the FIWARE trusted issuers list api,
registry models follow the EBSI Trusted Issuers Registry v4
https://api-pilot.ebsi.eu/docs/apis/trusted-issuers-registry/v4
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

from common.model.exception import HTTPError

################
# Trusted List #
################


class TimeRangeVO(BaseModel):
    """Validity of a credential, either bound may be open"""

    model_config = ConfigDict(populate_by_name=True)

    from_: datetime.datetime | None = Field(None, alias="from")
    to: datetime.datetime | None = None


class ClaimVO(BaseModel):
    """Restriction of a claim to the listed values"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    allowed_values: list[StrictStr | StrictInt | StrictFloat] = Field(default_factory=list, alias="allowedValues")
    """Mixed list of strings and numbers, booleans are rejected"""


class CredentialsVO(BaseModel):
    """Credential type the issuer is trusted to issue"""

    model_config = ConfigDict(populate_by_name=True)

    valid_for: TimeRangeVO | None = Field(None, alias="validFor")
    credentials_type: str = Field(alias="credentialsType")
    claims: list[ClaimVO] = Field(default_factory=list)


class TrustedIssuerVO(BaseModel):
    did: str
    credentials: list[CredentialsVO] = Field(default_factory=list)


class ConflictHTTPError(HTTPError):
    """Returned if the issuer already exists"""

    did: str


############
# Registry #
############


class IssuerAttributeVO(BaseModel):
    """
    A single credential of the issuer.
    * body: base64 encoded json of the credential
    * hash: hex encoded sha256 of the body
    """

    model_config = ConfigDict(populate_by_name=True)

    hash: str
    body: str
    issuer_type: str = Field("Undefined", alias="issuerType")
    tao: str | None = None
    root_tao: str | None = Field(None, alias="rootTao")


class IssuerVO(BaseModel):
    did: str
    attributes: list[IssuerAttributeVO]


class IssuerEntryVO(BaseModel):
    did: str
    href: str


class LinksVO(BaseModel):
    first: str
    prev: str | None = None
    next: str | None = None
    last: str


class IssuersResponseVO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    self_: str = Field(alias="self")
    items: list[IssuerEntryVO]
    total: int
    page_size: int = Field(alias="pageSize")
    """Number of items contained in this page"""
    links: LinksVO | None = None
