# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Implementation of the (EBSI-compatible) trusted issuers registry
https://api-pilot.ebsi.eu/docs/apis/trusted-issuers-registry/v4
"""

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Query, Request, status
from starlette.datastructures import URL

import common.db.postgres as db
import common.forwarded_headers as forwarded
from common.model.exception import HTTPError

from trusted_issuers_list import mapping
from trusted_issuers_list import models
import trusted_issuers_list.db.issuer as issuer_db
from trusted_issuers_list.exception import InvalidArgumentError, NotFoundError

_logger = logging.getLogger(__name__)

TAG = "Trusted Issuers Registry"

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
MAX_PAGE_INDEX = 2**31 - 1
"""Largest page index, keeps the row offset within the integer range of the database"""

PAGE_AFTER_PARAM = "page[after]"
"""Carries the page index, not a cursor"""
PAGE_SIZE_PARAM = "page[size]"

router = APIRouter(
    prefix="/v4/issuers",
    tags=[TAG],
    responses={status.HTTP_400_BAD_REQUEST: {"model": HTTPError, "description": "Invalid did or page parameters"}},
)


def check_did_format(did: str) -> None:
    """
    Checks the basic structure did:<method>:<method-specific-id>, will not validate the did!
    Trailing empty parts do not count, did:elsi: is rejected.
    """
    did_parts = did.rstrip(":").split(":")
    if len(did_parts) < 3 or did_parts[0] != "did":
        raise InvalidArgumentError("Provided string is not a valid did.")


def get_base_uri(request: Request) -> URL:
    """Public url of the requested resource, as resolved by the forwarded headers middleware"""
    base_uri: URL = getattr(request.state, forwarded.REQ_ATTR, None) or URL("/")
    return base_uri.replace(path=base_uri.path.rstrip("/") + request.url.path)


def _href(base_uri: URL, path: str = "") -> str:
    if not path:
        return str(base_uri)
    return str(base_uri.replace(path=f"{base_uri.path.rstrip('/')}/{path}"))


def _page_link(base_uri: URL, page_index: int, page_size: int) -> str:
    # Brackets are kept literally, as in the reference api
    query = urlencode({PAGE_AFTER_PARAM: page_index, PAGE_SIZE_PARAM: page_size}, safe="[]")
    return str(base_uri.replace(query=query))


def get_links(base_uri: URL, page: issuer_db.Page) -> models.LinksVO:
    links = models.LinksVO(
        first=_page_link(base_uri, 0, page.page_size),
        last=_page_link(base_uri, page.total_pages - 1, page.page_size),
    )
    if page.has_previous:
        links.prev = _page_link(base_uri, page.page_index - 1, page.page_size)
    if page.has_next:
        links.next = _page_link(base_uri, page.page_index + 1, page.page_size)
    return links


@router.get("", response_model_exclude_none=True, description="Lists the dids of all trusted issuers, ordered by did")
def get_issuers(
    request: Request,
    session: db.inject,
    page_size: Annotated[int | None, Query(alias="pageSize", description="Number of issuers per page, 1 to 100")] = None,
    page: Annotated[int | None, Query(description="Index of the requested page, starting at 0")] = None,
    anchor_page_size: Annotated[int | None, Query(alias=PAGE_SIZE_PARAM, description="Same as pageSize, as used in the links")] = None,
    anchor_page: Annotated[int | None, Query(alias=PAGE_AFTER_PARAM, description="Same as page, as used in the links")] = None,
) -> models.IssuersResponseVO:
    """
    Anchor-based pagination on top of the page offsets of the storage.
    """
    if page_size is None:
        page_size = anchor_page_size if anchor_page_size is not None else DEFAULT_PAGE_SIZE
    if page is None:
        page = anchor_page if anchor_page is not None else 0

    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise InvalidArgumentError("The requested page size is not supported.")
    if page < 0 or page > MAX_PAGE_INDEX:
        raise InvalidArgumentError("The requested page does not exist.")

    result = issuer_db.find_all(session, page, page_size)
    base_uri = get_base_uri(request)

    if result.is_empty:
        return models.IssuersResponseVO(items=[], total=0, page_size=0, self_=_href(base_uri))

    items = [models.IssuerEntryVO(did=issuer.did, href=_href(base_uri, issuer.did)) for issuer in result.items]
    return models.IssuersResponseVO(
        items=items,
        total=result.total,
        page_size=result.number_of_elements,
        self_=_href(base_uri),
        links=get_links(base_uri, result),
    )


@router.get(
    "/{did}",
    response_model_exclude_none=True,
    responses={status.HTTP_404_NOT_FOUND: {"model": HTTPError, "description": "Issuer not found"}},
    description="Returns the issuer with one attribute per trusted credential",
)
def get_issuer(did: str, session: db.inject) -> models.IssuerVO:
    check_did_format(did)
    issuer = issuer_db.get_by_did(session, did)
    if issuer is None:
        raise NotFoundError(did)
    return mapping.to_issuer_vo(issuer)
