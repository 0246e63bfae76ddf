# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""This file defines the custom health checks for the application."""

import logging

from fastapi import Response
from sqlalchemy import inspect

from common import health
import common.db.postgres as db
import trusted_issuers_list.config as conf
import trusted_issuers_list.db.issuer as issuer_db

_logger = logging.getLogger(__name__)


class DebugHealthResponse(health.HealthResponse):
    """Response body model for health request operation."""

    issuer_tables_present: health.HealthStatus = health.HealthStatus.unhealthy


class TrustedIssuersListHealthAPIRouter(health.HealthAPIRouterWithDBInject):
    def __init__(self) -> None:
        super().__init__(debug_response_model=DebugHealthResponse)

    def get_debug_probe(
        self,
        response: Response,
        config: conf.inject,
        session: db.inject,
    ) -> DebugHealthResponse:
        result = DebugHealthResponse()
        required_tables = {issuer_db.TrustedIssuer.__tablename__, issuer_db.Credential.__tablename__, issuer_db.Claim.__tablename__}
        try:
            existing_tables = set(inspect(session.get_bind()).get_table_names())
            result.issuer_tables_present = required_tables.issubset(existing_tables)
        except Exception:
            _logger.exception("Error in health checking the issuer tables.")
        return health.resolve_probe(result, response)


router = TrustedIssuersListHealthAPIRouter()
