# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Trusted Issuers List

Registry of the issuers trusted to issue verifiable credentials, identified by their DID.

EBSI Trusted Issuers Registry v4 (read only, paginated)
https://api-pilot.ebsi.eu/docs/apis/trusted-issuers-registry/v4

Trusted list management api (create, read, update, delete of issuers)
"""

from asgi_correlation_id import CorrelationIdMiddleware

from common.config import ForwardedHeadersConfig, ServerConfig
from common.fastapi_extensions import ExtendedFastAPI
from common.forwarded_headers import ForwardedHeadersMiddleware

from trusted_issuers_list.exception.handler import configure_exception_handlers
import trusted_issuers_list.route.registry as registry
import trusted_issuers_list.route.issuer as issuer
import trusted_issuers_list.route.health as health
import trusted_issuers_list.config as conf


def create_app() -> ExtendedFastAPI:
    """Assembles the service, routes are served under the configured basepath"""
    app = ExtendedFastAPI(conf.inject)

    route_prefix = app.config_instance.route_prefix
    app.include_router(registry.router, prefix=route_prefix)
    app.include_router(issuer.router, prefix=route_prefix)
    app.include_router(health.router)

    configure_exception_handlers(app)

    app.add_middleware(CorrelationIdMiddleware)
    # Added last, so the public url is resolved before any other middleware runs
    app.add_middleware(
        ForwardedHeadersMiddleware,
        config=ForwardedHeadersConfig.from_env(),
        server_config=ServerConfig(),
    )
    return app


app = create_app()
