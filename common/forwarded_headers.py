# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Reconstruction of the public request url for services running behind a reverse proxy.

The middleware publishes the resolved parts on the request state, so route handlers can
build links against the public host instead of the internal bind address:

    base_uri = getattr(request.state, forwarded_headers.REQ_ATTR)
"""

import logging

from starlette.datastructures import Headers, URL
from starlette.types import ASGIApp, Receive, Scope, Send

from common.config import ForwardedHeadersConfig, ServerConfig

_logger = logging.getLogger(__name__)

HOST_ATTR = "server-host"
PORT_ATTR = "server-port"
PROTO_ATTR = "server-proto"
PREFIX_ATTR = "server-prefix"
REQ_ATTR = "server-req"

TRANSPORT_PORT_SENTINEL = "-1"
"""Forwarded port value requesting the port the request was received on"""

_DEFAULT_PORTS = {"http": "80", "https": "443"}


def _header_value(headers: Headers, header_name: str | None, default: str) -> str:
    if not header_name:
        return default
    return headers.get(header_name, default)


def build_base_uri(proto: str, host: str, port: str, prefix: str) -> str:
    """`<proto>://<host>[:<port>][<prefix>]`, omitting the port if it is the default one of proto"""
    port_part = "" if _DEFAULT_PORTS.get(proto.lower()) == port else f":{port}"
    return f"{proto}://{host}{port_part}{prefix}"


class ForwardedHeadersMiddleware:
    """
    ASGI middleware resolving host, port, protocol and path prefix of the public request url.

    Each part is taken from the configured forwarded header if present, from the server
    configuration otherwise. Missing headers or a missing configuration never fail the request.

    Has to be added last to the application, so it is the outermost middleware.
    """

    def __init__(self, app: ASGIApp, config: ForwardedHeadersConfig | None, server_config: ServerConfig) -> None:
        self.app = app
        self.config = config
        self.default_host = server_config.host or "localhost"
        self.default_port = str(server_config.port)
        self.default_proto = "https" if server_config.ssl_enabled else "http"
        self.default_prefix = ""
        if config is None:
            _logger.info("No forwarded headers configured, links will use the server address.")

    def resolve(self, scope: Scope) -> dict:
        """Resolves the public url parts of the request described by scope"""
        headers = Headers(scope=scope)
        if self.config is None:
            host, port, proto, prefix = self.default_host, self.default_port, self.default_proto, self.default_prefix
        else:
            host = _header_value(headers, self.config.host_header, self.default_host)
            port = _header_value(headers, self.config.port_header, self.default_port)
            proto = _header_value(headers, self.config.protocol_header, self.default_proto)
            prefix = _header_value(headers, self.config.prefix_header, self.default_prefix)

        if port == TRANSPORT_PORT_SENTINEL:
            server = scope.get("server")
            port = str(server[1]) if server and server[1] is not None else self.default_port

        return {
            HOST_ATTR: host,
            PORT_ATTR: port,
            PROTO_ATTR: proto,
            PREFIX_ATTR: prefix,
            REQ_ATTR: URL(build_base_uri(proto, host, port, prefix)),
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        scope.setdefault("state", {}).update(self.resolve(scope))
        await self.app(scope, receive, send)
