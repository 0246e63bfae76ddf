# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Provides general Environment Variables for FastAPI dependcy injection
"""

import os
from typing import Annotated

from fastapi import Depends

from common.parsing import interpret_as_bool


class Config:
    def __init__(self):
        self.enable_debug_mode: bool = interpret_as_bool(os.environ.get("ENABLE_DEBUG_MODE", "False"))
        '''General debug mode configuration enabler.'''

        self.external_url = os.getenv("EXTERNAL_URL")
        self.app_name = os.getenv("APP_NAME", "anonymous")
        '''
        Human readable application name used for logging
        '''
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.enable_documentation_endpoints: bool = interpret_as_bool(os.environ.get("ENABLE_DOCUMENTATION_ENDPOINTS", self.enable_debug_mode))
        '''
        Enable /doc and /redoc endpoint.
        Default is False, but True in DEBUG_MODE.
        '''
        self.enable_cors: bool = interpret_as_bool(os.environ.get("ENABLE_CORS", self.enable_debug_mode))
        '''
        Enable CORs for incomming openapi requests
        Default is False, but True in DEBUG_MODE.
        '''
        self.additional_allowed_origins = os.environ.get('ADDITIONAL_ALLOWED_ORIGINS', '')
        '''
        If CORs is enabled additional allowed origins e.g confluence can be defined as comma separated list of url (e.g. URL,URL,URL)
        '''
        self.enable_splunk_log: bool = interpret_as_bool(os.environ.get("ENABLE_SPLUNK_LOG", not self.enable_debug_mode))
        '''
        Enable Splunk compatible log format.
        Default is True, but False in DEBUG_MODE.
        '''


inject = Annotated[Config, Depends(Config)]


class ServerConfig:
    """Address the http server is bound to. Only used as fallback for link generation."""

    def __init__(self):
        self.host = os.getenv("SERVER_HOST") or "localhost"
        self.port = int(os.getenv("SERVER_PORT", "8080"))
        self.ssl_enabled: bool = interpret_as_bool(os.environ.get("SERVER_SSL_ENABLED", "False"))
        '''Defaults links to https if the server itself terminates TLS'''


class DBConfig:
    def __init__(self):
        self.SQLALCHEMY_DATABASE_URL = os.getenv("DB_CONNECTION", "postgresql://til:supersecret@db_til/til")
        self.SQLALCHEMY_DATABASE_SCHEMA = os.getenv("DB_SCHEMA", "trusted_list")


inject_db_config = Annotated[DBConfig, Depends(DBConfig)]


class ForwardedHeadersConfig:
    """
    Names of the inbound headers a reverse proxy uses to announce the public request url.
    An empty name disables the respective header.
    """

    def __init__(self):
        self.protocol_header = os.getenv("FORWARD_HEADERS_PROTOCOL_HEADER", "X-Forwarded-Proto")
        self.port_header = os.getenv("FORWARD_HEADERS_PORT_HEADER", "X-Forwarded-Port")
        '''The port "-1" is replaced with the port the request was actually received on'''
        self.host_header = os.getenv("FORWARD_HEADERS_HOST_HEADER", "X-Forwarded-Host")
        self.prefix_header = os.getenv("FORWARD_HEADERS_PREFIX_HEADER", "X-Forwarded-Prefix")

    @staticmethod
    def from_env() -> "ForwardedHeadersConfig | None":
        """None if forwarded headers are disabled through ENABLE_FORWARD_HEADERS"""
        if not interpret_as_bool(os.environ.get("ENABLE_FORWARD_HEADERS", "True")):
            return None
        return ForwardedHeadersConfig()
