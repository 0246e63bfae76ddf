# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Configuration definition and collector of default values."""

import os
from typing import Annotated

from fastapi import Depends

import common.config as conf


class TrustedIssuersListConfig(conf.Config):
    def __init__(self):
        super().__init__()
        self.app_name = os.getenv("APP_NAME", "Trusted Issuers List")

        self.basepath = os.getenv("GENERAL_BASEPATH", "/")
        '''Path all api routes are served under. Default: "/".'''

    @property
    def route_prefix(self) -> str:
        """Basepath in the form expected by APIRouter prefixes, empty for the root path"""
        stripped = self.basepath.strip("/")
        return f"/{stripped}" if stripped else ""


inject = Annotated[TrustedIssuersListConfig, Depends(TrustedIssuersListConfig)]
