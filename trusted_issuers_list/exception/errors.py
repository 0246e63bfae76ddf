# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Errors of the trusted issuers list.
Each error knows its http status and which of its fields are rendered into the response body.
"""

from fastapi import HTTPException, status


class TrustedListError(HTTPException):
    """Base class for all errors returned by the trusted issuers list."""

    _fields: list[str] = ["detail"]
    """Fields to render into the response."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(status_code=status_code, detail=detail)

    def content(self) -> dict:
        return {field_name: getattr(self, field_name) for field_name in self._fields}


class InvalidArgumentError(TrustedListError):
    """The request contains a malformed did, an unsupported page parameter or an inconsistent body."""

    def __init__(self, detail: str) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class NotFoundError(TrustedListError):
    """No issuer is registered for the did."""

    def __init__(self, did: str) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, f"No issuer with did {did} found.")
        self.did = did


class ConflictError(TrustedListError):
    """An issuer with the did is already registered."""

    _fields = ["detail", "did"]

    def __init__(self, did: str, detail: str = "Issuer already exists.") -> None:
        super().__init__(status.HTTP_409_CONFLICT, detail)
        self.did = did
