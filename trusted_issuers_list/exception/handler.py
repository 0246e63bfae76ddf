# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import logging

from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from .errors import TrustedListError, InvalidArgumentError

_logger = logging.getLogger(__name__)


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configure exception handlers on the FastAPI app instance.
    Changed 422 Unprocessable Entity to 400 Bad Request

    Args:
        app (FastAPI): the instance to configure the handlers for.
    """

    @app.exception_handler(TrustedListError)
    async def trusted_list_exception_handler(request: Request, exc: TrustedListError):
        _logger.info(f"Trusted list error {exc.status_code=} {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            headers=exc.headers,
            content=exc.content(),
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_request_exception_handler(request: Request, exc: RequestValidationError):
        """
        Recasts validation errors of path, query & body to invalid arguments
        """
        wrapper_exception = InvalidArgumentError(f"Invalid request. Details: {exc.errors()}")
        return await trusted_list_exception_handler(request, wrapper_exception)
