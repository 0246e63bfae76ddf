# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from common.logging import operations


class IssuerListOperationsLogEntry(operations.OperationsLogEntry):
    """Container for trusted issuers list operations specific logging."""

    class Operation(Enum):
        create = "CREATE"
        update = "UPDATE"
        delete = "DELETE"

    class Step(Enum):
        validation = "VALIDATION"
        persistence = "PERSISTENCE"
        credential_replacement = "CREDENTIAL_REPLACEMENT"

    operation: Operation
    step: Step

    credential_count: int | None = None
