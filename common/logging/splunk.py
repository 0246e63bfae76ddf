# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Splunk compatible json log output.

Every record is rendered as a single json line. Messages logged as
`SplunkExtendedLogEntry` contribute their fields as additional top level keys.
"""

import json
import logging
import datetime
from enum import Enum

from pydantic import BaseModel


class SplunkExtendedLogEntry(BaseModel):
    """Log message carrying additional structured fields.

    The string representation is the message followed by all set fields as `key=value`.
    """

    message: str

    def extended_fields(self) -> dict[str, str]:
        fields = {}
        for name, value in iter(self):
            if name == "message" or value is None:
                continue
            fields[name] = value.value if isinstance(value, Enum) else str(value)
        return fields

    def __str__(self) -> str:
        return " ".join([self.message] + [f"{k}={v}" for k, v in self.extended_fields().items()])


class SplunkFormatter(logging.Formatter):
    """Formats log records as json with the keys expected by the splunk index."""

    def __init__(self, defaults: dict[str, str] | None = None) -> None:
        super().__init__()
        self._defaults = defaults or {}

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        # eg. 2024-02-07T14:38:19.565+01:00
        created = datetime.datetime.fromtimestamp(record.created).astimezone()
        return created.isoformat(timespec="milliseconds")

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "@timestamp": self.formatTime(record),
            "level": record.levelname,
            "app": getattr(record, "app_name", self._defaults.get("app_name")),
            "hash": getattr(record, "correlation_id", None) or self._defaults.get("correlation_id"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if isinstance(record.msg, SplunkExtendedLogEntry):
            data.update(record.msg.extended_fields())
        if record.exc_info:
            data["stack_trace"] = self.formatException(record.exc_info)
        return json.dumps(data)
