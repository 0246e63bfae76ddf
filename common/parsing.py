# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import base64
import hashlib
import json
import re


def object_to_base64(data: dict | str | list) -> str:
    """Convert the object to a (standard alphabet) base64 encoded JSON string."""
    return base64.b64encode(json.dumps(data).encode()).decode()


def object_from_base64(data: str) -> dict | str | list:
    """Load a JSON object from a base64 encoded string."""
    return json.loads(base64.b64decode(data))


def sha256_hex(data: str) -> str:
    """Hex encoded sha256 digest of the utf-8 bytes of data"""
    return hashlib.sha256(data.encode()).hexdigest()


def interpret_as_bool(boolify: str) -> bool:
    """
    Converts an inpput to an boolean according to commonly used patterns.
    """
    if isinstance(boolify, bool):
        return boolify
    if isinstance(boolify, int):
        return boolify > 0
    elif isinstance(boolify, str):
        return re.match(r"^(y|yes|1|true)$", boolify, re.IGNORECASE | re.MULTILINE) is not None
    raise Exception(f"Can't boolify a {boolify}.")
