"""Small string helpers."""

from __future__ import annotations

import secrets
import string

_ALPHANUMERIC = string.ascii_letters + string.digits


def gen_random_string(length: int) -> str:
    """Random alphanumeric string of ``length`` characters."""
    if length < 0:
        raise ValueError("length must be >= 0")
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))
