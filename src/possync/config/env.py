"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation

from .errors import ConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return the stripped value of ``name``; unset and blank both mean ``None``."""

    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def optional_env_decimal(name: str) -> Decimal | None:
    value = optional_env_var(name)
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} is not a decimal number: {value!r}") from exc
