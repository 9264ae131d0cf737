from __future__ import annotations

import os as _os
from typing import Optional

_TRUTHY = ("1", "true", "yes", "on")

PARSE_TRACE_ENV = "AMBIENTS_PARSE_TRACE"


def envvar_value_by_name(name: str) -> Optional[str]:
    return _os.environ.get(name)


def envvar_enabled(name: str) -> bool:
    """True when the variable is set to one of the accepted truthy spellings."""
    value = envvar_value_by_name(name)
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def parse_trace_enabled() -> bool:
    return envvar_enabled(PARSE_TRACE_ENV)
