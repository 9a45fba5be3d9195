"""Environment-driven configuration for the Barangay Records API.

``load_config`` turns environment variables into Flask config keys.
The application factory applies the result first and any
``test_config`` overrides afterwards.
"""
from __future__ import annotations

import os
import re
from datetime import timedelta
from typing import Any, Mapping, Optional

DEFAULT_DATABASE_URL = "sqlite:///barangay.db"
DEFAULT_JWT_SECRET = "please-change-this-secret-key-for-production-use"
DEFAULT_JWT_EXPIRATION = "24h"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_expiration(value: Optional[str], default: str = DEFAULT_JWT_EXPIRATION) -> timedelta:
    """Parse a token lifetime such as ``"24h"``, ``"30m"`` or ``"3600"``.

    A bare number is read as seconds. Unrecognised values fall back to
    ``default`` so a typo in the environment never disables expiry.
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        match = _DURATION_RE.match(default)
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit.lower()]: int(amount)})


def _coerce_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def load_config(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Build the Flask configuration mapping from ``environ``.

    Parameters
    ----------
    environ: Mapping[str, str] | None
        Source of settings. Defaults to ``os.environ``.
    """
    env = os.environ if environ is None else environ
    return {
        "SQLALCHEMY_DATABASE_URI": env.get("DATABASE_URL", DEFAULT_DATABASE_URL),
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "JWT_SECRET_KEY": env.get("JWT_SECRET_KEY", DEFAULT_JWT_SECRET),
        "JWT_ACCESS_TOKEN_EXPIRES": parse_expiration(env.get("JWT_EXPIRATION")),
        "LOG_LEVEL": env.get("BARANGAY_LOG_LEVEL", "INFO").upper(),
        "LOG_JSON": _coerce_bool(env.get("BARANGAY_LOG_JSON"), False),
    }
