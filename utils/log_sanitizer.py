"""Redact secrets from values before they reach the logs."""

import logging
import re
from typing import Any

SENSITIVE_KEYS = [
    "authorization",
    "developer-token",
    "login-customer-id",
    "access_token",
    "refresh_token",
    "id_token",
    "apikey",
    "api_key",
    "secret",
    "password",
    "token",
]

MAX_STRING = 800

_GOOGLE_ACCESS_TOKEN = re.compile(r"ya29\.[0-9a-zA-Z\-_]+")
_BEARER = re.compile(r"Bearer\s+[0-9a-zA-Z.\-_]+", re.IGNORECASE)
_HEADER_PAIR = re.compile(
    r"(developer-token|login-customer-id)\s*[:=]\s*[^\s,;]+", re.IGNORECASE
)


def mask(value: Any) -> str:
    """Keep a short prefix of long secrets so they can still be told apart."""
    text = value if isinstance(value, str) else str(value)
    if len(text) > 16:
        return text[:12] + "…***"
    return "***"


def _is_sensitive(key: Any) -> bool:
    k = str(key).lower()
    return any(s in k for s in SENSITIVE_KEYS)


def _mask_tokens(text: str) -> str:
    out = _GOOGLE_ACCESS_TOKEN.sub("ya29…***", text)
    out = _BEARER.sub("Bearer …***", out)
    return _HEADER_PAIR.sub(lambda m: f"{m.group(1)}: ***", out)


def _redact_string(text: str) -> str:
    out = _mask_tokens(text)
    if len(out) > MAX_STRING:
        out = out[:MAX_STRING] + " …[truncated]"
    return out


def sanitize(obj: Any, _seen=None) -> Any:
    """Return a deep copy of *obj* with secrets masked and long strings cut."""
    if obj is None:
        return None
    if isinstance(obj, str):
        return _redact_string(obj)
    if not isinstance(obj, (dict, list, tuple)):
        return obj

    seen = _seen if _seen is not None else set()
    if id(obj) in seen:
        return "[Circular]"
    seen.add(id(obj))

    if isinstance(obj, (list, tuple)):
        items = [sanitize(v, seen) for v in obj]
        if hasattr(obj, "_fields"):
            return type(obj)._make(items)
        return items if isinstance(obj, list) else tuple(items)

    out = {}
    for key, value in obj.items():
        if _is_sensitive(key) and value is not None:
            out[key] = mask(value)
        else:
            out[key] = sanitize(value, seen)
    return out


class SanitizingFilter(logging.Filter):
    """Logging filter that runs message and args through sanitize().

    Never blocks a record: if redaction fails the record is left untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = _mask_tokens(record.msg) if isinstance(record.msg, str) else record.msg
            args = record.args
            if isinstance(args, dict):
                args = sanitize(args)
            elif isinstance(args, tuple):
                args = tuple(sanitize(a) for a in args)
        except Exception:
            return True
        record.msg = msg
        record.args = args
        return True
