"""
Canonical parameter signing for the provider's v2 API.

The signature is ``MD5(stringA + "&key=" + secret).upper()`` where ``stringA``
is the ``key=value`` list of non-empty parameters sorted by parameter name.
MD5 is fixed by the protocol and cannot be swapped for a stronger digest.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import time
from typing import Any, Dict, Mapping

from .errors import InputValidationError
from .utils import to_text

__all__ = [
    "canonicalize",
    "filter_params",
    "md5_hex",
    "random_str",
    "sign",
    "verify_signature",
]

logger = logging.getLogger(__name__)

SIGN_FIELD = "sign"


def filter_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """
    Drop empty values and the ``sign`` field, stringifying what is left.

    Raises :class:`InputValidationError` for anything that is not a flat
    mapping of string keys to scalar values.
    """
    if not isinstance(params, Mapping):
        logger.error(
            "Expected a mapping of parameters to sign, got %s", type(params).__name__
        )
        raise InputValidationError(
            f"parameters must be a mapping, got {type(params).__name__}"
        )

    filtered: Dict[str, str] = {}
    for key, value in params.items():
        if not isinstance(key, str):
            logger.error("Parameter names must be strings, got %r", key)
            raise InputValidationError(f"parameter name {key!r} is not a string")
        if isinstance(value, (Mapping, list, tuple, set)):
            logger.error("Parameter %s holds a nested value", key)
            raise InputValidationError(f"parameter {key!r} must be a scalar value")
        if value is None or value == "" or key == SIGN_FIELD:
            continue
        filtered[key] = to_text(value)
    return filtered


def canonicalize(params: Mapping[str, Any]) -> str:
    """Return ``stringA``: sorted ``key=value`` pairs joined by ``&``, unescaped."""
    filtered = filter_params(params)
    return "&".join(f"{key}={filtered[key]}" for key in sorted(filtered))


def md5_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def sign(params: Mapping[str, Any], secret_key: str) -> str:
    """
    Compute the uppercase MD5 signature of ``params`` with the merchant key.
    """
    if not secret_key:
        raise InputValidationError("secret key must not be empty")
    string_sign_temp = canonicalize(params) + "&key=" + secret_key
    return md5_hex(string_sign_temp).upper()


def verify_signature(params: Mapping[str, Any], secret_key: str) -> bool:
    """
    Check the ``sign`` field of a received mapping against ``secret_key``.
    """
    received = params.get(SIGN_FIELD) if isinstance(params, Mapping) else None
    if not received or not isinstance(received, str):
        logger.warning("Received payload carries no signature")
        return False
    try:
        expected = sign(params, secret_key)
    except InputValidationError as exc:
        logger.warning("Received payload cannot be verified: %s", exc)
        return False
    # Bytes, since the received value may hold non-ASCII text.
    return secrets.compare_digest(
        expected.encode("ascii"), received.upper().encode("utf-8")
    )


def random_str() -> str:
    """
    Return a 32 character token for ``nonce_str``.

    Only meant to make signatures unpredictable; it is not key material.
    """
    seed = f"{time.time_ns()}{secrets.token_hex(8)}"
    return md5_hex(seed)
