"""
Public, high-level helpers for calling the pay API.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from .core.client import PayClient
from .core.config import PayConfig, PayParameters, load_pay_config

__all__ = [
    "create_pay_client",
]


def create_pay_client(
    *,
    config: Optional[PayConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[PayParameters] = None,
    **kwargs: Any,
) -> PayClient:
    """
    Construct a :class:`PayClient`.

    Callers can either supply a ready-made :class:`PayConfig` or let the
    helper assemble one from environment data and keyword arguments such as
    ``app_id`` or ``unified_order_url``.
    """
    if config is not None:
        extras = (overrides, base, parameters, *kwargs.values())
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built PayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_pay_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            **kwargs,
        )
    return PayClient(cfg, http_client=http_client)
