"""
Configuration objects and helpers for the wxpay client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment
from .errors import ConfigError

__all__ = [
    "ENDPOINT_PROFILES",
    "PayConfig",
    "PayParameters",
    "load_pay_config",
]

ENDPOINT_PROFILES: Dict[str, Dict[str, str]] = {
    "production": {
        "unified_order_url": "https://api.mch.weixin.qq.com/pay/unifiedorder",
        "order_query_url": "https://api.mch.weixin.qq.com/pay/orderquery",
        "session_url": "https://api.weixin.qq.com/sns/jscode2session",
    },
    "sandbox": {
        "unified_order_url": "https://api.mch.weixin.qq.com/sandboxnew/pay/unifiedorder",
        "order_query_url": "https://api.mch.weixin.qq.com/sandboxnew/pay/orderquery",
        "session_url": "https://api.weixin.qq.com/sns/jscode2session",
    },
}

_PARAMETER_TO_ENV_KEY = {
    "app_id": "WXPAY_APP_ID",
    "mch_id": "WXPAY_MCH_ID",
    "api_key": "WXPAY_API_KEY",
    "mini_app_id": "WXPAY_MINI_APP_ID",
    "mini_app_secret": "WXPAY_MINI_APP_SECRET",
    "environment": "WXPAY_ENVIRONMENT",
    "unified_order_url": "WXPAY_UNIFIED_ORDER_URL",
    "order_query_url": "WXPAY_ORDER_QUERY_URL",
    "session_url": "WXPAY_SESSION_URL",
    "timeout_seconds": "WXPAY_TIMEOUT_SECONDS",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class PayParameters:
    """
    Explicit parameter bundle for constructing :class:`PayConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_pay_config`.
    """

    app_id: Optional[str] = None
    mch_id: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)
    mini_app_id: Optional[str] = None
    mini_app_secret: Optional[str] = field(default=None, repr=False)
    environment: Optional[str] = None
    unified_order_url: Optional[str] = None
    order_query_url: Optional[str] = None
    session_url: Optional[str] = None
    timeout_seconds: Optional[float | int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[PayParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown pay parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _required(values: Mapping[str, str], env_key: str) -> str:
    value = (values.get(env_key) or "").strip()
    if not value:
        raise ConfigError(f"{env_key} must be provided")
    return value


def _normalize_url(raw_url: str, env_key: str) -> str:
    url = raw_url.strip()
    if not url.startswith(("https://", "http://")):
        raise ConfigError(f"{env_key} must be an http(s) URL, got '{raw_url}'")
    return url


@dataclass(frozen=True)
class PayConfig:
    app_id: str
    mch_id: str
    api_key: str = field(repr=False)
    unified_order_url: str
    order_query_url: str
    session_url: str
    mini_app_id: str = ""
    mini_app_secret: str = field(default="", repr=False)
    environment: str = "production"
    timeout_seconds: float = 30.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "PayConfig":
        app_id = _required(values, "WXPAY_APP_ID")
        mch_id = _required(values, "WXPAY_MCH_ID")
        api_key = _required(values, "WXPAY_API_KEY")

        environment = values.get("WXPAY_ENVIRONMENT", "production").strip().lower()
        try:
            profile = ENDPOINT_PROFILES[environment]
        except KeyError as exc:
            raise ConfigError(
                f"WXPAY_ENVIRONMENT must be one of {sorted(ENDPOINT_PROFILES)}, "
                f"got '{environment}'"
            ) from exc

        urls = {
            name: _normalize_url(
                values.get(_PARAMETER_TO_ENV_KEY[name]) or default,
                _PARAMETER_TO_ENV_KEY[name],
            )
            for name, default in profile.items()
        }

        timeout_raw = values.get("WXPAY_TIMEOUT_SECONDS", "30")
        try:
            timeout_seconds = float(timeout_raw)
        except ValueError as exc:
            raise ConfigError(
                f"WXPAY_TIMEOUT_SECONDS must be a number, got '{timeout_raw}'"
            ) from exc
        if timeout_seconds <= 0:
            raise ConfigError("WXPAY_TIMEOUT_SECONDS must be greater than zero")

        return cls(
            app_id=app_id,
            mch_id=mch_id,
            api_key=api_key,
            mini_app_id=values.get("WXPAY_MINI_APP_ID") or app_id,
            mini_app_secret=values.get("WXPAY_MINI_APP_SECRET", ""),
            environment=environment,
            timeout_seconds=timeout_seconds,
            **urls,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[PayParameters] = None,
        app_id: Optional[str] = None,
        mch_id: Optional[str] = None,
        api_key: Optional[str] = None,
        mini_app_id: Optional[str] = None,
        mini_app_secret: Optional[str] = None,
        environment: Optional[str] = None,
        unified_order_url: Optional[str] = None,
        order_query_url: Optional[str] = None,
        session_url: Optional[str] = None,
        timeout_seconds: Optional[float | int | str] = None,
    ) -> "PayConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "app_id": app_id,
                "mch_id": mch_id,
                "api_key": api_key,
                "mini_app_id": mini_app_id,
                "mini_app_secret": mini_app_secret,
                "environment": environment,
                "unified_order_url": unified_order_url,
                "order_query_url": order_query_url,
                "session_url": session_url,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        resolved = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(resolved.pay_settings())


def load_pay_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[PayParameters] = None,
    **kwargs: Any,
) -> PayConfig:
    """
    Convenience wrapper that mirrors :meth:`PayConfig.from_env`.

    The configuration can be provided through environment variables, a
    ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return PayConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        **kwargs,
    )
