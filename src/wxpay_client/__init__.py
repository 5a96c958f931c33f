"""
Public facade for the wxpay client package.

Integrators can ``from wxpay_client import ...`` the signer, codec, client and
configuration helpers without navigating the package.
"""

from .api import create_pay_client
from .core import (
    ConfigError,
    DateFormatError,
    InputValidationError,
    ParseError,
    PayClient,
    PayConfig,
    PayEnvironment,
    PayParameters,
    PayResult,
    TransportError,
    WxPayError,
    build_environment,
    canonicalize,
    date_to_str,
    decode_xml,
    encode_xml,
    fill_zero,
    load_env_file,
    load_pay_config,
    random_str,
    sign,
    str_to_date,
    verify_signature,
)

__version__ = "0.1.0"

__all__ = (
    "ConfigError",
    "DateFormatError",
    "InputValidationError",
    "ParseError",
    "PayClient",
    "PayConfig",
    "PayEnvironment",
    "PayParameters",
    "PayResult",
    "TransportError",
    "WxPayError",
    "build_environment",
    "canonicalize",
    "create_pay_client",
    "date_to_str",
    "decode_xml",
    "encode_xml",
    "fill_zero",
    "load_env_file",
    "load_pay_config",
    "random_str",
    "sign",
    "str_to_date",
    "verify_signature",
)
