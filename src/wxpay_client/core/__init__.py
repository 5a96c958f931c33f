"""
Core primitives for signing, encoding and sending pay API requests.
"""

from .client import (
    XML_HEADERS,
    PayClient,
    PayResult,
    get_json,
    post_xml,
)
from .codec import ROOT_TAG, decode_xml, encode_xml, response_fields
from .config import (
    ENDPOINT_PROFILES,
    PayConfig,
    PayParameters,
    load_pay_config,
)
from .environment import PayEnvironment, build_environment, load_env_file
from .errors import (
    ConfigError,
    DateFormatError,
    InputValidationError,
    ParseError,
    TransportError,
    WxPayError,
)
from .signing import (
    canonicalize,
    filter_params,
    md5_hex,
    random_str,
    sign,
    verify_signature,
)
from .utils import PROVIDER_TZ, date_to_str, fill_zero, str_to_date

__all__ = [
    "ConfigError",
    "DateFormatError",
    "ENDPOINT_PROFILES",
    "InputValidationError",
    "PROVIDER_TZ",
    "ParseError",
    "PayClient",
    "PayConfig",
    "PayEnvironment",
    "PayParameters",
    "PayResult",
    "ROOT_TAG",
    "TransportError",
    "WxPayError",
    "XML_HEADERS",
    "build_environment",
    "canonicalize",
    "date_to_str",
    "decode_xml",
    "encode_xml",
    "fill_zero",
    "filter_params",
    "get_json",
    "load_env_file",
    "load_pay_config",
    "md5_hex",
    "post_xml",
    "random_str",
    "response_fields",
    "sign",
    "str_to_date",
    "verify_signature",
]
