"""
XML encoding and decoding for request and response bodies.

Requests are a flat list of child elements under a single ``<xml>`` root.
Responses are decoded into plain dicts with one normalization rule set:

* a leaf element becomes its text (``""`` when empty),
* an element with children becomes a dict keyed by child tag,
* a tag repeated among siblings becomes a list in document order.

The top-level dict always has a single key, the root tag.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from .errors import InputValidationError, ParseError
from .utils import to_text

__all__ = [
    "ROOT_TAG",
    "decode_xml",
    "encode_xml",
    "response_fields",
]

logger = logging.getLogger(__name__)

ROOT_TAG = "xml"

# Element names without namespace prefixes; ElementTree rejects unbound ones.
_NAME = re.compile(r"[^\W\d][\w.\-]*\Z")

# Outside the XML 1.0 Char production.
_ILLEGAL_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

Params = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _items(params: Params) -> Iterable[Tuple[str, Any]]:
    if isinstance(params, Mapping):
        return params.items()
    return params


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not _NAME.match(name):
        logger.error("Cannot use %r as an XML element name", name)
        raise InputValidationError(f"{name!r} is not a valid XML element name")
    return name


def _text(key: str, value: Any) -> str:
    text = to_text(value)
    if _ILLEGAL_CHARS.search(text):
        logger.error("Value of %s holds characters XML cannot carry", key)
        raise InputValidationError(f"value of {key!r} holds characters not allowed in XML")
    return text


def encode_xml(params: Params, root: str = ROOT_TAG) -> str:
    """
    Serialize ``params`` into ``<root><key>value</key>...</root>``.

    Order of the input is preserved. Text content is escaped by ElementTree,
    so values holding ``&``, ``<`` or ``>`` still give well-formed XML.
    Invalid element names and characters XML 1.0 forbids raise
    :class:`InputValidationError`.
    """
    element = ET.Element(_check_name(root))
    for key, value in _items(params):
        child = ET.SubElement(element, _check_name(key))
        child.text = _text(key, value)
    return ET.tostring(element, encoding="unicode")


def _element_to_value(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return element.text or ""

    result: Dict[str, Any] = {}
    for child in children:
        value = _element_to_value(child)
        if child.tag not in result:
            result[child.tag] = value
        elif isinstance(result[child.tag], list):
            result[child.tag].append(value)
        else:
            result[child.tag] = [result[child.tag], value]
    return result


def decode_xml(text: Union[str, bytes]) -> Dict[str, Any]:
    """
    Parse an XML document into ``{root_tag: value}``.

    Raises :class:`ParseError` when ``text`` is not well-formed XML.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        logger.warning("Failed to parse XML payload: %s", exc)
        raise ParseError(f"Response body is not well-formed XML: {exc}") from exc
    return {root.tag: _element_to_value(root)}


def response_fields(response: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return the field dict under the root tag of a decoded response.
    """
    if len(response) != 1:
        raise ParseError("Decoded response must have exactly one root element")
    (body,) = response.values()
    if isinstance(body, dict):
        return body
    return {}
