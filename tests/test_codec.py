"""Tests for XML encoding and decoding."""

import pytest

from wxpay_client import InputValidationError, ParseError, decode_xml, encode_xml
from wxpay_client.core.codec import response_fields

from conftest import KNOWN_SIGN


class TestEncodeXml:
    """Tests for building request bodies."""

    def test_reference_document(self, known_params):
        """Test the document layout from the provider's guide."""
        known_params["sign"] = KNOWN_SIGN
        assert encode_xml(known_params) == (
            "<xml>"
            "<appid>wxd930ea5d5a258f4f</appid>"
            "<mch_id>10000100</mch_id>"
            "<device_info>1000</device_info>"
            "<body>test</body>"
            "<nonce_str>ibuaiVcKdpRxkhJA</nonce_str>"
            f"<sign>{KNOWN_SIGN}</sign>"
            "</xml>"
        )

    def test_accepts_pairs_in_given_order(self):
        """Test that an iterable of pairs keeps its order."""
        assert encode_xml([("b", "2"), ("a", "1")]) == "<xml><b>2</b><a>1</a></xml>"

    def test_escapes_special_characters(self):
        """Test that &, < and > produce well-formed XML."""
        body = encode_xml({"body": "a&b<c>d"})
        assert body == "<xml><body>a&amp;b&lt;c&gt;d</body></xml>"
        assert decode_xml(body) == {"xml": {"body": "a&b<c>d"}}

    def test_scalars(self):
        """Test that numbers, booleans and None are rendered as text."""
        assert encode_xml({"total_fee": 100, "flag": False, "attach": None}) == (
            "<xml><total_fee>100</total_fee><flag>false</flag><attach /></xml>"
        )

    def test_custom_root(self):
        """Test that the root tag can be changed."""
        assert encode_xml({"a": "1"}, root="request") == "<request><a>1</a></request>"


class TestDecodeXml:
    """Tests for parsing response bodies."""

    def test_cdata_values(self):
        """Test that CDATA sections decode to plain strings."""
        body = (
            "<xml><return_code><![CDATA[SUCCESS]]></return_code>"
            "<return_msg><![CDATA[OK]]></return_msg></xml>"
        )
        assert decode_xml(body) == {"xml": {"return_code": "SUCCESS", "return_msg": "OK"}}

    def test_bytes_input(self):
        """Test that UTF-8 bytes are accepted."""
        body = "<xml><body>会员充值</body></xml>".encode("utf-8")
        assert decode_xml(body) == {"xml": {"body": "会员充值"}}

    def test_xml_declaration(self):
        """Test that a declaration with encoding is accepted for bytes."""
        body = b'<?xml version="1.0" encoding="UTF-8"?><xml><a>1</a></xml>'
        assert decode_xml(body) == {"xml": {"a": "1"}}

    def test_empty_element(self):
        """Test that empty elements decode to an empty string."""
        assert decode_xml("<xml><attach/></xml>") == {"xml": {"attach": ""}}

    def test_repeated_tags_become_list(self):
        """Test that sibling tags with the same name become a list."""
        body = "<xml><coupon>1</coupon><coupon>2</coupon><coupon>3</coupon></xml>"
        assert decode_xml(body) == {"xml": {"coupon": ["1", "2", "3"]}}

    def test_nested_elements(self):
        """Test that elements with children become dicts."""
        body = "<xml><detail><goods_id>g1</goods_id><price>5</price></detail></xml>"
        assert decode_xml(body) == {"xml": {"detail": {"goods_id": "g1", "price": "5"}}}

    def test_round_trip(self, known_params):
        """Test that decode(encode(m)) gives back m with string values."""
        known_params["total_fee"] = 100
        decoded = decode_xml(encode_xml(known_params))
        assert decoded == {"xml": {key: str(value) for key, value in known_params.items()}}

    @pytest.mark.parametrize(
        "body",
        ["not xml", "<xml><a>1</xml>", "", '{"return_code": "SUCCESS"}', b"<html><body>"],
    )
    def test_malformed_input(self, body):
        """Test that garbage raises ParseError."""
        with pytest.raises(ParseError):
            decode_xml(body)


class TestResponseFields:
    """Tests for unwrapping the root element."""

    def test_returns_field_dict(self):
        """Test that the dict under the root is returned."""
        assert response_fields({"xml": {"a": "1"}}) == {"a": "1"}

    def test_text_root(self):
        """Test that a root without children yields an empty dict."""
        assert response_fields({"xml": "text"}) == {}

    def test_requires_single_root(self):
        """Test that a malformed response object is rejected."""
        with pytest.raises(ParseError):
            response_fields({"a": {}, "b": {}})


class TestEncodeXmlValidation:
    """Tests for rejecting input XML cannot carry."""

    @pytest.mark.parametrize("value", ["a\x01b", "\x00", "tab\x0bstop", "\ud800"])
    def test_control_characters_rejected(self, value):
        """Test that characters outside XML 1.0 raise instead of emitting bad XML."""
        with pytest.raises(InputValidationError):
            encode_xml({"body": value})

    @pytest.mark.parametrize("key", ["bad key", "1bad", "a:b", "", "a<b", 3])
    def test_invalid_element_names_rejected(self, key):
        """Test that names which are not XML element names are rejected."""
        with pytest.raises(InputValidationError):
            encode_xml({key: "1"})

    def test_invalid_root_rejected(self):
        """Test that the root tag is checked too."""
        with pytest.raises(InputValidationError):
            encode_xml({"a": "1"}, root="bad root")

    def test_allowed_names_and_whitespace(self):
        """Test that hyphens, dots, underscores and tab/newline text are accepted."""
        body = encode_xml({"goods-tag": "a\tb\nc", "x.y": "1", "_z": "2"})
        assert decode_xml(body) == {"xml": {"goods-tag": "a\tb\nc", "x.y": "1", "_z": "2"}}

    def test_integral_float_rendered_as_integer(self):
        """Test that 1.0 is written the same way it is signed."""
        assert encode_xml({"total_fee": 1.0}) == "<xml><total_fee>1</total_fee></xml>"
