"""Tests de l'encodeur SubjectAltName"""

import ipaddress

import pytest

from espki import config
from espki.errors import EncodingError
from espki.san import decode_sans, marshal_sans

MARKER = bytes.fromhex("88052a03040505")


class TestMarshalSans:

    def test_empty_input_is_marker_only(self):
        assert marshal_sans() == bytes.fromhex("3007") + MARKER

    def test_single_dns_name_exact_bytes(self):
        assert marshal_sans(["ab"]) == bytes.fromhex("300b" "82026162") + MARKER

    def test_always_ends_with_vendor_marker(self):
        samples = [
            ([], [], []),
            (["node.example", "localhost"], [], []),
            ([], ["admin@example.com"], []),
            ([], [], ["10.0.0.1", "2001:db8::1"]),
            (["a.example"], ["b@example.com"], [ipaddress.ip_address("192.168.1.1")]),
        ]
        for dns, emails, ips in samples:
            assert marshal_sans(dns, emails, ips).endswith(config.SAN_VENDOR_MARKER)

    def test_deterministic(self):
        args = (["node.example", "localhost"], ["ops@example.com"], ["10.0.0.1", "::1"])
        assert marshal_sans(*args) == marshal_sans(*args)

    def test_distinct_inputs_give_distinct_output(self):
        assert marshal_sans(["a.example"]) != marshal_sans(["b.example"])
        assert marshal_sans([], [], ["10.0.0.1"]) != marshal_sans([], [], ["10.0.0.2"])
        assert marshal_sans(["a.example", "b.example"]) != marshal_sans(["b.example", "a.example"])

    def test_entry_order_is_dns_email_ip_marker(self):
        der = marshal_sans(["node.example"], ["ops@example.com"], ["10.0.0.1"])
        assert decode_sans(der) == [
            ("dNSName", "node.example"),
            ("rfc822Name", "ops@example.com"),
            ("iPAddress", ipaddress.ip_address("10.0.0.1")),
            ("registeredID", "1.2.3.4.5.5"),
        ]


class TestIPAddresses:

    def test_ipv4_encoded_in_four_bytes(self):
        der = marshal_sans([], [], ["10.0.0.1"])
        assert bytes.fromhex("87040a000001") in der

    def test_ipv6_encoded_in_sixteen_bytes(self):
        ip = ipaddress.ip_address("2001:db8::1")
        der = marshal_sans([], [], [ip])
        assert bytes([0x87, 0x10]) + ip.packed in der

    def test_ipv4_mapped_ipv6_encoded_in_four_bytes(self):
        der = marshal_sans([], [], ["::ffff:10.0.0.1"])
        assert bytes.fromhex("87040a000001") in der

    def test_raw_bytes_accepted(self):
        der = marshal_sans([], [], [bytes([127, 0, 0, 1])])
        assert decode_sans(der)[0] == ("iPAddress", ipaddress.ip_address("127.0.0.1"))

    def test_malformed_ip_length_fails(self):
        with pytest.raises(EncodingError):
            marshal_sans([], [], [b"\x01\x02\x03\x04\x05"])

    def test_unparsable_ip_string_fails(self):
        with pytest.raises(EncodingError) as excinfo:
            marshal_sans([], [], ["not-an-ip"])
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_unsupported_ip_type_fails(self):
        with pytest.raises(EncodingError):
            marshal_sans([], [], [3.14])


class TestDecodeSans:

    def test_trailing_bytes_rejected(self):
        with pytest.raises(EncodingError):
            decode_sans(marshal_sans(["a.example"]) + b"\x00")

    def test_garbage_rejected(self):
        with pytest.raises(EncodingError):
            decode_sans(b"\x04\x02ab")
