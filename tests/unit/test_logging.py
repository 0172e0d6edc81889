"""
Unit tests for log masking and JSON formatting.
"""

import json
import logging

import pytest

from socialchain.core.logging import JSONFormatter, SensitiveDataFilter


def make_record(msg, args=(), **extra) -> logging.LogRecord:
    record = logging.LogRecord("socialchain.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestSensitiveDataFilter:
    def test_masks_key_value_pairs_in_message(self):
        record = make_record("login signature=0xdeadbeef nonce: abc123 chain=ethereum")

        SensitiveDataFilter().filter(record)

        assert "0xdeadbeef" not in record.msg
        assert "abc123" not in record.msg
        assert "chain=ethereum" in record.msg

    def test_masks_extra_attributes(self):
        record = make_record("issued", token="eyJhbGciOi", wallet="0xabcd...1234")

        SensitiveDataFilter().filter(record)

        assert record.token == "***MASKED***"
        assert record.wallet == "0xabcd...1234"

    def test_masks_nested_dict_args(self):
        record = make_record("payload %(body)s", ({"body": {"signature": "0x01", "chain": "solana"}},))

        SensitiveDataFilter().filter(record)

        assert record.args["body"] == {"signature": "***MASKED***", "chain": "solana"}

    def test_never_drops_records(self):
        assert SensitiveDataFilter().filter(make_record("plain message")) is True


@pytest.mark.unit
class TestJSONFormatter:
    def test_includes_extra_as_context(self):
        record = make_record("Wallet login succeeded", wallet_chain="ethereum", is_new_user=True)

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Wallet login succeeded"
        assert data["level"] == "INFO"
        assert data["logger"] == "socialchain.test"
        assert data["context"] == {"wallet_chain": "ethereum", "is_new_user": True}

    def test_no_context_without_extra(self):
        data = json.loads(JSONFormatter().format(make_record("hello")))

        assert "context" not in data
