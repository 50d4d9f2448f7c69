"""Unit tests for EventDecoder - raw record to Event or DecodeError."""

from __future__ import annotations

import pytest

from system.revenue_aggregator.decoder import BIGINT_MAX, BIGINT_MIN, EventDecoder
from system.revenue_aggregator.domain.errors import DecodeError
from system.revenue_aggregator.domain.models import Event

pytestmark = pytest.mark.unit


@pytest.fixture
def decoder() -> EventDecoder:
    return EventDecoder()


class TestDecodeValidRecords:
    """Well-formed records become Events."""

    def test_decodes_event(self, decoder):
        event = decoder.decode('{"userId":"u1","name":"add_revenue","value":10}')

        assert event == Event(user_id="u1", name="add_revenue", value=10)

    def test_strips_surrounding_whitespace(self, decoder):
        event = decoder.decode('  {"userId":"u1","name":"subtract_revenue","value":3}\r\n')

        assert event == Event(user_id="u1", name="subtract_revenue", value=3)

    def test_accepts_bytes(self, decoder):
        event = decoder.decode(b'{"userId":"u2","name":"add_revenue","value":70}')

        assert event == Event(user_id="u2", name="add_revenue", value=70)

    def test_ignores_extra_fields(self, decoder):
        event = decoder.decode('{"userId":"u1","name":"add_revenue","value":1,"ts":123}')

        assert isinstance(event, Event)

    def test_keeps_unknown_kinds(self, decoder):
        """Kind validation belongs to the registry, not the decoder."""
        event = decoder.decode('{"userId":"u1","name":"refund","value":4}')

        assert event == Event(user_id="u1", name="refund", value=4)

    @pytest.mark.parametrize("value", [BIGINT_MIN, BIGINT_MAX])
    def test_accepts_bigint_bounds(self, decoder, value):
        result = decoder.decode(f'{{"userId":"u1","name":"add_revenue","value":{value}}}')

        assert result == Event(user_id="u1", name="add_revenue", value=value)

    def test_negative_values_are_integers_too(self, decoder):
        event = decoder.decode('{"userId":"u1","name":"add_revenue","value":-5}')

        assert event.value == -5

    def test_event_is_immutable(self, decoder):
        event = decoder.decode('{"userId":"u1","name":"add_revenue","value":1}')

        with pytest.raises(AttributeError):
            event.value = 2


class TestDecodeFailures:
    """Malformed records come back as DecodeError, never raised."""

    @pytest.mark.parametrize(
        "raw",
        [
            "NOT JSON",
            "",
            "   ",
            "[1, 2, 3]",
            "42",
            '{"name":"add_revenue","value":1}',
            '{"userId":"u1","value":1}',
            '{"userId":"u1","name":"add_revenue"}',
            '{"userId":"","name":"add_revenue","value":1}',
            '{"userId":"  ","name":"add_revenue","value":1}',
            '{"userId":"u1","name":"","value":1}',
            '{"userId":7,"name":"add_revenue","value":1}',
            '{"userId":"u1","name":"add_revenue","value":"10"}',
            '{"userId":"u1","name":"add_revenue","value":10.5}',
            '{"userId":"u1","name":"add_revenue","value":true}',
            '{"userId":"u1","name":"add_revenue","value":null}',
            '{"userId":"u1","name":"add_revenue","value":9223372036854775808}',
            '{"userId":"u1","name":"add_revenue","value":-9223372036854775809}',
        ],
    )
    def test_malformed_records(self, decoder, raw):
        result = decoder.decode(raw)

        assert isinstance(result, DecodeError)

    def test_error_carries_offending_text(self, decoder):
        result = decoder.decode("NOT JSON")

        assert result.raw == "NOT JSON"
        assert result.reason

    def test_error_names_the_missing_field(self, decoder):
        result = decoder.decode('{"userId":"u1","name":"add_revenue"}')

        assert result.reason.startswith("value")

    def test_invalid_utf8_bytes(self, decoder):
        result = decoder.decode(b'{"userId":"\xff","name":"add_revenue","value":1}')

        assert isinstance(result, DecodeError)

    def test_preview_is_truncated(self, decoder):
        raw = "x" * 500

        result = decoder.decode(raw)

        assert result.raw == raw
        assert len(result.preview) == 203
        assert result.preview.endswith("...")
