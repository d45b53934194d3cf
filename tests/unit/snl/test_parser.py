"""Unit tests for SNL response decoding."""

from snl_timeline.snl.parser import (
    decode_response,
    parse_items,
    parse_keys,
    parse_record,
    parse_records,
)


class TestDecodeResponse:
    """Tests for decode_response."""

    def test_json_text_is_decoded(self) -> None:
        """Test that JSON text becomes Python data."""
        assert decode_response('{"k": {"a": 1}}') == {"k": {"a": 1}}

    def test_bytes_are_decoded(self) -> None:
        """Test that JSON bytes are decoded too."""
        assert decode_response(b'["a", "b"]') == ["a", "b"]

    def test_invalid_json_is_no_result(self) -> None:
        """Test that unparseable text is treated as no results."""
        assert decode_response("not json {") is None

    def test_other_values_pass_through(self) -> None:
        """Test that already-decoded values are returned unchanged."""
        data = {"k": {"a": 1}}
        assert decode_response(data) is data


class TestParseItems:
    """Tests for parse_items."""

    def test_pairs_in_response_order(self) -> None:
        """Test that key/record pairs keep the response order."""
        raw = {"b": {"x": 1}, "a": {"x": 2}}

        assert parse_items(raw) == [("b", {"x": 1}), ("a", {"x": 2})]

    def test_non_object_payloads_skipped(self) -> None:
        """Test that scalar and list payloads are ignored."""
        raw = {"a": {"x": 1}, "b": "text", "c": [1, 2], "d": None}

        assert parse_items(raw) == [("a", {"x": 1})]

    def test_empty_cases(self) -> None:
        """Test that absent or non-object responses yield no items."""
        for raw in (None, "", {}, [], 42, "null", "[]"):
            assert parse_items(raw) == []


class TestParseRecord:
    """Tests for parse_record and parse_records."""

    def test_first_record_returned(self) -> None:
        """Test that parse_record returns the first record."""
        raw = {"k1": {"id": "e1"}, "k2": {"id": "e2"}}

        assert parse_record(raw) == {"id": "e1"}

    def test_key_attached_as_id_when_missing(self) -> None:
        """Test that the storage key fills in a missing id."""
        assert parse_record({"k1": {"action": "login"}}) == {
            "action": "login",
            "id": "k1",
        }

    def test_existing_id_kept(self) -> None:
        """Test that a record's own id wins over its key."""
        assert parse_record({"k1": {"id": "e1"}})["id"] == "e1"

    def test_no_record(self) -> None:
        """Test that an empty response yields None."""
        assert parse_record(None) is None
        assert parse_record({}) is None

    def test_records_do_not_alias_response(self) -> None:
        """Test that returned records are copies."""
        raw = {"k1": {"id": "e1"}}

        records = parse_records(raw)
        records[0]["id"] = "changed"

        assert raw["k1"]["id"] == "e1"

    def test_parse_records_applies_id_rule(self) -> None:
        """Test that every record gets an id."""
        raw = '{"k1": {"id": "e1"}, "k2": {"action": "x"}}'

        assert [r["id"] for r in parse_records(raw)] == ["e1", "k2"]


class TestParseKeys:
    """Tests for parse_keys."""

    def test_mapping_keys(self) -> None:
        """Test that mapping responses yield their keys."""
        assert parse_keys({"2024-03": {}, "2024-02": {}}) == ["2024-03", "2024-02"]

    def test_list_items(self) -> None:
        """Test that list responses yield their string items."""
        assert parse_keys(["2024-03", 7, "entries"]) == ["2024-03", "entries"]

    def test_empty(self) -> None:
        """Test that absent responses yield no keys."""
        assert parse_keys(None) == []
        assert parse_keys("garbage") == []
