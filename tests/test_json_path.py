"""Tests for JSON path extraction."""

from __future__ import annotations

from dyadt.verify import PathStep, extract_json_path, json_values_equal, parse_json_path

DOCUMENT = {"a": {"b": [10, 20, 30]}, "items": [[1, 2], [3, 4]], "flag": None}


class TestParseJsonPath:
    """Tests for parse_json_path function."""

    def test_splits_fields_and_indices(self) -> None:
        assert parse_json_path(".a.b[1]") == (
            PathStep(field="a"),
            PathStep(field="b"),
            PathStep(index=1),
        )

    def test_supports_chained_indices(self) -> None:
        assert parse_json_path("items[1][0]") == (
            PathStep(field="items"),
            PathStep(index=1),
            PathStep(index=0),
        )

    def test_skips_empty_segments(self) -> None:
        assert parse_json_path("..a..b.") == (PathStep(field="a"), PathStep(field="b"))
        assert parse_json_path("") == ()

    def test_rejects_malformed_segments(self) -> None:
        assert parse_json_path("a[x]") is None
        assert parse_json_path("a[1") is None
        assert parse_json_path("a[-1]") is None
        assert parse_json_path("a[1]b") is None


class TestExtractJsonPath:
    """Tests for extract_json_path function."""

    def test_resolves_nested_index(self) -> None:
        assert extract_json_path(DOCUMENT, ".a.b[1]") == (True, 20)

    def test_path_without_leading_dot(self) -> None:
        assert extract_json_path(DOCUMENT, "a.b[2]") == (True, 30)

    def test_empty_path_returns_whole_document(self) -> None:
        assert extract_json_path(DOCUMENT, "") == (True, DOCUMENT)
        assert extract_json_path(DOCUMENT, ".") == (True, DOCUMENT)

    def test_root_index(self) -> None:
        assert extract_json_path([{"name": "x"}, {"name": "y"}], "[1].name") == (True, "y")

    def test_missing_field_does_not_resolve(self) -> None:
        assert extract_json_path(DOCUMENT, ".a.c") == (False, None)

    def test_out_of_range_index_does_not_resolve(self) -> None:
        assert extract_json_path(DOCUMENT, ".a.b[9]") == (False, None)

    def test_type_mismatch_does_not_resolve(self) -> None:
        assert extract_json_path(DOCUMENT, ".a[0]") == (False, None)
        assert extract_json_path(DOCUMENT, ".a.b.c") == (False, None)

    def test_null_value_resolves(self) -> None:
        assert extract_json_path(DOCUMENT, ".flag") == (True, None)

    def test_chained_indices(self) -> None:
        assert extract_json_path(DOCUMENT, "items[1][0]") == (True, 3)


class TestJsonValuesEqual:
    """Tests for json_values_equal function."""

    def test_booleans_never_equal_numbers(self) -> None:
        assert json_values_equal(True, 1) is False
        assert json_values_equal(0, False) is False
        assert json_values_equal(True, True) is True

    def test_int_and_float_compare_numerically(self) -> None:
        assert json_values_equal(1, 1.0) is True
        assert json_values_equal(1, 2) is False

    def test_nested_structures(self) -> None:
        assert json_values_equal({"a": [1, {"b": None}]}, {"a": [1, {"b": None}]}) is True
        assert json_values_equal({"a": [1, 2]}, {"a": [2, 1]}) is False
        assert json_values_equal({"a": 1}, {"a": 1, "b": 2}) is False

    def test_string_and_null(self) -> None:
        assert json_values_equal("x", "x") is True
        assert json_values_equal(None, "null") is False
