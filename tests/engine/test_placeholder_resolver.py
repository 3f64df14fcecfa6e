"""
Tests for the data store and placeholder resolution.
"""

import io
import json

import pytest

from textpdf.diagnostics import DiagnosticCode
from textpdf.engine import DataResolver, DataStore
from textpdf.exceptions import DataSourceError


class TestDataStore:
    """Test cases for DataStore loading."""

    def test_from_mapping(self, diagnostics):
        store = DataStore.from_mapping({"title": "Report", "data": {"name": "Alice"}}, diagnostics)

        assert store.title == "Report"
        assert store.has_data
        assert "name" in store
        assert store.get("name") == "Alice"
        assert not diagnostics

    def test_missing_data_section_is_a_diagnostic(self, diagnostics):
        store = DataStore.from_mapping({"title": "Report"}, diagnostics)

        assert not store.has_data
        assert diagnostics.codes() == [DiagnosticCode.MISSING_DATA_SECTION]

    def test_non_object_data_section_is_a_diagnostic(self, diagnostics):
        store = DataStore.from_mapping({"data": ["a", "b"]}, diagnostics)

        assert not store.has_data
        assert diagnostics.count(DiagnosticCode.MISSING_DATA_SECTION) == 1

    def test_non_string_title_is_ignored(self, diagnostics):
        store = DataStore.from_mapping({"title": 42, "data": {}}, diagnostics)

        assert store.title is None

    def test_load_from_file(self, temp_dir, diagnostics):
        path = temp_dir / "data.json"
        path.write_text(json.dumps({"data": {"city": "Łódź"}}), encoding="utf-8")

        store = DataStore.load(str(path), diagnostics)

        assert store.get("city") == "Łódź"

    def test_load_from_binary_stream(self, diagnostics):
        stream = io.BytesIO(b'{"data": {"a": "1"}}')

        assert DataStore.load(stream, diagnostics).keys() == ["a"]

    def test_invalid_json_raises(self, diagnostics):
        with pytest.raises(DataSourceError):
            DataStore.load(io.StringIO("{not json"), diagnostics)

    def test_top_level_must_be_object(self, diagnostics):
        with pytest.raises(DataSourceError):
            DataStore.load(io.StringIO("[1, 2]"), diagnostics)

    def test_missing_file_raises(self, temp_dir, diagnostics):
        with pytest.raises(DataSourceError):
            DataStore.load(str(temp_dir / "absent.json"), diagnostics)


class TestDataResolver:
    """Test cases for DataResolver."""

    def test_resolve_is_stable(self, diagnostics):
        resolver = DataResolver(DataStore({"name": "Alice"}), diagnostics)

        assert resolver.resolve("name") == "Alice"
        assert resolver.resolve("name") == "Alice"
        assert not diagnostics

    @pytest.mark.parametrize("store,placeholder_id,code", [
        (DataStore({"name": "Alice"}), "age", DiagnosticCode.MISSING_DATA_KEY),
        (DataStore({"age": 42}), "age", DiagnosticCode.INVALID_DATA_VALUE),
        (DataStore(None), "name", DiagnosticCode.MISSING_DATA_SECTION),
        (None, "name", DiagnosticCode.MISSING_DATA_SECTION),
        (DataStore({"name": "Alice"}), None, DiagnosticCode.MISSING_PLACEHOLDER_ID),
    ])
    def test_failures_report_exactly_one_diagnostic(self, diagnostics, store, placeholder_id, code):
        resolver = DataResolver(store, diagnostics)

        assert resolver.resolve(placeholder_id) is None
        assert diagnostics.codes() == [code]
