"""Tests for the materialized path helpers."""

import pytest

from asset_service.app.crud.asset_hierarchy.path_codec import (
    ancestor_ids,
    compute_path,
    descendant_prefix,
    is_descendant_path,
    parent_path,
    parse_path,
    path_depth,
    rebase_path,
)


class TestComputePath:
    def test_root_path(self):
        assert compute_path(None, "A") == "/A"

    def test_empty_parent_path_is_root(self):
        assert compute_path("", "A") == "/A"

    def test_child_path(self):
        assert compute_path("/A/B", "C") == "/A/B/C"

    def test_accepts_uuid_ids(self, random_id):
        assert compute_path(None, random_id) == f"/{random_id}"


class TestDescendantChecks:
    def test_prefix_has_trailing_delimiter(self):
        assert descendant_prefix("/A") == "/A/"

    @pytest.mark.parametrize("ancestor,path,expected", [
        ("/A", "/A/B", True),
        ("/A", "/A/B/C", True),
        ("/A", "/A", False),
        ("/A", "/AB", False),
        ("/A/B", "/A", False),
        ("", "/A", False),
        ("/A", None, False),
    ])
    def test_is_descendant_path(self, ancestor, path, expected):
        assert is_descendant_path(ancestor, path) is expected


class TestParsing:
    def test_parse_path(self):
        assert parse_path("/A/B/C") == ["A", "B", "C"]

    def test_parse_empty(self):
        assert parse_path("") == []
        assert parse_path(None) == []

    def test_depth(self):
        assert path_depth("/A") == 0
        assert path_depth("/A/B/C") == 2

    def test_parent_path(self):
        assert parent_path("/A/B/C") == "/A/B"
        assert parent_path("/A") is None

    def test_ancestor_ids_are_root_first(self):
        assert ancestor_ids("/A/B/C") == ["A", "B"]
        assert ancestor_ids("/A") == []


class TestRebasePath:
    def test_rebases_descendant(self):
        assert rebase_path("/A/B/C", "/A/B", "/B") == "/B/C"

    def test_rebases_item_itself(self):
        assert rebase_path("/A/B", "/A/B", "/X/B") == "/X/B"

    def test_rejects_path_outside_prefix(self):
        with pytest.raises(ValueError):
            rebase_path("/AB/C", "/A", "/X")
