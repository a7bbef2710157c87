"""Tests for parent assignment validation."""

import pytest

from asset_service.app.crud.asset_hierarchy.cycle_guard import validate_move
from asset_service.app.crud.asset_hierarchy.errors import CircularDependencyError, SelfParentError


class TestValidateMove:
    def test_moving_to_root_is_always_allowed(self):
        validate_move("/A/B", None, "B", None)

    def test_moving_under_unrelated_item(self):
        validate_move("/A/B", "/C", "B", "C")

    def test_moving_under_sibling(self):
        validate_move("/A/B", "/A/C", "B", "C")

    def test_moving_under_own_ancestor(self):
        validate_move("/A/B/C", "/A", "C", "A")

    def test_self_parent_rejected(self):
        with pytest.raises(SelfParentError):
            validate_move("/A/B", "/A/B", "B", "B")

    def test_self_parent_compares_ids_as_strings(self, random_id):
        with pytest.raises(SelfParentError):
            validate_move(f"/{random_id}", f"/{random_id}", random_id, str(random_id))

    def test_moving_under_child_rejected(self):
        with pytest.raises(CircularDependencyError):
            validate_move("/A", "/A/B", "A", "B")

    def test_moving_under_deep_descendant_rejected(self):
        with pytest.raises(CircularDependencyError) as exc_info:
            validate_move("/A", "/A/B/C/D", "A", "D")
        assert exc_info.value.details == {"asset_id": "A", "parent_id": "D"}

    def test_prefix_lookalike_is_not_a_descendant(self):
        validate_move("/A", "/AB", "A", "AB")
