"""Tests for the asset lifecycle state machine."""

import itertools

import pytest

from asset_service.app.crud.asset_hierarchy.errors import InvalidTransitionError
from asset_service.app.crud.asset_hierarchy.status_machine import (
    ALLOWED_TRANSITIONS,
    allowed_transitions,
    can_transition,
    transition,
)
from asset_service.app.enum.asset_enum import AssetStatus


EDGES = {
    ("operational", "maintenance"), ("operational", "repair"), ("operational", "retired"), ("operational", "lost"),
    ("maintenance", "operational"), ("maintenance", "repair"), ("maintenance", "retired"),
    ("repair", "operational"), ("repair", "maintenance"), ("repair", "retired"), ("repair", "disposed"),
    ("retired", "disposed"),
    ("lost", "operational"),
}


class TestTransitions:
    @pytest.mark.parametrize("current,requested", list(itertools.product(AssetStatus, AssetStatus)))
    def test_full_transition_table(self, current, requested):
        expected = current == requested or (current.value, requested.value) in EDGES
        assert can_transition(current, requested) is expected
        if expected:
            assert transition(current, requested) == requested
        else:
            with pytest.raises(InvalidTransitionError):
                transition(current, requested)

    @pytest.mark.parametrize("status", list(AssetStatus))
    def test_same_status_is_always_allowed(self, status):
        assert transition(status, status) == status

    @pytest.mark.parametrize("current,requested", [
        ("operational", "maintenance"),
        ("operational", "lost"),
        ("maintenance", "repair"),
        ("repair", "disposed"),
        ("retired", "disposed"),
        ("lost", "operational"),
    ])
    def test_allowed_edges(self, current, requested):
        assert transition(current, requested) == AssetStatus(requested)

    @pytest.mark.parametrize("current,requested", [
        ("disposed", "operational"),
        ("retired", "operational"),
        ("lost", "retired"),
        ("operational", "disposed"),
        ("maintenance", "lost"),
    ])
    def test_forbidden_edges(self, current, requested):
        with pytest.raises(InvalidTransitionError) as exc_info:
            transition(current, requested)
        assert exc_info.value.from_status == AssetStatus(current)
        assert exc_info.value.to_status == AssetStatus(requested)

    def test_disposed_is_terminal(self):
        assert allowed_transitions(AssetStatus.disposed) == frozenset()
        for status in AssetStatus:
            if status != AssetStatus.disposed:
                assert not can_transition(AssetStatus.disposed, status)

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(AssetStatus)

    def test_unknown_status_raises_value_error(self):
        with pytest.raises(ValueError):
            can_transition("operational", "exploded")
