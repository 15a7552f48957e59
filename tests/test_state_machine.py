"""Unit tests for order status transition tables."""

import pytest

from orderdesk.common.state_machine import OrderStatus, sources_of, validate_transition


def test_permissive_table_allows_any_move():
    """Default mode: paid and cancelled orders can still be moved either way."""

    validate_transition("paid", "cancelled")
    validate_transition("cancelled", "paid")
    validate_transition("cancelled", "cancelled")


def test_strict_table_allows_pending_moves():
    validate_transition("pending", "paid", strict=True)
    validate_transition("pending", "cancelled", strict=True)
    validate_transition("paid", "cancelled", strict=True)


@pytest.mark.parametrize("current,new", [("cancelled", "paid"), ("cancelled", "cancelled"), ("paid", "paid")])
def test_strict_table_rejects_moves_out_of_terminal_states(current, new):
    with pytest.raises(ValueError, match=f"{current} -> {new}"):
        validate_transition(current, new, strict=True)


def test_unknown_current_status_is_rejected():
    with pytest.raises(ValueError):
        validate_transition("shipped", "paid")


def test_sources_of_lists_legal_starting_statuses():
    assert sources_of(OrderStatus.PAID, strict=True) == ["pending"]
    assert sources_of(OrderStatus.CANCELLED, strict=True) == ["paid", "pending"]
    assert sources_of(OrderStatus.PAID) == ["cancelled", "paid", "pending"]
