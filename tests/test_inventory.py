import pytest

from errors import InsufficientRooms, InvalidTransition, UnknownRoomType
from inventory import (
    CANCELLED, CHECKED_OUT, CONFIRMED, NO_SHOW, PAID, PENDING,
    check_transition, holds_inventory, reconcile,
)

ROOMS = [
    {"room_type": "Standard", "price": 500000, "available": 5},
    {"room_type": "Deluxe", "price": 900000, "available": 1},
]


def make_order(status, room_type="Standard", room_count=2):
    return {"id": "o1", "status": status, "room_type": room_type, "room_count": room_count}


def available(rooms, room_type):
    return next(r["available"] for r in rooms if r["room_type"] == room_type)


def test_holding_statuses():
    assert holds_inventory(CONFIRMED)
    assert holds_inventory(PAID)
    for status in (PENDING, CANCELLED, NO_SHOW, CHECKED_OUT):
        assert not holds_inventory(status)


@pytest.mark.parametrize("current,target", [
    (PENDING, CONFIRMED),
    (PENDING, CANCELLED),
    (CONFIRMED, PAID),
    (CONFIRMED, NO_SHOW),
    (PAID, CHECKED_OUT),
])
def test_allowed_transitions(current, target):
    assert check_transition(current, target) is True


@pytest.mark.parametrize("current,target", [
    (PENDING, PAID),
    (PENDING, CHECKED_OUT),
    (CONFIRMED, CANCELLED),
    (PAID, NO_SHOW),
    (CANCELLED, CONFIRMED),
    (CHECKED_OUT, CONFIRMED),
    (NO_SHOW, PAID),
])
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidTransition):
        check_transition(current, target)


def test_unknown_status_is_rejected():
    with pytest.raises(InvalidTransition):
        check_transition(PENDING, "archived")


def test_same_status_is_a_noop():
    assert check_transition(CONFIRMED, CONFIRMED) is False


def test_confirm_takes_rooms_without_mutating_input():
    rooms = reconcile(ROOMS, make_order(PENDING), CONFIRMED)
    assert available(rooms, "Standard") == 3
    assert available(rooms, "Deluxe") == 1
    assert available(ROOMS, "Standard") == 5


def test_confirm_beyond_availability_is_rejected():
    with pytest.raises(InsufficientRooms):
        reconcile(ROOMS, make_order(PENDING, "Deluxe", 2), CONFIRMED)


def test_confirm_unknown_room_type_is_rejected():
    with pytest.raises(UnknownRoomType):
        reconcile(ROOMS, make_order(PENDING, "Suite", 1), CONFIRMED)


def test_paid_keeps_rooms_taken():
    rooms = reconcile(ROOMS, make_order(CONFIRMED), PAID)
    assert rooms == ROOMS


@pytest.mark.parametrize("path", [
    [PENDING, CONFIRMED, NO_SHOW],
    [PENDING, CONFIRMED, PAID, CHECKED_OUT],
    [PENDING, CANCELLED],
])
def test_full_lifecycle_conserves_availability(path):
    rooms = ROOMS
    order = make_order(path[0])
    for target in path[1:]:
        check_transition(order["status"], target)
        rooms = reconcile(rooms, order, target)
        assert all(r["available"] >= 0 for r in rooms)
        order["status"] = target
    assert rooms == ROOMS


def test_release_for_removed_room_type_is_skipped():
    rooms = reconcile(ROOMS, make_order(PAID, "Suite", 1), CHECKED_OUT)
    assert rooms == ROOMS


def test_non_string_status_is_rejected():
    with pytest.raises(InvalidTransition):
        check_transition(PENDING, ["paid"])
