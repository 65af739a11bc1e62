import logging
from typing import Dict, List

from errors import InsufficientRooms, InvalidTransition, UnknownRoomType

logger = logging.getLogger("inventory")

PENDING = "pending"
CONFIRMED = "confirmed"
PAID = "paid"
CANCELLED = "cancelled"
NO_SHOW = "no_show"
CHECKED_OUT = "checked_out"

STATUSES = (PENDING, CONFIRMED, PAID, CANCELLED, NO_SHOW, CHECKED_OUT)

TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {PAID, NO_SHOW},
    PAID: {CHECKED_OUT},
    CANCELLED: set(),
    NO_SHOW: set(),
    CHECKED_OUT: set(),
}

# Statuses in which the booked rooms are taken out of the hotel's availability
HOLDING_STATUSES = {CONFIRMED, PAID}


def holds_inventory(status: str) -> bool:
    return status in HOLDING_STATUSES


def check_transition(current: str, target: str) -> bool:
    """Validate a status move. Returns False when it is a no-op."""
    if not isinstance(target, str) or target not in TRANSITIONS:
        raise InvalidTransition(f"Unknown status '{target}'")
    if current not in TRANSITIONS:
        raise InvalidTransition(f"Order has unknown status '{current}'")
    if current == target:
        return False
    if target not in TRANSITIONS[current]:
        raise InvalidTransition(f"Cannot move order from '{current}' to '{target}'")
    return True


def reconcile(rooms: List[Dict], order: Dict, target: str) -> List[Dict]:
    """
    Return the hotel's room list after moving ``order`` to ``target``.

    Rooms are taken when the booking starts holding inventory and given back
    when it stops. The input list is left untouched.
    """
    current = order["status"]
    before = holds_inventory(current)
    after = holds_inventory(target)
    if before == after:
        return [dict(room) for room in rooms]

    room_type = order["room_type"]
    count = int(order["room_count"])
    updated = [dict(room) for room in rooms]
    match = next((room for room in updated if room.get("room_type") == room_type), None)

    if after:
        if match is None:
            raise UnknownRoomType(f"Hotel has no room type '{room_type}'")
        remaining = int(match.get("available") or 0) - count
        if remaining < 0:
            raise InsufficientRooms(
                f"Only {match.get('available')} '{room_type}' rooms left, {count} requested"
            )
        match["available"] = remaining
        logger.info(f"Order {order.get('id')}: took {count} '{room_type}' rooms, {remaining} left")
    else:
        if match is None:
            logger.warning(
                f"Order {order.get('id')}: room type '{room_type}' no longer exists, "
                f"{count} rooms not released"
            )
            return updated
        match["available"] = int(match.get("available") or 0) + count
        logger.info(
            f"Order {order.get('id')}: released {count} '{room_type}' rooms, "
            f"{match['available']} available"
        )

    return updated

