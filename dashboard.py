from datetime import datetime
from typing import Dict, List

from inventory import CANCELLED, CHECKED_OUT, PAID

PAID_STATUSES = {PAID, CHECKED_OUT}


def _amount(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _timestamp(order: Dict) -> float:
    """Check-in date when known, else creation time, else 0"""
    for field in ("check_in_date", "created_at"):
        value = order.get(field)
        if not value:
            continue
        try:
            return datetime.fromisoformat(str(value)).timestamp()
        except ValueError:
            continue
    return 0.0


def low_inventory_rooms(hotels: List[Dict], threshold: int = 2, limit: int = 6) -> List[Dict]:
    low = []
    for hotel in hotels:
        for room in hotel.get("rooms") or []:
            available = int(_amount(room.get("available")))
            if available <= threshold:
                low.append({
                    "hotel_id": hotel.get("id"),
                    "hotel_name": hotel.get("hotel_name"),
                    "room_type": room.get("room_type"),
                    "available": available,
                })
    low.sort(key=lambda r: r["available"])
    return low[:limit]


def build_dashboard(orders: List[Dict], hotels: List[Dict],
                    low_inventory_threshold: int = 2,
                    low_inventory_limit: int = 6,
                    recent_orders_limit: int = 5) -> Dict:
    """Aggregate an owner's orders and hotels into the home screen metrics"""
    effective = [o for o in orders if o.get("status") != CANCELLED]
    revenue = sum(_amount(o.get("total_price")) for o in effective if o.get("status") in PAID_STATUSES)
    available = sum(
        int(_amount(room.get("available")))
        for hotel in hotels
        for room in hotel.get("rooms") or []
    )
    recent = sorted(orders, key=_timestamp, reverse=True)[:recent_orders_limit]

    return {
        "total_bookings": len(effective),
        "total_revenue": revenue,
        "total_available_rooms": available,
        "recent_orders": recent,
        "low_inventory": low_inventory_rooms(hotels, low_inventory_threshold, low_inventory_limit),
    }
