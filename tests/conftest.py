import pytest

from admin_view import create_app
from database import HotelDatabase

OWNER = "owner-1"


def hotel_payload(**overrides):
    payload = {
        "hotel_name": "Sea Breeze",
        "type": "hotel",
        "main_image": "https://img.example/main.jpg",
        "sub_images": ["https://img.example/1.jpg", "  "],
        "price_per_night": 800000,
        "address": "12 Tran Phu",
        "city": "Nha Trang",
        "description": "Beachfront hotel",
        "rating": 4.5,
        "amenities": "wifi, pool, ,breakfast",
        "rooms": [
            {"room_type": "Standard", "price": 500000, "available": 5},
            {"room_type": "Deluxe", "price": 900000, "available": 2},
        ],
    }
    payload.update(overrides)
    return payload


def order_payload(hotel_id, **overrides):
    payload = {
        "hotel_id": hotel_id,
        "user_name": "Nguyen Van A",
        "phone_number": "0900000000",
        "room_type": "Standard",
        "room_count": 2,
        "check_in_date": "2025-05-01",
        "check_out_date": "2025-05-03",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def db(tmp_path):
    return HotelDatabase(str(tmp_path / "hotel_admin.db"))


@pytest.fixture
def hotel(db):
    return db.add_hotel(OWNER, hotel_payload())


@pytest.fixture
def client(db):
    app = create_app(db)
    app.config["TESTING"] = True
    return app.test_client()


def room(db, hotel_id, room_type):
    rooms = db.get_hotel(hotel_id)["rooms"]
    return next(r for r in rooms if r["room_type"] == room_type)
