import sqlite3
import logging
import uuid
from datetime import datetime
from typing import Optional, Dict, List
import json

from errors import NotFoundError, ValidationError
from hotels import normalize_hotel, normalize_hotel_update
from inventory import PENDING, CHECKED_OUT, check_transition, holds_inventory, reconcile
from orders import parse_order

logger = logging.getLogger("database")

HOTEL_COLUMNS = (
    "hotel_id", "user_id", "hotel_name", "type", "main_image", "sub_images",
    "price_per_night", "address", "city", "description", "rating",
    "amenities", "rooms", "created_at",
)
ORDER_COLUMNS = (
    "order_id", "hotel_id", "hotel_owner_id", "user_name", "phone_number",
    "room_type", "room_count", "check_in_date", "check_out_date",
    "total_price", "status", "created_at", "updated_at",
)
JSON_FIELDS = ("sub_images", "amenities", "rooms")


class HotelDatabase:
    def __init__(self, db_path: str = "hotel_admin.db"):
        self.db_path = db_path
        self.init_database()
        self.migrate_database()

    def get_connection(self):
        """Get a database connection"""
        return sqlite3.connect(self.db_path)

    def migrate_database(self):
        """Migrate database to add new columns if they don't exist"""
        conn = self.get_connection()
        cursor = conn.cursor()

        cursor.execute("PRAGMA table_info(hotels)")
        columns = [row[1] for row in cursor.fetchall()]
        if 'rating' not in columns:
            logger.info("Adding rating column to hotels table")
            cursor.execute("ALTER TABLE hotels ADD COLUMN rating REAL DEFAULT 0")

        cursor.execute("PRAGMA table_info(orders)")
        columns = [row[1] for row in cursor.fetchall()]
        if 'updated_at' not in columns:
            logger.info("Adding updated_at column to orders table")
            cursor.execute("ALTER TABLE orders ADD COLUMN updated_at TIMESTAMP")

        conn.commit()
        conn.close()
        logger.info("Database migration completed")

    def init_database(self):
        """Initialize database tables"""
        conn = self.get_connection()
        cursor = conn.cursor()

        # Hotels - one row per hotel/homestay document, nested lists kept as JSON
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS hotels (
                hotel_id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                hotel_name TEXT NOT NULL,
                type TEXT DEFAULT 'hotel',
                main_image TEXT,
                sub_images TEXT DEFAULT '[]',
                price_per_night REAL DEFAULT 0,
                address TEXT,
                city TEXT,
                description TEXT,
                rating REAL DEFAULT 0,
                amenities TEXT DEFAULT '[]',
                rooms TEXT DEFAULT '[]',
                created_at TIMESTAMP
            )
        """)

        # Orders - bookings placed by guests against an owner's hotel
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS orders (
                order_id TEXT PRIMARY KEY,
                hotel_id TEXT NOT NULL,
                hotel_owner_id TEXT NOT NULL,
                user_name TEXT,
                phone_number TEXT,
                room_type TEXT NOT NULL,
                room_count INTEGER NOT NULL,
                check_in_date TEXT,
                check_out_date TEXT,
                total_price REAL DEFAULT 0,
                status TEXT DEFAULT 'pending',
                created_at TIMESTAMP,
                updated_at TIMESTAMP
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_hotels_user ON hotels (user_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_orders_owner ON orders (hotel_owner_id)")

        conn.commit()
        conn.close()
        logger.info("Database initialized successfully")

    @staticmethod
    def _hotel_from_row(row) -> Dict:
        hotel = dict(zip(HOTEL_COLUMNS, row))
        for field in JSON_FIELDS:
            hotel[field] = json.loads(hotel[field]) if hotel[field] else []
        hotel['id'] = hotel.pop('hotel_id')
        return hotel

    @staticmethod
    def _order_from_row(row) -> Dict:
        order = dict(zip(ORDER_COLUMNS, row))
        order['id'] = order.pop('order_id')
        return order

    def _fetch_hotel(self, cursor, hotel_id: str) -> Optional[Dict]:
        cursor.execute(
            f"SELECT {', '.join(HOTEL_COLUMNS)} FROM hotels WHERE hotel_id = ?",
            (hotel_id,)
        )
        row = cursor.fetchone()
        return self._hotel_from_row(row) if row else None

    def _fetch_order(self, cursor, order_id: str) -> Optional[Dict]:
        cursor.execute(
            f"SELECT {', '.join(ORDER_COLUMNS)} FROM orders WHERE order_id = ?",
            (order_id,)
        )
        row = cursor.fetchone()
        return self._order_from_row(row) if row else None

    # Hotels
    def add_hotel(self, owner_id: str, payload: Dict) -> Dict:
        """Create a hotel/homestay owned by owner_id"""
        hotel = normalize_hotel(payload)
        hotel_id = uuid.uuid4().hex
        created_at = datetime.now().isoformat()

        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO hotels
            (hotel_id, user_id, hotel_name, type, main_image, sub_images,
             price_per_night, address, city, description, rating,
             amenities, rooms, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (hotel_id, owner_id, hotel['hotel_name'], hotel['type'],
              hotel['main_image'], json.dumps(hotel['sub_images']),
              hotel['price_per_night'], hotel['address'], hotel['city'],
              hotel['description'], hotel['rating'],
              json.dumps(hotel['amenities']), json.dumps(hotel['rooms']),
              created_at))
        conn.commit()
        conn.close()

        logger.info(f"Hotel created: {hotel_id} ({hotel['hotel_name']}) for {owner_id}")
        return dict(hotel, id=hotel_id, user_id=owner_id, created_at=created_at)

    def list_hotels(self, owner_id: str) -> List[Dict]:
        """Get all hotels of an owner"""
        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute(f"""
            SELECT {', '.join(HOTEL_COLUMNS)} FROM hotels
            WHERE user_id = ?
            ORDER BY created_at DESC
        """, (owner_id,))
        rows = cursor.fetchall()
        conn.close()
        return [self._hotel_from_row(row) for row in rows]

    def get_hotel(self, hotel_id: str, owner_id: Optional[str] = None) -> Dict:
        conn = self.get_connection()
        hotel = self._fetch_hotel(conn.cursor(), hotel_id)
        conn.close()

        if not hotel or (owner_id is not None and hotel['user_id'] != owner_id):
            raise NotFoundError(f"Hotel {hotel_id} not found")
        return hotel

    def update_hotel(self, hotel_id: str, owner_id: str, payload: Dict) -> Dict:
        """Update the editable fields of a hotel"""
        self.get_hotel(hotel_id, owner_id)
        updates = normalize_hotel_update(payload)
        if updates:
            assignments = []
            params = []
            for field, value in updates.items():
                assignments.append(f"{field} = ?")
                params.append(json.dumps(value) if field in JSON_FIELDS else value)
            params.append(hotel_id)

            conn = self.get_connection()
            conn.execute(
                f"UPDATE hotels SET {', '.join(assignments)} WHERE hotel_id = ?",
                params
            )
            conn.commit()
            conn.close()
            logger.info(f"Hotel {hotel_id} updated: {', '.join(updates)}")

        return self.get_hotel(hotel_id, owner_id)

    def delete_hotel(self, hotel_id: str, owner_id: str):
        self.get_hotel(hotel_id, owner_id)

        conn = self.get_connection()
        conn.execute("DELETE FROM hotels WHERE hotel_id = ?", (hotel_id,))
        conn.commit()
        conn.close()
        logger.info(f"Hotel {hotel_id} deleted")

    # Orders
    def create_order(self, owner_id: str, payload: Dict) -> Dict:
        """Place a pending booking against one of the owner's hotels"""
        request = parse_order(payload)
        hotel = self.get_hotel(request.hotel_id, owner_id)
        room = next((r for r in hotel['rooms'] if r['room_type'] == request.room_type), None)
        if room is None:
            raise ValidationError(f"Hotel has no room type '{request.room_type}'")

        total_price = request.total_price
        if total_price is None:
            total_price = room['price'] * request.room_count * request.nights

        order = {
            'id': uuid.uuid4().hex,
            'hotel_id': hotel['id'],
            'hotel_owner_id': hotel['user_id'],
            'user_name': request.user_name or '',
            'phone_number': request.phone_number or '',
            'room_type': request.room_type,
            'room_count': request.room_count,
            'check_in_date': request.check_in_date.isoformat(),
            'check_out_date': request.check_out_date.isoformat(),
            'total_price': float(total_price),
            'status': PENDING,
            'created_at': datetime.now().isoformat(),
            'updated_at': None,
        }

        conn = self.get_connection()
        conn.execute("""
            INSERT INTO orders
            (order_id, hotel_id, hotel_owner_id, user_name, phone_number,
             room_type, room_count, check_in_date, check_out_date,
             total_price, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (order['id'], order['hotel_id'], order['hotel_owner_id'],
              order['user_name'], order['phone_number'], order['room_type'],
              order['room_count'], order['check_in_date'], order['check_out_date'],
              order['total_price'], order['status'], order['created_at']))
        conn.commit()
        conn.close()

        logger.info(f"Order created: {order['id']} for hotel {hotel['id']}")
        return order

    def list_orders(self, owner_id: str) -> List[Dict]:
        """Get all orders placed on an owner's hotels, with the hotel name"""
        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute(f"""
            SELECT {', '.join('o.' + c for c in ORDER_COLUMNS)}, h.hotel_name
            FROM orders o
            LEFT JOIN hotels h ON o.hotel_id = h.hotel_id
            WHERE o.hotel_owner_id = ?
            ORDER BY o.created_at DESC
        """, (owner_id,))
        rows = cursor.fetchall()
        conn.close()

        orders = []
        for row in rows:
            order = self._order_from_row(row[:len(ORDER_COLUMNS)])
            order['hotel_name'] = row[len(ORDER_COLUMNS)]
            orders.append(order)
        return orders

    def get_order(self, order_id: str, owner_id: Optional[str] = None) -> Dict:
        conn = self.get_connection()
        order = self._fetch_order(conn.cursor(), order_id)
        conn.close()

        if not order or (owner_id is not None and order['hotel_owner_id'] != owner_id):
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def update_order_status(self, order_id: str, owner_id: str, status: str) -> Dict:
        """
        Move an order to a new status and reconcile the hotel's room inventory.

        The order and the hotel are read and written inside one immediate
        transaction, so concurrent updates of the same booking are serialized.
        """
        conn = self.get_connection()
        conn.isolation_level = None
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE")

            order = self._fetch_order(cursor, order_id)
            if not order or order['hotel_owner_id'] != owner_id:
                raise NotFoundError(f"Order {order_id} not found")

            if not check_transition(order['status'], status):
                cursor.execute("ROLLBACK")
                logger.info(f"Order {order_id} already '{status}', nothing to do")
                return order

            if holds_inventory(order['status']) != holds_inventory(status):
                hotel = self._fetch_hotel(cursor, order['hotel_id'])
                if hotel:
                    rooms = reconcile(hotel['rooms'], order, status)
                    cursor.execute(
                        "UPDATE hotels SET rooms = ? WHERE hotel_id = ?",
                        (json.dumps(rooms), hotel['id'])
                    )
                elif holds_inventory(status):
                    raise NotFoundError(f"Hotel {order['hotel_id']} not found")
                else:
                    logger.warning(
                        f"Order {order_id}: hotel {order['hotel_id']} no longer exists, "
                        f"{order['room_count']} rooms not released"
                    )

            updated_at = datetime.now().isoformat()
            cursor.execute(
                "UPDATE orders SET status = ?, updated_at = ? WHERE order_id = ?",
                (status, updated_at, order_id)
            )
            cursor.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                cursor.execute("ROLLBACK")
            raise
        finally:
            conn.close()

        logger.info(f"Order {order_id}: {order['status']} -> {status}")
        return dict(order, status=status, updated_at=updated_at)

    def check_out(self, order_id: str, owner_id: str) -> Dict:
        return self.update_order_status(order_id, owner_id, CHECKED_OUT)
