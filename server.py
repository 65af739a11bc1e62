# server.py - hotel booking admin API entry point
import os
import logging
from dotenv import load_dotenv

from admin_view import create_app
from database import HotelDatabase

# Basic logging setup
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# Load environment variables from .env file
load_dotenv()


def _int_env(environ, name: str, default: int) -> int:
    value = environ.get(name)
    if value in (None, ""):
        return default
    try:
        return int(value)
    except ValueError:
        logging.warning(f"{name}={value!r} is not a number, using {default}")
        return default


class Settings:
    """Service configuration read from the environment"""

    def __init__(self, environ=None):
        environ = os.environ if environ is None else environ
        self.db_path = environ.get("HOTEL_ADMIN_DB_PATH", "hotel_admin.db")
        self.host = environ.get("HOTEL_ADMIN_HOST", "0.0.0.0")
        self.port = _int_env(environ, "HOTEL_ADMIN_PORT", 5001)
        self.debug = environ.get("HOTEL_ADMIN_DEBUG", "").lower() in ("1", "true", "yes")
        self.low_inventory_threshold = _int_env(environ, "LOW_INVENTORY_THRESHOLD", 2)
        self.low_inventory_limit = _int_env(environ, "LOW_INVENTORY_LIMIT", 6)
        self.recent_orders_limit = _int_env(environ, "RECENT_ORDERS_LIMIT", 5)


def create_server(settings: Settings = None):
    settings = settings or Settings()
    logging.info(f"Using database at '{settings.db_path}'")
    return create_app(HotelDatabase(settings.db_path), settings)


if __name__ == '__main__':
    settings = Settings()
    create_server(settings).run(host=settings.host, port=settings.port, debug=settings.debug)
