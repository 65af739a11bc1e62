from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import logging

from dashboard import build_dashboard
from database import HotelDatabase
from errors import HotelAdminError, MissingOwnerError, ValidationError

logger = logging.getLogger("admin")

OWNER_HEADER = "X-Owner-Id"


def _owner_id() -> str:
    owner_id = request.headers.get(OWNER_HEADER, "").strip()
    if not owner_id:
        raise MissingOwnerError(f"Missing {OWNER_HEADER} header")
    return owner_id


def _payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def create_app(db: HotelDatabase, settings=None) -> Flask:
    """Build the admin API around a database"""
    app = Flask(__name__)
    CORS(app)

    low_inventory_threshold = getattr(settings, "low_inventory_threshold", 2)
    low_inventory_limit = getattr(settings, "low_inventory_limit", 6)
    recent_orders_limit = getattr(settings, "recent_orders_limit", 5)

    @app.errorhandler(HotelAdminError)
    def handle_admin_error(error):
        logger.info(f"{request.method} {request.path} rejected: {error}")
        return jsonify({"error": str(error)}), error.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return jsonify({"error": error.description}), error.code
        logger.error(f"An error occurred in {request.method} {request.path}: {error}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    @app.route("/")
    def health():
        return {"status": "ok"}

    # Hotels
    @app.route("/admin/api/hotels", methods=["GET"])
    def list_hotels():
        return jsonify(db.list_hotels(_owner_id()))

    @app.route("/admin/api/hotels", methods=["POST"])
    def add_hotel():
        hotel = db.add_hotel(_owner_id(), _payload())
        return jsonify(hotel), 201

    @app.route("/admin/api/hotels/<hotel_id>", methods=["GET"])
    def get_hotel(hotel_id):
        return jsonify(db.get_hotel(hotel_id, _owner_id()))

    @app.route("/admin/api/hotels/<hotel_id>", methods=["PUT"])
    def update_hotel(hotel_id):
        return jsonify(db.update_hotel(hotel_id, _owner_id(), _payload()))

    @app.route("/admin/api/hotels/<hotel_id>", methods=["DELETE"])
    def delete_hotel(hotel_id):
        db.delete_hotel(hotel_id, _owner_id())
        return {"message": f"Hotel {hotel_id} deleted"}

    # Orders
    @app.route("/admin/api/orders", methods=["GET"])
    def list_orders():
        return jsonify(db.list_orders(_owner_id()))

    @app.route("/admin/api/orders", methods=["POST"])
    def create_order():
        order = db.create_order(_owner_id(), _payload())
        return jsonify(order), 201

    @app.route("/admin/api/orders/<order_id>", methods=["GET"])
    def get_order(order_id):
        return jsonify(db.get_order(order_id, _owner_id()))

    @app.route("/admin/api/orders/<order_id>/status", methods=["POST"])
    def update_order_status(order_id):
        owner_id = _owner_id()
        status = _payload().get("status")
        if not status:
            raise ValidationError("'status' is required")
        if not isinstance(status, str):
            raise ValidationError("'status' must be a string")
        return jsonify(db.update_order_status(order_id, owner_id, status))

    @app.route("/admin/api/orders/<order_id>/checkout", methods=["POST"])
    def check_out(order_id):
        return jsonify(db.check_out(order_id, _owner_id()))

    @app.route("/admin/api/dashboard")
    def dashboard():
        owner_id = _owner_id()
        return jsonify(build_dashboard(
            db.list_orders(owner_id),
            db.list_hotels(owner_id),
            low_inventory_threshold=low_inventory_threshold,
            low_inventory_limit=low_inventory_limit,
            recent_orders_limit=recent_orders_limit,
        ))

    return app
