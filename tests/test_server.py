from server import Settings, create_server


def test_settings_defaults():
    settings = Settings({})
    assert settings.db_path == "hotel_admin.db"
    assert settings.port == 5001
    assert settings.debug is False
    assert settings.low_inventory_threshold == 2


def test_settings_from_environment():
    settings = Settings({
        "HOTEL_ADMIN_PORT": "8080",
        "HOTEL_ADMIN_DEBUG": "true",
        "LOW_INVENTORY_LIMIT": "not-a-number",
        "RECENT_ORDERS_LIMIT": "3",
    })
    assert settings.port == 8080
    assert settings.debug is True
    assert settings.low_inventory_limit == 6
    assert settings.recent_orders_limit == 3


def test_create_server_uses_configured_database(tmp_path):
    path = tmp_path / "admin.db"
    app = create_server(Settings({"HOTEL_ADMIN_DB_PATH": str(path)}))
    response = app.test_client().get("/")
    assert response.status_code == 200
    assert path.exists()
