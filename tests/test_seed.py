from unittest.mock import patch

import seed
from config import Settings
from seed import seed_admin


def test_seed_is_idempotent(database):
    assert seed_admin(database, "admin@example.com", "Admin@123") is True
    assert seed_admin(database, "admin@example.com", "Admin@123") is False
    assert database.count_documents("admin", {"email": "admin@example.com"}) == 1


def test_seed_stores_hash_not_password(database):
    seed_admin(database, "Admin@Example.com", "Admin@123")
    record = database.find_one("admin", {"email": "admin@example.com"})
    assert record["password_hash"] != "Admin@123"
    assert record["role"] == "admin"


def test_main_without_connection_string_exits_non_zero():
    with patch("seed.get_settings", return_value=Settings(_env_file=None, mongo_uri=None)):
        assert seed.main() == 1
