import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from main import create_app
from seed import seed_admin

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Admin@123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        mongo_uri="mongodb://localhost:27017",
        database_name="portfolio_test",
        jwt_secret="test-secret",
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def database(settings):
    db = Database(settings.mongo_uri, settings.database_name, client_factory=mongomock.MongoClient)
    yield db
    db.close()


@pytest.fixture
def client(settings, database):
    app = create_app(settings=settings, database=database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin(database):
    seed_admin(database, ADMIN_EMAIL, ADMIN_PASSWORD)
    return database.find_one("admin", {"email": ADMIN_EMAIL})


@pytest.fixture
def auth_headers(client, admin):
    resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
