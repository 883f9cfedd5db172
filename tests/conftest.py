import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Settings and the engine are built on first import of the package, so the
# environment has to point at throwaway locations before anything imports it.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="combat_analyzer_tests_"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test_combat_analyzer.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["APP_ENV"] = "test"
os.environ["JWT_SECRET"] = "test-secret"

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402


def _alembic_upgrade_head() -> None:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    # Pin script_location so running from another directory finds the migrations
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(cfg, "head")


@pytest.fixture(scope="session")
def migrated_db() -> str:
    _alembic_upgrade_head()
    yield os.environ["DATABASE_URL"]


@pytest.fixture(autouse=True)
def _clean_tables(migrated_db: str):
    yield
    from combat_analyzer.database import Base, SessionLocal

    with SessionLocal() as db:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()


@pytest.fixture()
def db(migrated_db: str):
    from combat_analyzer.database import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app(migrated_db: str):
    # Import after DATABASE_URL is set and migrations have run
    from combat_analyzer.main import app

    return app


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def register_user(
    client: TestClient,
    email: str = "fighter@combat.io",
    password: str = "secret123",
    name: str = "Alex Fighter",
) -> dict:
    r = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
    assert r.status_code == 201, r.text
    return r.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def registered(client: TestClient) -> dict:
    return register_user(client)


@pytest.fixture()
def auth_headers(registered: dict) -> dict[str, str]:
    return bearer(registered["token"])
