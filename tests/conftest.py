import fnmatch
import json
import os
import sys
from pathlib import Path

# Configure the app for tests before anything reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only-do-not-use-in-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SEED_ROLES_ON_STARTUP", "false")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("DEBUG", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import saas_backend.models  # noqa: E402,F401
from saas_backend.core.permissions import RoleName  # noqa: E402
from saas_backend.db.base import Base  # noqa: E402
from saas_backend.db.seeds.seed_roles import seed_default_roles  # noqa: E402
from saas_backend.db.session import SessionLocal, engine, get_db  # noqa: E402
from saas_backend.main import app  # noqa: E402
from saas_backend.schemas.schemas import PersonCreate  # noqa: E402
from saas_backend.services.cache_service import get_cache  # noqa: E402
from saas_backend.services.role_service import RoleService  # noqa: E402
from saas_backend.services.user_service import UserService  # noqa: E402

DEFAULT_PASSWORD = "s3cret-password"


class MemoryCache:
    """Dict-backed stand-in for CacheService."""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ttl=None):
        self.store[key] = value
        return True

    def get_json(self, key):
        raw = self.store.get(key)
        return json.loads(raw) if raw is not None else None

    def set_json(self, key, value, ttl=None):
        self.store[key] = json.dumps(value, default=str)
        return True

    def delete(self, key):
        return self.store.pop(key, None) is not None

    def invalidate_pattern(self, pattern):
        doomed = [k for k in self.store if fnmatch.fnmatch(k, pattern)]
        for key in doomed:
            del self.store[key]
        return len(doomed)

    def health_check(self):
        return True


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def roles(db):
    """The three default roles, keyed by RoleName."""
    seed_default_roles(db)
    service = RoleService(db)
    return {name: service.find_by_name(name) for name in RoleName}


@pytest.fixture
def make_person(db, roles):
    users = UserService(db)
    counter = {"n": 0}

    def _make(role=RoleName.assistant, email=None, password=DEFAULT_PASSWORD, **extra):
        counter["n"] += 1
        return users.create(PersonCreate(
            email=email or f"person{counter['n']}@example.com",
            password=password,
            given_name=extra.pop("given_name", "Test"),
            family_name=extra.pop("family_name", f"Person{counter['n']}"),
            role_id=roles[RoleName(role)].id,
            **extra,
        ))

    return _make


@pytest.fixture
def client(db, cache):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_cache] = lambda: cache
    # No context manager: the lifespan (seeding, redis ping) stays out of tests.
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Log in over HTTP and return an Authorization header."""

    def _login(email, password=DEFAULT_PASSWORD):
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login
