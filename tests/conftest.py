import os
import tempfile
from dataclasses import dataclass, field

# Settings are cached on first import, so the test database has to be
# configured before anything from fleetpro is imported.
_DB_DIR = tempfile.mkdtemp(prefix="fleetpro-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/fleetpro.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("DVLA_API_KEY", None)
os.environ.pop("DVLA_VEHICLE_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

import fleetpro.models  # noqa: F401
from fleetpro.database import Base, engine, SessionLocal, seed_vehicle_types
from fleetpro.models import Tenant, User, UserRole, Driver, MaintenanceProvider
from fleetpro.core.security import create_access_token, get_password_hash
from fleetpro.main import app

PASSWORD = "Secret123!"
# bcrypt is slow; hash once for every seeded user
PASSWORD_HASH = get_password_hash(PASSWORD)

ROLES = (
    UserRole.ADMIN,
    UserRole.DRIVER,
    UserRole.MAINTENANCE_PROVIDER,
    UserRole.SUPER_USER,
)


@dataclass
class FleetContext:
    session_factory: sessionmaker
    tenants: dict[str, str] = field(default_factory=dict)
    users: dict[tuple[str, str], str] = field(default_factory=dict)
    tokens: dict[tuple[str, str], str] = field(default_factory=dict)
    password: str = PASSWORD

    def tenant_id(self, slug: str = "acme") -> str:
        return self.tenants[slug]

    def user_id(self, role: str, slug: str = "acme") -> str:
        return self.users[(slug, UserRole(role).value)]

    def token(self, role: str, slug: str = "acme") -> str:
        return self.tokens[(slug, UserRole(role).value)]

    def header(self, role: str, slug: str = "acme", as_tenant: str = None) -> dict[str, str]:
        """
        Headers for a request by ``role`` of tenant ``slug``.

        as_tenant sends the request to another tenant with the same token.
        """
        return {
            "Authorization": f"Bearer {self.token(role, slug)}",
            "X-Tenant-Slug": as_tenant or slug,
        }

    def create_tenant(self, name: str, slug: str) -> str:
        """Provision a tenant with one user per role and their tokens."""
        with self.session_factory() as session:
            tenant = Tenant(name=name, slug=slug, settings={})
            session.add(tenant)
            session.flush()

            for role in ROLES:
                user = User(
                    tenant_id=tenant.id,
                    email=f"{role.value}@{slug}.example.com",
                    hashed_password=PASSWORD_HASH,
                    first_name=name,
                    last_name=role.value.replace("_", " ").title(),
                    role=role.value,
                    profile={},
                )
                session.add(user)
                session.flush()

                if role == UserRole.DRIVER:
                    session.add(Driver(tenant_id=tenant.id, user_id=user.id))
                elif role == UserRole.MAINTENANCE_PROVIDER:
                    session.add(MaintenanceProvider(
                        tenant_id=tenant.id,
                        user_id=user.id,
                        name=f"{name} Garage",
                        email=user.email,
                    ))

                self.users[(slug, role.value)] = user.id
                self.tokens[(slug, role.value)] = create_access_token({
                    "sub": user.id,
                    "tenant_id": tenant.id,
                    "email": user.email,
                    "role": user.role,
                })

            session.commit()
            self.tenants[slug] = tenant.id
        return self.tenants[slug]


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_vehicle_types(session)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db() -> Session:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fleet(database) -> FleetContext:
    context = FleetContext(session_factory=SessionLocal)
    context.create_tenant("Acme Haulage", "acme")
    context.create_tenant("Globex Logistics", "globex")
    return context


@pytest.fixture
def client():
    app.dependency_overrides.clear()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_vehicle(client, fleet):
    """Create a vehicle through the API and return its JSON."""
    counter = {"n": 0}

    def _make(slug: str = "acme", **overrides):
        counter["n"] += 1
        payload = {
            "registration": f"AB{counter['n']:02d} {slug[:3].upper()}",
            "make": "Volvo",
            "model": "FH16",
        }
        payload.update(overrides)
        res = client.post("/api/v1/vehicles", json=payload, headers=fleet.header("admin", slug))
        assert res.status_code == 201, res.text
        return res.json()

    return _make
