"""
Database Configuration and Session Management

SQLAlchemy setup with connection pooling. PostgreSQL in production,
SQLite for local runs and tests.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool
from fleetpro.config import get_settings
import logging

logger = logging.getLogger(__name__)

settings = get_settings()

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

engine = create_engine(
    settings.DATABASE_URL,
    poolclass=QueuePool,
    pool_size=settings.DATABASE_POOL_SIZE,
    max_overflow=settings.DATABASE_MAX_OVERFLOW,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    # Sessions are shared between the event loop and the threadpool
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)

# expire_on_commit=False so rows can be serialized after commit
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False
)

Base = declarative_base()


@event.listens_for(engine, "connect")
def set_connection_options(dbapi_connection, connection_record):
    """Set connection-level configuration on new connections."""
    cursor = dbapi_connection.cursor()
    if settings.DATABASE_URL.startswith("postgresql"):
        cursor.execute("SET TIME ZONE 'UTC'")
    elif _is_sqlite:
        # Tenant deletes rely on ON DELETE CASCADE
        cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    logger.debug("New database connection established")


def get_db() -> Session:
    """
    Dependency function that provides a database session.

    The session is closed after the request completes. Tenant
    filtering happens in the endpoints, not here.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DEFAULT_VEHICLE_TYPES = [
    {
        "name": "Rigid Truck",
        "description": "Single-chassis goods vehicle",
        "max_weight": 26000,
        "max_height": 4.0,
        "max_length": 12.0,
        "max_width": 2.55,
    },
    {
        "name": "Articulated Truck",
        "description": "Tractor unit with semi-trailer",
        "max_weight": 44000,
        "max_height": 4.0,
        "max_length": 16.5,
        "max_width": 2.55,
    },
    {
        "name": "Drawbar Trailer",
        "description": "Rigid vehicle towing a drawbar trailer",
        "max_weight": 44000,
        "max_height": 4.0,
        "max_length": 18.75,
        "max_width": 2.55,
    },
]


def seed_vehicle_types(db: Session) -> int:
    """Insert the default vehicle types that are missing. Returns the number added."""
    from fleetpro.models.vehicle import VehicleType

    existing = {name for (name,) in db.query(VehicleType.name).all()}
    added = 0
    for data in DEFAULT_VEHICLE_TYPES:
        if data["name"] in existing:
            continue
        db.add(VehicleType(**data))
        added += 1
    if added:
        db.commit()
        logger.info(f"Seeded {added} vehicle types")
    return added


def init_db():
    """
    Create tables and seed reference data.

    Development and tests only; production schemas are managed by migrations.
    """
    import fleetpro.models  # noqa: F401  (registers all tables on Base)

    logger.warning("init_db() called - use migrations in production!")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_vehicle_types(db)
    finally:
        db.close()
