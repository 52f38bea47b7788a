from datetime import date, timedelta
from types import SimpleNamespace

import pytest
import redis
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from fleetpro.core.exceptions import InvalidInputError, PermissionDenied
from fleetpro.core.permissions import home_path_for, check_roles, can_assign_role
from fleetpro.middleware.rate_limit import RateLimitMiddleware
from fleetpro.models import User, UserRole, InspectionSchedule, InspectionCompletion
from fleetpro.models.user import department_for
from fleetpro.schemas.maintenance_provider import normalize_provider_fields
from fleetpro.schemas.vehicle import merge_dimensions
from fleetpro.services.compliance import compliance_status, to_wkt_point, from_wkt_point
from fleetpro.services.inspections import validate_completion


# --- compliance -------------------------------------------------------------

def test_compliance_status_boundaries():
    today = date(2026, 3, 1)

    assert compliance_status(None, today) is None
    assert compliance_status(today, today) == "expired"
    assert compliance_status(today + timedelta(days=1), today, warning_days=30) == "due_soon"
    assert compliance_status(today + timedelta(days=30), today, warning_days=30) == "due_soon"
    assert compliance_status(today + timedelta(days=31), today, warning_days=30) == "ok"


def test_wkt_points():
    assert to_wkt_point(51.5, -0.12) == "POINT(-0.12 51.5)"
    assert from_wkt_point("POINT(-0.12 51.5)") == {"lat": 51.5, "lng": -0.12}
    assert from_wkt_point("garbage") is None
    assert from_wkt_point(None) is None


def test_wkt_points_avoid_exponent_form():
    assert to_wkt_point(0.0, -0.00001) == "POINT(-0.00001 0)"
    assert from_wkt_point("POINT(1e-05 51.5)") == {"lat": 51.5, "lng": 0.00001}
    assert from_wkt_point("POINT(+1.5E+1 -2)") == {"lat": -2.0, "lng": 15.0}


# --- dual schema ------------------------------------------------------------

def test_normalize_provider_fields_prefers_new_names():
    columns = normalize_provider_fields({
        "company_name": "New",
        "name": "Old",
        "email": "old@example.com",
        "contact_phone": "0161",
        "is_active": True,
    })
    assert columns == {"name": "New", "email": "old@example.com", "phone": "0161", "is_active": True}


def test_normalize_provider_fields_partial_update():
    assert normalize_provider_fields({"contact_email": "a@example.com"}) == {"email": "a@example.com"}
    assert normalize_provider_fields({"address": {"street": "", "city": "Hull"}}) == {"address": None}
    assert normalize_provider_fields({"address": None}) == {"address": None}


def test_merge_dimensions():
    assert merge_dimensions({}) is None
    assert merge_dimensions({"dimensions": {"max_width": 2.5}, "max_width": 2.55, "max_height": 4}) == {
        "max_weight": None,
        "max_height": 4,
        "max_length": None,
        "max_width": 2.55,
    }


# --- roles ------------------------------------------------------------------

def _user(role):
    return User(id="u1", tenant_id="t1", email="x@example.com", role=role)


def test_home_paths():
    assert home_path_for("admin") == "/dashboard"
    assert home_path_for(UserRole.DRIVER) == "/driver"
    assert home_path_for("maintenance_provider") == "/maintenance"
    assert home_path_for("super_user") == "/auth/login"
    assert home_path_for(None) == "/auth/login"


def test_check_roles():
    check_roles(_user("admin"), [UserRole.ADMIN])
    check_roles(_user("super_user"), [UserRole.DRIVER])

    with pytest.raises(PermissionDenied) as exc_info:
        check_roles(_user("driver"), [UserRole.ADMIN, UserRole.MAINTENANCE_PROVIDER])
    assert exc_info.value.redirect_to == "/driver"
    assert exc_info.value.status_code == 403


def test_can_assign_role():
    assert can_assign_role(_user("admin"), "driver")
    assert not can_assign_role(_user("admin"), "super_user")
    assert can_assign_role(_user("super_user"), "super_user")
    assert not can_assign_role(_user("driver"), "driver")


def test_departments():
    assert department_for("admin") == "Administration"
    assert department_for("driver") == "Driving"
    assert department_for("maintenance_provider") == "Maintenance"
    assert department_for("super_user") == "System Administration"


# --- inspection completion rules --------------------------------------------

def test_validate_completion_rules():
    schedule = InspectionSchedule(id="s1")

    validate_completion(schedule, True, ["minor"], 0)
    validate_completion(schedule, False, ["major"], 0)

    with pytest.raises(InvalidInputError):
        validate_completion(schedule, False, ["critical"], 0)
    with pytest.raises(InvalidInputError):
        validate_completion(schedule, True, ["major"], 0)
    with pytest.raises(InvalidInputError):
        validate_completion(schedule, True, [], 2)

    schedule.completion = InspectionCompletion(inspection_passed=True)
    with pytest.raises(InvalidInputError):
        validate_completion(schedule, True, [], 0)


# --- rate limiting ----------------------------------------------------------

class FakeRedis:
    def __init__(self, fail=False):
        self.store = {}
        self.fail = fail

    def get(self, key):
        if self.fail:
            raise redis.ConnectionError("gone")
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = str(value)


def test_token_bucket_denies_after_burst():
    limiter = RateLimitMiddleware(app=None, redis_client=FakeRedis(), enabled=True)
    tenant = SimpleNamespace(id="t1", rate_limit_per_minute=1, rate_limit_burst=2)

    assert limiter._check_rate_limit(tenant) == (True, 0)
    assert limiter._check_rate_limit(tenant) == (True, 0)
    allowed, retry_after = limiter._check_rate_limit(tenant)
    assert allowed is False
    assert retry_after > 0


def test_token_bucket_fails_open():
    limiter = RateLimitMiddleware(app=None, redis_client=FakeRedis(fail=True), enabled=True)
    tenant = SimpleNamespace(id="t1", rate_limit_per_minute=None, rate_limit_burst=None)

    assert limiter._check_rate_limit(tenant) == (True, 0)


def test_middleware_answers_429_with_retry_after():
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, redis_client=FakeRedis(), enabled=True)

    @app.middleware("http")
    async def attach_tenant(request: Request, call_next):
        request.state.tenant = SimpleNamespace(id="t1", rate_limit_per_minute=1, rate_limit_burst=1)
        return await call_next(request)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    client = TestClient(app)
    assert client.get("/ping").status_code == 200

    res = client.get("/ping")
    assert res.status_code == 429
    assert res.json()["type"] == "rate_limit_exceeded"
    assert int(res.headers["Retry-After"]) == res.json()["retry_after"]
