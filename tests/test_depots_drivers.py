from fleetpro.models import Driver


def _make_depot(client, fleet, slug="acme", **overrides):
    payload = {"name": "Manchester North", "address": {"street": "1 Dock Rd", "city": "Manchester"}}
    payload.update(overrides)
    res = client.post("/api/v1/depots", json=payload, headers=fleet.header("admin", slug))
    assert res.status_code == 201, res.text
    return res.json()


def _driver_id(db, fleet, slug="acme"):
    return db.query(Driver).filter(Driver.tenant_id == fleet.tenant_id(slug)).one().id


def test_create_depot_defaults_operating_hours(client, fleet):
    depot = _make_depot(client, fleet, facilities=["fuel_station", "wash_bay"])

    assert depot["tenant_id"] == fleet.tenant_id("acme")
    assert depot["operating_hours"]["monday"] == {"open": "08:00", "close": "18:00"}
    assert depot["operating_hours"]["sunday"] == {"open": "10:00", "close": "16:00"}
    assert depot["facilities"] == ["fuel_station", "wash_bay"]


def test_create_depot_rejects_unknown_facility(client, fleet):
    res = client.post(
        "/api/v1/depots",
        json={"name": "Bad", "facilities": ["helipad"]},
        headers=fleet.header("admin"),
    )
    assert res.status_code == 422


def test_super_user_creates_depot_in_named_tenant(client, fleet):
    missing = client.post("/api/v1/depots", json={"name": "HQ"}, headers=fleet.header("super_user"))
    assert missing.status_code == 400

    res = client.post(
        "/api/v1/depots",
        json={"name": "HQ", "tenant_id": fleet.tenant_id("globex")},
        headers=fleet.header("super_user"),
    )
    assert res.status_code == 201
    assert res.json()["tenant_id"] == fleet.tenant_id("globex")

    # Admins never pick the tenant
    own = _make_depot(client, fleet, tenant_id=fleet.tenant_id("globex"))
    assert own["tenant_id"] == fleet.tenant_id("acme")


def test_super_user_lists_depots_across_tenants(client, fleet):
    _make_depot(client, fleet)
    _make_depot(client, fleet, slug="globex")

    assert client.get("/api/v1/depots", headers=fleet.header("admin")).json()["total"] == 1
    assert client.get("/api/v1/depots", headers=fleet.header("super_user")).json()["total"] == 2


def test_update_and_delete_depot(client, fleet):
    depot = _make_depot(client, fleet)
    url = f"/api/v1/depots/{depot['id']}"

    res = client.patch(url, json={"capacity": 40, "is_active": False}, headers=fleet.header("admin"))
    assert res.json()["capacity"] == 40
    assert res.json()["is_active"] is False

    assert client.delete(url, headers=fleet.header("admin")).status_code == 204
    assert client.get(url, headers=fleet.header("admin")).status_code == 404


def test_list_drivers_includes_user(client, fleet):
    res = client.get("/api/v1/drivers", headers=fleet.header("admin"))

    assert res.status_code == 200
    drivers = res.json()["drivers"]
    assert len(drivers) == 1
    assert drivers[0]["user"]["email"] == "driver@acme.example.com"
    assert drivers[0]["depot_id"] is None


def test_driver_depot_assignment(client, fleet, db):
    depot = _make_depot(client, fleet)
    other = _make_depot(client, fleet, name="Leeds South")
    url = f"/api/v1/drivers/{_driver_id(db, fleet)}"

    assigned = client.patch(url, json={"depot_id": depot["id"]}, headers=fleet.header("admin"))
    assert assigned.json()["depot_id"] == depot["id"]

    moved = client.patch(url, json={"depot_id": other["id"]}, headers=fleet.header("admin"))
    assert moved.json()["depot_id"] == other["id"]

    in_depot = client.get(f"/api/v1/drivers?depot_id={other['id']}", headers=fleet.header("admin"))
    assert in_depot.json()["total"] == 1

    # Leaving depot_id out keeps the assignment
    renamed = client.patch(url, json={"status": "on_duty"}, headers=fleet.header("admin"))
    assert renamed.json()["depot_id"] == other["id"]
    assert renamed.json()["status"] == "on_duty"

    removed = client.patch(url, json={"depot_id": None}, headers=fleet.header("admin"))
    assert removed.json()["depot_id"] is None


def test_driver_depot_from_other_tenant(client, fleet, db):
    depot = _make_depot(client, fleet, slug="globex")

    res = client.patch(
        f"/api/v1/drivers/{_driver_id(db, fleet)}",
        json={"depot_id": depot["id"]},
        headers=fleet.header("admin"),
    )
    assert res.status_code == 404


def test_create_driver_for_user(client, fleet):
    user = client.post(
        "/api/v1/users",
        json={
            "email": "ops@acme.example.com",
            "password": "secret123",
            "first_name": "Ops",
            "last_name": "Person",
            "role": "admin",
        },
        headers=fleet.header("admin"),
    ).json()

    payload = {"user_id": user["id"], "licence_number": "OPSPE701015OP9AB", "licence_expiry": "2031-06-30"}
    res = client.post("/api/v1/drivers", json=payload, headers=fleet.header("admin"))
    assert res.status_code == 201
    assert res.json()["max_driving_hours"] == 9.0

    again = client.post("/api/v1/drivers", json=payload, headers=fleet.header("admin"))
    assert again.status_code == 400


def test_licence_numbers_are_unique(client, fleet, db):
    acme_driver = _driver_id(db, fleet)
    globex_driver = _driver_id(db, fleet, "globex")

    first = client.patch(
        f"/api/v1/drivers/{acme_driver}",
        json={"licence_number": "SMITH901015JJ9AB"},
        headers=fleet.header("admin"),
    )
    assert first.status_code == 200

    clash = client.patch(
        f"/api/v1/drivers/{globex_driver}",
        json={"licence_number": "SMITH901015JJ9AB"},
        headers=fleet.header("admin", "globex"),
    )
    assert clash.status_code == 400


def test_filter_drivers_by_status(client, fleet):
    assert client.get("/api/v1/drivers?status=on_duty", headers=fleet.header("admin")).json()["total"] == 0
    assert client.get("/api/v1/drivers?status=available", headers=fleet.header("admin")).json()["total"] == 1


def test_delete_driver(client, fleet, db):
    url = f"/api/v1/drivers/{_driver_id(db, fleet)}"
    assert client.delete(url, headers=fleet.header("admin")).status_code == 204
    assert client.get(url, headers=fleet.header("admin")).status_code == 404
