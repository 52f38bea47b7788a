from fleetpro.models import Driver, MaintenanceProvider, User


def test_list_users_is_tenant_scoped(client, fleet):
    res = client.get("/api/v1/users", headers=fleet.header("admin"))

    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 4
    assert {u["tenant_id"] for u in body["users"]} == {fleet.tenant_id("acme")}


def test_super_user_lists_every_organisation(client, fleet):
    res = client.get("/api/v1/users?page_size=100", headers=fleet.header("super_user"))
    assert res.json()["total"] == 8


def test_list_users_filters_by_role(client, fleet):
    res = client.get("/api/v1/users?role=driver", headers=fleet.header("admin"))
    users = res.json()["users"]
    assert [u["role"] for u in users] == ["driver"]
    assert users[0]["driver"] is not None


def test_create_driver_user_creates_driver_record(client, fleet, db):
    res = client.post(
        "/api/v1/users",
        json={
            "email": "jo@acme.example.com",
            "password": "secret123",
            "first_name": "Jo",
            "last_name": "Bloggs",
            "role": "driver",
            "licence_number": "BLOGG801015JO9AB",
            "licence_expiry": "2030-01-01",
        },
        headers=fleet.header("admin"),
    )

    assert res.status_code == 201
    body = res.json()
    assert body["profile"] == {"first_name": "Jo", "last_name": "Bloggs", "department": "Driving"}
    assert body["driver"]["licence_number"] == "BLOGG801015JO9AB"
    assert db.query(Driver).filter(Driver.user_id == body["id"]).count() == 1


def test_create_provider_user_creates_provider_record(client, fleet, db):
    res = client.post(
        "/api/v1/users",
        json={
            "email": "fixit@acme.example.com",
            "password": "secret123",
            "first_name": "Fix",
            "last_name": "It",
            "role": "maintenance_provider",
            "company_name": "Fix-It Garage",
            "contact_phone": "0161 000 0000",
            "address": {"street": "", "city": "Leeds"},
            "specializations": ["Brake Systems", "Tire Services"],
        },
        headers=fleet.header("admin"),
    )

    assert res.status_code == 201
    provider = db.query(MaintenanceProvider).filter(
        MaintenanceProvider.user_id == res.json()["id"]
    ).one()
    assert provider.name == "Fix-It Garage"
    assert provider.phone == "0161 000 0000"
    assert provider.email == "fixit@acme.example.com"
    assert provider.address is None
    assert provider.specializations == ["Brake Systems", "Tire Services"]


def test_create_user_rejects_unknown_specialization(client, fleet):
    res = client.post(
        "/api/v1/users",
        json={
            "email": "x@acme.example.com",
            "password": "secret123",
            "first_name": "X",
            "last_name": "Y",
            "role": "maintenance_provider",
            "specializations": ["teleportation"],
        },
        headers=fleet.header("admin"),
    )
    assert res.status_code == 422


def test_create_user_duplicate_email(client, fleet):
    res = client.post(
        "/api/v1/users",
        json={
            "email": "driver@acme.example.com",
            "password": "secret123",
            "first_name": "D",
            "last_name": "D",
        },
        headers=fleet.header("admin"),
    )
    assert res.status_code == 400


def test_super_user_must_pick_organisation(client, fleet):
    payload = {
        "email": "new.admin@globex.example.com",
        "password": "secret123",
        "first_name": "New",
        "last_name": "Admin",
        "role": "admin",
    }

    missing = client.post("/api/v1/users", json=payload, headers=fleet.header("super_user"))
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Please select an organization for the user"

    payload["organization_id"] = fleet.tenant_id("globex")
    created = client.post("/api/v1/users", json=payload, headers=fleet.header("super_user"))
    assert created.status_code == 201
    assert created.json()["tenant_id"] == fleet.tenant_id("globex")


def test_only_super_user_creates_super_users(client, fleet):
    payload = {
        "email": "root@acme.example.com",
        "password": "secret123",
        "first_name": "Root",
        "last_name": "User",
        "role": "super_user",
    }
    res = client.post("/api/v1/users", json=payload, headers=fleet.header("admin"))
    assert res.status_code == 403


def test_user_updates_own_profile(client, fleet):
    user_id = fleet.user_id("driver")

    res = client.patch(
        f"/api/v1/users/{user_id}",
        json={"first_name": "Renamed", "profile": {"phone": "07700 900000"}},
        headers=fleet.header("driver"),
    )

    assert res.status_code == 200
    body = res.json()
    assert body["first_name"] == "Renamed"
    assert body["profile"]["first_name"] == "Renamed"
    assert body["profile"]["phone"] == "07700 900000"


def test_user_cannot_update_someone_else(client, fleet):
    res = client.patch(
        f"/api/v1/users/{fleet.user_id('admin')}",
        json={"first_name": "Hacked"},
        headers=fleet.header("driver"),
    )
    assert res.status_code == 403
    assert res.json()["redirect_to"] == "/driver"


def test_user_cannot_change_own_role(client, fleet):
    res = client.patch(
        f"/api/v1/users/{fleet.user_id('driver')}",
        json={"role": "admin"},
        headers=fleet.header("driver"),
    )
    assert res.status_code == 403


def test_admin_changes_role(client, fleet, db):
    res = client.patch(
        f"/api/v1/users/{fleet.user_id('driver')}",
        json={"role": "maintenance_provider"},
        headers=fleet.header("admin"),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["role"] == "maintenance_provider"
    assert body["profile"]["department"] == "Maintenance"
    assert body["maintenance_provider"] is not None
    assert db.query(MaintenanceProvider).filter(MaintenanceProvider.user_id == body["id"]).count() == 1


def test_admin_cannot_modify_super_user(client, fleet):
    url = f"/api/v1/users/{fleet.user_id('super_user')}"

    demoted = client.patch(url, json={"role": "driver"}, headers=fleet.header("admin"))
    assert demoted.status_code == 403
    assert demoted.json()["redirect_to"] == "/dashboard"

    renamed = client.patch(url, json={"first_name": "Root"}, headers=fleet.header("super_user"))
    assert renamed.status_code == 200


def test_delete_user(client, fleet, db):
    driver_user = fleet.user_id("driver")

    res = client.delete(f"/api/v1/users/{driver_user}", headers=fleet.header("admin"))

    assert res.status_code == 204
    assert db.query(User).filter(User.id == driver_user).count() == 0
    assert db.query(Driver).filter(Driver.user_id == driver_user).count() == 0


def test_cannot_delete_self(client, fleet):
    res = client.delete(f"/api/v1/users/{fleet.user_id('admin')}", headers=fleet.header("admin"))
    assert res.status_code == 400


def test_create_driver_user_duplicate_licence(client, fleet, db):
    def create(email):
        return client.post(
            "/api/v1/users",
            json={
                "email": email,
                "password": "secret123",
                "first_name": "Sam",
                "last_name": "Driver",
                "role": "driver",
                "licence_number": "LIC123",
            },
            headers=fleet.header("admin"),
        )

    assert create("sam@acme.example.com").status_code == 201

    res = create("sam2@acme.example.com")
    assert res.status_code == 400
    assert res.json()["detail"] == "Licence number already registered: LIC123"
    assert db.query(User).filter(User.email == "sam2@acme.example.com").count() == 0
