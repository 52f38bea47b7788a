from fleetpro.models import User, Vehicle


def test_list_organizations_by_name(client, fleet):
    res = client.get("/api/v1/organizations", headers=fleet.header("super_user"))

    assert res.status_code == 200
    assert [o["slug"] for o in res.json()["organizations"]] == ["acme", "globex"]


def test_create_organization(client, fleet):
    res = client.post(
        "/api/v1/organizations",
        json={"name": "Initech Freight", "slug": "initech", "settings": {"timezone": "Europe/London"}},
        headers=fleet.header("super_user"),
    )

    assert res.status_code == 201
    assert res.json()["is_active"] is True
    assert res.json()["settings"] == {"timezone": "Europe/London"}


def test_create_organization_rejects_taken_slug(client, fleet):
    res = client.post(
        "/api/v1/organizations",
        json={"name": "Acme Again", "slug": "acme"},
        headers=fleet.header("super_user"),
    )
    assert res.status_code == 400


def test_create_organization_validates_slug(client, fleet):
    res = client.post(
        "/api/v1/organizations",
        json={"name": "Bad Slug", "slug": "Bad Slug!"},
        headers=fleet.header("super_user"),
    )
    assert res.status_code == 422


def test_update_organization(client, fleet):
    res = client.patch(
        f"/api/v1/organizations/{fleet.tenant_id('globex')}",
        json={"name": "Globex Corp", "rate_limit_per_minute": 600, "settings": None},
        headers=fleet.header("super_user"),
    )

    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Globex Corp"
    assert body["rate_limit_per_minute"] == 600
    assert body["settings"] == {}


def test_delete_organization_cascades(client, fleet, make_vehicle, db):
    make_vehicle("globex")
    globex_id = fleet.tenant_id("globex")

    res = client.delete(f"/api/v1/organizations/{globex_id}", headers=fleet.header("super_user"))

    assert res.status_code == 204
    assert db.query(User).filter(User.tenant_id == globex_id).count() == 0
    assert db.query(Vehicle).filter(Vehicle.tenant_id == globex_id).count() == 0


def test_cannot_delete_own_organization(client, fleet):
    res = client.delete(
        f"/api/v1/organizations/{fleet.tenant_id('acme')}", headers=fleet.header("super_user")
    )
    assert res.status_code == 400


def test_unknown_organization(client, fleet):
    res = client.get("/api/v1/organizations/does-not-exist", headers=fleet.header("super_user"))
    assert res.status_code == 404
