from fleetpro.models import MaintenanceProvider


def _create(client, fleet, **payload):
    return client.post("/api/v1/maintenance-providers", json=payload, headers=fleet.header("admin"))


def test_create_with_new_field_names(client, fleet, db):
    res = _create(
        client, fleet,
        company_name="Northern Fleet Services",
        contact_email="service@northern.example.com",
        contact_phone="0113 496 0000",
        address={"street": "4 Canal St", "city": "Leeds", "postcode": "LS1 1AA"},
        specializations=["MOT Testing", "Brake Systems"],
    )

    assert res.status_code == 201
    body = res.json()
    # Both spellings come back
    assert body["name"] == body["company_name"] == "Northern Fleet Services"
    assert body["email"] == body["contact_email"] == "service@northern.example.com"
    assert body["phone"] == body["contact_phone"] == "0113 496 0000"

    stored = db.query(MaintenanceProvider).filter(MaintenanceProvider.id == body["id"]).one()
    assert stored.name == "Northern Fleet Services"
    assert stored.address["street"] == "4 Canal St"


def test_create_with_legacy_field_names(client, fleet):
    res = _create(client, fleet, name="Old Style Garage", email="old@garage.example.com", phone="01632 960000")

    assert res.status_code == 201
    assert res.json()["company_name"] == "Old Style Garage"
    assert res.json()["contact_phone"] == "01632 960000"


def test_new_spelling_wins(client, fleet):
    res = _create(client, fleet, name="Legacy Name", company_name="New Name")
    assert res.json()["name"] == "New Name"


def test_address_without_street_is_dropped(client, fleet):
    res = _create(client, fleet, company_name="No Street Ltd", address={"street": "  ", "city": "York"})
    assert res.json()["address"] is None


def test_name_is_required(client, fleet):
    assert _create(client, fleet, contact_email="x@example.com").status_code == 422


def test_unknown_specialization(client, fleet):
    assert _create(client, fleet, company_name="X", specializations=["Juggling"]).status_code == 422


def test_update_with_either_spelling(client, fleet):
    provider = _create(client, fleet, company_name="Before").json()
    url = f"/api/v1/maintenance-providers/{provider['id']}"

    renamed = client.patch(url, json={"company_name": "After"}, headers=fleet.header("admin"))
    assert renamed.json()["name"] == "After"

    rephoned = client.patch(url, json={"phone": "0800 000 000"}, headers=fleet.header("admin"))
    assert rephoned.json()["contact_phone"] == "0800 000 000"
    assert rephoned.json()["name"] == "After"


def test_toggle_active(client, fleet):
    provider = _create(client, fleet, company_name="Toggle Ltd").json()
    url = f"/api/v1/maintenance-providers/{provider['id']}/toggle-active"

    assert client.post(url, headers=fleet.header("admin")).json()["is_active"] is False
    assert client.post(url, headers=fleet.header("admin")).json()["is_active"] is True


def test_list_filters(client, fleet):
    _create(client, fleet, company_name="Brakes R Us", specializations=["Brake Systems"])
    inactive = _create(client, fleet, company_name="Closed Down", is_active=False)
    assert inactive.status_code == 201

    by_specialization = client.get(
        "/api/v1/maintenance-providers?specialization=Brake Systems", headers=fleet.header("admin")
    ).json()
    assert [p["name"] for p in by_specialization["maintenance_providers"]] == ["Brakes R Us"]

    active = client.get("/api/v1/maintenance-providers?is_active=true", headers=fleet.header("admin")).json()
    # Seeded provider plus Brakes R Us
    assert active["total"] == 2


def test_delete_provider(client, fleet):
    provider = _create(client, fleet, company_name="Gone Ltd").json()
    url = f"/api/v1/maintenance-providers/{provider['id']}"

    assert client.delete(url, headers=fleet.header("admin")).status_code == 204
    assert client.get(url, headers=fleet.header("admin")).status_code == 404


def test_providers_are_admin_only(client, fleet):
    res = client.get("/api/v1/maintenance-providers", headers=fleet.header("maintenance_provider"))
    assert res.status_code == 403
