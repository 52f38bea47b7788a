import pytest


@pytest.fixture
def vehicle(make_vehicle):
    return make_vehicle()


def _report(client, fleet, vehicle_id, role="driver", defect_type="minor"):
    res = client.post(
        "/api/v1/defects",
        json={"vehicle_id": vehicle_id, "defect_type": defect_type, "description": "Cracked wing mirror"},
        headers=fleet.header(role),
    )
    assert res.status_code == 201, res.text
    return res.json()


def test_driver_reports_defect(client, fleet, vehicle):
    defect = _report(client, fleet, vehicle["id"])

    assert defect["status"] == "open"
    assert defect["reported_by"] == fleet.user_id("driver")


def test_list_defects_filters(client, fleet, vehicle, make_vehicle):
    other = make_vehicle()
    first = _report(client, fleet, vehicle["id"])
    _report(client, fleet, other["id"], role="admin", defect_type="major")

    client.patch(
        f"/api/v1/defects/{first['id']}/status",
        json={"status": "completed"},
        headers=fleet.header("maintenance_provider"),
    )

    by_vehicle = client.get(f"/api/v1/defects?vehicle_id={vehicle['id']}", headers=fleet.header("admin"))
    assert [d["id"] for d in by_vehicle.json()["defects"]] == [first["id"]]

    open_only = client.get("/api/v1/defects?status=open", headers=fleet.header("driver"))
    assert open_only.json()["total"] == 1
    assert open_only.json()["defects"][0]["defect_type"] == "major"


def test_only_fleet_staff_change_status(client, fleet, vehicle):
    defect = _report(client, fleet, vehicle["id"])
    url = f"/api/v1/defects/{defect['id']}/status"

    denied = client.patch(url, json={"status": "closed"}, headers=fleet.header("driver"))
    assert denied.status_code == 403
    assert denied.json()["redirect_to"] == "/driver"

    res = client.patch(url, json={"status": "in_progress"}, headers=fleet.header("admin"))
    assert res.json()["status"] == "in_progress"


def test_invalid_defect_status(client, fleet, vehicle):
    defect = _report(client, fleet, vehicle["id"])
    res = client.patch(
        f"/api/v1/defects/{defect['id']}/status",
        json={"status": "ignored"},
        headers=fleet.header("admin"),
    )
    assert res.status_code == 422


def _work_order(client, fleet, vehicle_id, **extra):
    payload = {"vehicle_id": vehicle_id, "title": "Replace mirror"}
    payload.update(extra)
    return client.post("/api/v1/work-orders", json=payload, headers=fleet.header("admin"))


def test_create_work_order(client, fleet, vehicle):
    defect = _report(client, fleet, vehicle["id"])

    res = _work_order(
        client, fleet, vehicle["id"],
        defect_id=defect["id"],
        priority="high",
        estimated_cost=120.5,
        assigned_mechanic_id=fleet.user_id("maintenance_provider"),
    )

    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "open"
    assert body["priority"] == "high"
    assert body["estimated_cost"] == 120.5
    assert body["actual_start"] is None


def test_work_order_references_must_be_in_tenant(client, fleet, vehicle, make_vehicle):
    foreign_vehicle = make_vehicle("globex")

    assert _work_order(client, fleet, foreign_vehicle["id"]).status_code == 404
    assert _work_order(
        client, fleet, vehicle["id"], assigned_mechanic_id=fleet.user_id("admin", "globex")
    ).status_code == 404
    assert _work_order(client, fleet, vehicle["id"], defect_id="missing").status_code == 404


def test_defect_must_match_vehicle(client, fleet, vehicle, make_vehicle):
    other = make_vehicle()
    defect = _report(client, fleet, other["id"])

    assert _work_order(client, fleet, vehicle["id"], defect_id=defect["id"]).status_code == 400


def test_status_transitions_stamp_times(client, fleet, vehicle):
    work_order = _work_order(client, fleet, vehicle["id"]).json()
    url = f"/api/v1/work-orders/{work_order['id']}"

    started = client.patch(url, json={"status": "in_progress"}, headers=fleet.header("maintenance_provider"))
    assert started.json()["actual_start"] is not None
    assert started.json()["actual_end"] is None

    finished = client.patch(
        url, json={"status": "completed", "actual_cost": 95.0}, headers=fleet.header("maintenance_provider")
    )
    body = finished.json()
    assert body["actual_end"] is not None
    assert body["actual_start"] == started.json()["actual_start"]
    assert body["actual_cost"] == 95.0


def test_schedule_window_must_be_ordered(client, fleet, vehicle):
    res = _work_order(
        client, fleet, vehicle["id"],
        scheduled_start="2030-05-02T09:00:00",
        scheduled_end="2030-05-01T09:00:00",
    )
    assert res.status_code == 400


def test_list_work_orders_filters(client, fleet, vehicle, make_vehicle):
    other = make_vehicle()
    urgent = _work_order(client, fleet, vehicle["id"], priority="urgent").json()
    _work_order(client, fleet, other["id"])

    def total(query):
        return client.get(f"/api/v1/work-orders?{query}", headers=fleet.header("admin")).json()["total"]

    assert total("priority=urgent") == 1
    assert total(f"vehicle_id={other['id']}") == 1
    assert total("status=open") == 2

    client.patch(
        f"/api/v1/work-orders/{urgent['id']}", json={"status": "cancelled"}, headers=fleet.header("admin")
    )
    assert total("status=cancelled") == 1


def test_delete_work_order(client, fleet, vehicle):
    work_order = _work_order(client, fleet, vehicle["id"]).json()
    url = f"/api/v1/work-orders/{work_order['id']}"

    assert client.delete(url, headers=fleet.header("admin")).status_code == 204
    assert client.get(url, headers=fleet.header("admin")).status_code == 404


def test_drivers_cannot_manage_work_orders(client, fleet):
    assert client.get("/api/v1/work-orders", headers=fleet.header("driver")).status_code == 403


def test_schedule_accepts_mixed_timezones(client, fleet, vehicle):
    work_order = _work_order(client, fleet, vehicle["id"], scheduled_start="2026-01-01T10:00:00").json()
    url = f"/api/v1/work-orders/{work_order['id']}"

    res = client.patch(url, json={"scheduled_end": "2026-01-01T12:00:00Z"}, headers=fleet.header("admin"))
    assert res.status_code == 200
    assert res.json()["scheduled_end"] == "2026-01-01T12:00:00"

    earlier = client.patch(url, json={"scheduled_end": "2026-01-01T10:30:00+01:00"}, headers=fleet.header("admin"))
    assert earlier.status_code == 400


def test_create_with_offset_times_stores_utc(client, fleet, vehicle):
    res = _work_order(
        client, fleet, vehicle["id"],
        scheduled_start="2026-06-01T09:00:00+02:00",
        scheduled_end="2026-06-01T08:00:00",
    )
    assert res.status_code == 201
    assert res.json()["scheduled_start"] == "2026-06-01T07:00:00"
