from datetime import datetime, timedelta

from fleetpro.models import UserInvitation, User, Driver, MaintenanceProvider


def _login(client, email, password, slug="acme"):
    return client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password, "tenant_slug": slug},
        headers={"X-Tenant-Slug": slug},
    )


def test_login_returns_token_role_and_landing_page(client, fleet):
    res = _login(client, "maintenance_provider@acme.example.com", fleet.password)

    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "maintenance_provider"
    assert body["redirect_to"] == "/maintenance"

    me = client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {body['access_token']}", "X-Tenant-Slug": "acme"},
    )
    assert me.status_code == 200
    assert me.json()["email"] == "maintenance_provider@acme.example.com"
    assert me.json()["maintenance_provider"]["name"] == "Acme Haulage Garage"


def test_login_records_last_login(client, fleet, db):
    assert _login(client, "admin@acme.example.com", fleet.password).status_code == 200

    user = db.query(User).filter(User.id == fleet.user_id("admin")).one()
    assert user.last_login_at is not None


def test_login_failures_are_generic(client, fleet):
    wrong_password = _login(client, "admin@acme.example.com", "nope")
    unknown_email = _login(client, "ghost@acme.example.com", fleet.password)

    for res in (wrong_password, unknown_email):
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid credentials"


def test_login_is_scoped_to_tenant(client, fleet):
    res = _login(client, "admin@acme.example.com", fleet.password, slug="globex")
    assert res.status_code == 401


def test_register_creates_driver(client, fleet):
    res = client.post(
        "/api/v1/auth/register",
        json={
            "email": "new.driver@acme.example.com",
            "password": "secret123",
            "first_name": "Sam",
            "last_name": "Taylor",
            "tenant_slug": "acme",
        },
        headers={"X-Tenant-Slug": "acme"},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["role"] == "driver"
    assert body["tenant_id"] == fleet.tenant_id("acme")
    assert body["profile"]["department"] == "Driving"


def test_register_rejects_duplicate_email_and_unknown_tenant(client, fleet):
    payload = {
        "email": "admin@acme.example.com",
        "password": "secret123",
        "first_name": "Dup",
        "last_name": "User",
        "tenant_slug": "acme",
    }
    assert client.post(
        "/api/v1/auth/register", json=payload, headers={"X-Tenant-Slug": "acme"}
    ).status_code == 400

    payload.update(email="someone@nowhere.example.com", tenant_slug="nowhere")
    assert client.post(
        "/api/v1/auth/register", json=payload, headers={"X-Tenant-Slug": "acme"}
    ).status_code == 404


def test_me_requires_token(client, fleet):
    res = client.get("/api/v1/auth/me", headers={"X-Tenant-Slug": "acme"})
    assert res.status_code == 401
    assert res.json()["type"] == "authentication_error"


def test_me_includes_driver_record(client, fleet):
    res = client.get("/api/v1/auth/me", headers=fleet.header("driver"))
    assert res.status_code == 200
    assert res.json()["driver"]["status"] == "available"


def _invite(client, fleet, role="driver", email="invitee@acme.example.com"):
    res = client.post(
        "/api/v1/invitations",
        json={"email": email, "first_name": "Ivy", "last_name": "Invitee", "role": role},
        headers=fleet.header("admin"),
    )
    assert res.status_code == 201, res.text
    return res.json()


def test_invitation_link_and_lookup(client, fleet):
    created = _invite(client, fleet)

    assert created["invitation_link"].endswith(f"/auth/invited-signup?token={created['invitation_token']}")

    res = client.get(f"/api/v1/auth/invitations/{created['invitation_token']}")
    assert res.status_code == 200
    assert res.json()["organization_name"] == "Acme Haulage"
    assert res.json()["role"] == "driver"


def test_accept_invitation_creates_provider(client, fleet, db):
    created = _invite(client, fleet, role="maintenance_provider")
    token = created["invitation_token"]

    res = client.post(
        f"/api/v1/auth/invitations/{token}/accept",
        json={"password": "hunter22", "confirm_password": "hunter22"},
    )

    assert res.status_code == 201
    user = res.json()
    assert user["role"] == "maintenance_provider"
    assert user["profile"]["department"] == "Maintenance"

    provider = db.query(MaintenanceProvider).filter(MaintenanceProvider.user_id == user["id"]).one()
    assert provider.name == "Ivy Invitee"

    # Single use
    assert client.get(f"/api/v1/auth/invitations/{token}").status_code == 404
    login = _login(client, "invitee@acme.example.com", "hunter22")
    assert login.status_code == 200
    assert login.json()["redirect_to"] == "/maintenance"


def test_accept_invitation_creates_driver(client, fleet, db):
    token = _invite(client, fleet)["invitation_token"]

    res = client.post(
        f"/api/v1/auth/invitations/{token}/accept",
        json={"password": "hunter22", "confirm_password": "hunter22"},
    )

    assert res.status_code == 201
    assert db.query(Driver).filter(Driver.user_id == res.json()["id"]).count() == 1


def test_accept_invitation_validates_passwords(client, fleet):
    token = _invite(client, fleet)["invitation_token"]
    url = f"/api/v1/auth/invitations/{token}/accept"

    mismatch = client.post(url, json={"password": "hunter22", "confirm_password": "hunter23"})
    too_short = client.post(url, json={"password": "abc", "confirm_password": "abc"})

    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "Passwords do not match"
    assert too_short.status_code == 400


def test_expired_invitation_is_not_found(client, fleet, db):
    created = _invite(client, fleet)
    invitation = db.query(UserInvitation).filter(
        UserInvitation.id == created["invitation"]["id"]
    ).one()
    invitation.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    res = client.get(f"/api/v1/auth/invitations/{created['invitation_token']}")
    assert res.status_code == 404


def test_invitation_list_and_revoke(client, fleet):
    created = _invite(client, fleet)

    listed = client.get("/api/v1/invitations?pending_only=true", headers=fleet.header("admin"))
    assert listed.json()["total"] == 1

    res = client.delete(
        f"/api/v1/invitations/{created['invitation']['id']}", headers=fleet.header("admin")
    )
    assert res.status_code == 204
    assert client.get(f"/api/v1/auth/invitations/{created['invitation_token']}").status_code == 404


def test_admin_cannot_invite_super_user(client, fleet):
    res = client.post(
        "/api/v1/invitations",
        json={"email": "boss@acme.example.com", "first_name": "B", "last_name": "S", "role": "super_user"},
        headers=fleet.header("admin"),
    )
    assert res.status_code == 403
    assert res.json()["redirect_to"] == "/dashboard"


def test_cannot_invite_existing_user(client, fleet):
    res = client.post(
        "/api/v1/invitations",
        json={"email": "driver@acme.example.com", "first_name": "D", "last_name": "R"},
        headers=fleet.header("admin"),
    )
    assert res.status_code == 400
