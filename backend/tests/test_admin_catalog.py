from conftest import add_addon, add_package, add_resource

from paintball import config
from paintball.db.models import Addon, Package, Resource


def test_create_package(client, fake_session):
    response = client.post(
        "/v1/admin/packages",
        json={
            "name": "Punisher",
            "priceCents": 3500,
            "durationMin": 120,
            "includedBalls": 450,
            "isPromo": True,
        },
    )

    body = response.json()
    assert response.status_code == 201
    assert body["data"]["package"] == {
        "id": 1,
        "name": "Punisher",
        "priceCents": 3500,
        "durationMin": 120,
        "includedBalls": 450,
        "isPromo": True,
        "isPublic": True,
    }
    assert len(fake_session.store[Package]) == 1


def test_create_package_rejects_negative_price(client, fake_session):
    response = client.post(
        "/v1/admin/packages",
        json={"name": "Broken", "priceCents": -1, "durationMin": 60},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_ARGS"


def test_public_packages_hide_private_ones_and_sort_by_price(client, fake_session):
    add_package(fake_session, name="Player", price_cents=3000)
    add_package(fake_session, name="Tout public", price_cents=1800, duration_min=90)
    add_package(fake_session, name="Groupe privé", price_cents=1500, is_public=False)

    public = client.get("/v1/public/packages").json()["data"]["packages"]
    admin = client.get("/v1/admin/packages").json()["data"]["packages"]

    assert [p["name"] for p in public] == ["Tout public", "Player"]
    assert [p["name"] for p in admin] == ["Groupe privé", "Tout public", "Player"]


def test_update_package_patches_only_given_fields(client, fake_session):
    package = add_package(fake_session, name="Découverte", price_cents=2000)

    response = client.patch(f"/v1/admin/packages/{package.id}", json={"priceCents": 2200})

    updated = response.json()["data"]["package"]
    assert updated["priceCents"] == 2200
    assert updated["name"] == "Découverte"
    assert package.price_cents == 2200


def test_update_package_requires_a_change(client, fake_session):
    package = add_package(fake_session)

    response = client.patch(f"/v1/admin/packages/{package.id}", json={})

    assert response.status_code == 400


def test_update_unknown_package(client, fake_session):
    response = client.patch("/v1/admin/packages/12", json={"name": "Ghost"})

    assert response.status_code == 404
    assert response.json()["error_code"] == "PACKAGE_NOT_FOUND"


def test_delete_package(client, fake_session):
    package = add_package(fake_session)

    response = client.delete(f"/v1/admin/packages/{package.id}")

    assert response.status_code == 200
    assert response.json()["data"]["deleted_id"] == package.id
    assert fake_session.store[Package] == []


def test_addon_crud(client, fake_session):
    created = client.post("/v1/admin/addons", json={"name": "Combinaison", "priceCents": 400})
    addon_id = created.json()["data"]["addon"]["id"]
    add_addon(fake_session, name="Gants coqués", price_cents=250)

    patched = client.patch(f"/v1/admin/addons/{addon_id}", json={"priceCents": 450})
    listed = client.get("/v1/public/addons").json()["data"]["addons"]
    deleted = client.delete(f"/v1/admin/addons/{addon_id}")

    assert created.status_code == 201
    assert patched.json()["data"]["addon"]["priceCents"] == 450
    assert [a["name"] for a in listed] == ["Gants coqués", "Combinaison"]
    assert deleted.status_code == 200
    assert [a.name for a in fake_session.store[Addon]] == ["Gants coqués"]


def test_delete_unknown_addon(client, fake_session):
    response = client.delete("/v1/admin/addons/5")

    assert response.status_code == 404
    assert response.json()["error_code"] == "ADDON_NOT_FOUND"


def test_resource_crud(client, fake_session):
    add_resource(fake_session, name="Terrain B")
    created = client.post("/v1/admin/resources", json={"name": "Terrain A"})
    resource_id = created.json()["data"]["resource"]["id"]

    listed = client.get("/v1/admin/resources").json()["data"]["resources"]
    patched = client.patch(f"/v1/admin/resources/{resource_id}", json={"capacity": 2})
    missing = client.delete("/v1/admin/resources/99")

    assert created.json()["data"]["resource"]["capacity"] == 1
    assert [r["name"] for r in listed] == ["Terrain A", "Terrain B"]
    assert patched.json()["data"]["resource"]["capacity"] == 2
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "RESOURCE_NOT_FOUND"
    assert len(fake_session.store[Resource]) == 2


def test_admin_routes_reject_wrong_key(client, fake_session, monkeypatch):
    monkeypatch.setattr(config, "ADMIN_API_KEY", "secret")

    response = client.get("/v1/admin/packages", headers={"X-Admin-Key": "nope"})

    assert response.status_code == 401


def test_admin_routes_fail_closed_outside_dev(client, fake_session, monkeypatch):
    monkeypatch.setattr(config, "ENV", "production")

    response = client.get("/v1/admin/resources")

    assert response.status_code == 401
    assert response.json()["detail"]["error_code"] == "ADMIN_AUTH_NOT_CONFIGURED"


def test_admin_routes_accept_configured_key(client, fake_session, monkeypatch):
    monkeypatch.setattr(config, "ENV", "production")
    monkeypatch.setattr(config, "ADMIN_API_KEY", "secret")
    add_resource(fake_session, name="Terrain A")

    response = client.get("/v1/admin/resources", headers={"X-Admin-Key": "secret"})

    assert response.status_code == 200
    assert [r["name"] for r in response.json()["data"]["resources"]] == ["Terrain A"]
