"""HTTP tests for the asset routes and the JsonOutResult envelope."""

import pytest
from fastapi.testclient import TestClient

from asset_service.app.main import app
from shared.auth import create_access_token, validate_current_token
from shared.core.database import get_asset_db
from shared.core.schemas import UserToken


@pytest.fixture
def client(db, org):
    def override_db():
        yield db

    app.dependency_overrides[get_asset_db] = override_db
    app.dependency_overrides[validate_current_token] = lambda: UserToken(user_id="tester", org_id=org.id)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create(client, name, **fields):
    response = client.post("/api/assets/", json={"name": name, "category": "hardware", **fields})
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestAssetRoutes:
    def test_create(self, client):
        response = client.post("/api/assets/", json={"name": "Laptop", "category": "hardware"})
        body = response.json()

        assert response.status_code == 200
        assert body["status"] == "Success"
        assert body["status_code"] == "201"
        assert body["data"]["path"] == f"/{body['data']['id']}"

    def test_request_validation(self, client):
        response = client.post("/api/assets/", json={"name": "", "category": "spaceship"})
        assert response.status_code == 422
        assert response.json()["status"] == "Failure"

    def test_get_missing(self, client, random_id):
        response = client.get(f"/api/assets/{random_id}")
        assert response.status_code == 404
        assert response.json()["status_code"] == "105"

    def test_tree_and_ancestors(self, client):
        a = _create(client, "A")
        b = _create(client, "B", parent_id=a["id"])
        c = _create(client, "C", parent_id=b["id"])

        tree = client.get("/api/assets/tree").json()["data"]
        assert [n["id"] for n in tree] == [a["id"]]
        assert tree[0]["children"][0]["id"] == b["id"]
        assert tree[0]["children"][0]["children"][0]["id"] == c["id"]
        leaf = tree[0]["children"][0]["children"][0]
        assert leaf["children"] == []
        assert leaf["path"] == f"/{a['id']}/{b['id']}/{c['id']}"

        ancestors = client.get(f"/api/assets/{c['id']}/ancestors").json()["data"]
        assert [x["id"] for x in ancestors] == [a["id"], b["id"]]

    def test_move_and_cycle(self, client):
        a = _create(client, "A")
        b = _create(client, "B", parent_id=a["id"])

        response = client.post(f"/api/assets/{a['id']}/move", json={"parent_id": b["id"]})
        assert response.status_code == 409
        assert response.json()["status_code"] == "120"

        response = client.post(f"/api/assets/{b['id']}/move", json={"parent_id": None})
        assert response.status_code == 200
        assert response.json()["data"]["path"] == f"/{b['id']}"

    def test_status_transitions(self, client):
        asset = _create(client, "Old PC")
        url = f"/api/assets/{asset['id']}/status"

        assert client.patch(url, json={"status": "retired"}).json()["data"]["status"] == "retired"
        response = client.patch(url, json={"status": "operational"})
        assert response.status_code == 409
        assert response.json()["status_code"] == "123"
        assert response.json()["data"] == {"from": "retired", "to": "operational"}

    def test_delete_with_children(self, client):
        parent = _create(client, "Parent")
        _create(client, "Child", parent_id=parent["id"])

        response = client.delete(f"/api/assets/{parent['id']}")
        assert response.status_code == 409
        assert response.json()["status_code"] == "121"

        response = client.delete(f"/api/assets/{parent['id']}", params={"cascade": "true"})
        assert response.status_code == 200
        assert len(response.json()["data"]["deleted_ids"]) == 2

    def test_update(self, client):
        asset = _create(client, "Laptop")
        response = client.put(f"/api/assets/{asset['id']}", json={"serial_number": "SN-42"})
        data = response.json()["data"]
        assert data["serial_number"] == "SN-42"
        assert data["name"] == "Laptop"

    def test_list_and_overview(self, client):
        _create(client, "Laptop 1", purchase_price=1000)
        _create(client, "Laptop 2", purchase_price=500)
        _create(client, "Printer")

        listing = client.get("/api/assets/all", params={"search": "laptop", "sort_by": "name", "sort_order": "asc"})
        data = listing.json()["data"]
        assert data["total"] == 2
        assert [a["name"] for a in data["assets"]] == ["Laptop 1", "Laptop 2"]

        overview = client.get("/api/assets/overview").json()["data"]
        assert overview["total"] == 3
        assert overview["total_value"] == 1500

    def test_lookups(self, client):
        statuses = client.get("/api/assets/status-lookup").json()
        assert {"id": "operational", "name": "Operational"} in statuses
        categories = client.get("/api/assets/category-lookup").json()
        assert len(categories) == 7


class TestAuthentication:
    @pytest.fixture
    def raw_client(self, db):
        def override_db():
            yield db

        app.dependency_overrides[get_asset_db] = override_db
        with TestClient(app) as test_client:
            yield test_client
        app.dependency_overrides.clear()

    def test_missing_token(self, raw_client):
        assert raw_client.get("/api/assets/all").status_code in (401, 403)

    def test_invalid_token(self, raw_client):
        response = raw_client.get("/api/assets/all", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_token_without_org(self, raw_client):
        token = create_access_token({"user_id": "u-1"})
        response = raw_client.get("/api/assets/all", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403
        assert response.json()["status_code"] == "111"

    def test_token_scopes_tenant(self, raw_client, org):
        token = create_access_token({"user_id": "u-1", "org_id": str(org.id)})
        headers = {"Authorization": f"Bearer {token}"}

        created = raw_client.post("/api/assets/", json={"name": "Badge reader", "category": "hardware"},
                                  headers=headers)
        assert created.json()["data"]["org_id"] == str(org.id)
        assert raw_client.get("/api/assets/all", headers=headers).json()["data"]["total"] == 1
