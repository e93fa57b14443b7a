"""
Tests for the menu items router.
"""
from fastapi.testclient import TestClient


class TestListMenuItems:

    def test_public_list_hides_unavailable(self, client: TestClient, menu_items):
        response = client.get("/api/menu-items")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["categories"] == ["Hoofdgerechten", "Voorgerechten"]
        assert "Chef Special" not in [i["name"] for i in data["items"]]

    def test_list_all(self, client: TestClient, menu_items):
        data = client.get("/api/menu-items?available_only=false").json()
        assert data["total"] == 3

    def test_filter_by_category(self, client: TestClient, menu_items):
        data = client.get("/api/menu-items?category=Voorgerechten").json()

        assert [i["name"] for i in data["items"]] == ["Hummus met Pita"]
        assert data["items"][0]["allergens"] == ["gluten", "sesam"]


class TestManageMenuItems:

    def test_create_requires_auth(self, client: TestClient):
        response = client.post("/api/menu-items", json={"name": "Baklava", "price": "6.50", "category": "Desserts"})
        assert response.status_code == 401

    def test_create(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/menu-items",
            json={"name": "Baklava", "price": "6.50", "category": "Desserts", "allergens": ["noten"]},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["prep_time_minutes"] == 15
        assert data["is_available"] is True

    def test_create_rejects_non_positive_price(self, client: TestClient, auth_headers: dict):
        response = client.post(
            "/api/menu-items",
            json={"name": "Free", "price": "0", "category": "Desserts"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_update(self, client: TestClient, auth_headers: dict, menu_items):
        item_id = menu_items["Chef Special"].id

        response = client.patch(f"/api/menu-items/{item_id}", json={"is_available": True}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["is_available"] is True
        assert client.get("/api/menu-items").json()["total"] == 3

    def test_delete(self, client: TestClient, auth_headers: dict, menu_items):
        item_id = menu_items["Lams Kebab"].id

        assert client.delete(f"/api/menu-items/{item_id}", headers=auth_headers).status_code == 204
        assert client.delete(f"/api/menu-items/{item_id}", headers=auth_headers).status_code == 404
