"""
Tests for the admin surface
"""
import pytest


NEW_PRODUCT = {
    "name": "Slim Phone Case",
    "description": "Matte finish",
    "base_price": "19.50",
    "customization_options": {"colors": ["black", "clear"]},
}


class TestAdminAccess:
    @pytest.mark.asyncio
    async def test_customer_forbidden(self, client, customer):
        _, headers = customer
        resp = await client.get("/api/admin/stats", headers=headers)

        assert resp.status_code == 403
        assert resp.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_anonymous_unauthorized(self, client):
        assert (await client.get("/api/admin/users")).status_code == 401


class TestAdminStats:
    @pytest.mark.asyncio
    async def test_stats(self, client, admin, customer, catalog):
        _, headers = admin
        stats = (await client.get("/api/admin/stats", headers=headers)).json()

        assert stats["total_users"] == 2
        assert stats["total_products"] == 4
        assert stats["active_products"] == 4
        assert stats["total_orders"] == 0
        assert stats["total_revenue"] == 0.0


class TestAdminUsers:
    @pytest.mark.asyncio
    async def test_create_and_update_user(self, client, admin):
        _, headers = admin
        created = await client.post(
            "/api/admin/users",
            json={"email": "staff@example.com", "password": "long-enough-pw", "user_type": "admin"},
            headers=headers,
        )
        assert created.status_code == 201
        assert created.json()["user_type"] == "admin"

        updated = await client.put(
            f"/api/admin/users/{created.json()['id']}",
            json={"first_name": "Grace", "user_type": "customer"},
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["first_name"] == "Grace"
        assert updated.json()["user_type"] == "customer"

    @pytest.mark.asyncio
    async def test_blocked_user_session_rejected(self, client, admin, customer):
        _, admin_headers = admin
        user, headers = customer

        resp = await client.put(f"/api/admin/users/{user.id}/block", json={"is_blocked": True}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["is_blocked"] is True

        assert (await client.get("/api/auth/user", headers=headers)).status_code == 401

        await client.put(f"/api/admin/users/{user.id}/block", json={"is_blocked": False}, headers=admin_headers)
        assert (await client.get("/api/auth/user", headers=headers)).status_code == 200

    @pytest.mark.asyncio
    async def test_admin_cannot_block_self(self, client, admin):
        user, headers = admin
        resp = await client.put(f"/api/admin/users/{user.id}/block", json={"is_blocked": True}, headers=headers)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_user(self, client, admin):
        _, headers = admin
        resp = await client.put("/api/admin/users/9999/block", json={"is_blocked": True}, headers=headers)
        assert resp.status_code == 404


class TestAdminArtists:
    @pytest.mark.asyncio
    async def test_verify_and_set_commission(self, client, admin, customer):
        _, admin_headers = admin
        _, headers = customer
        artist = (await client.post("/api/artists", data={"bio": "hi"}, headers=headers)).json()

        listed = (await client.get("/api/admin/artists", headers=admin_headers)).json()
        assert [a["id"] for a in listed] == [artist["id"]]
        assert listed[0]["user"]["email"] == "customer@example.com"

        resp = await client.put(
            f"/api/admin/artists/{artist['id']}",
            json={"is_verified": True, "commission_rate": "0.40"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["is_verified"] is True
        assert resp.json()["commission_rate"] == 0.4

        public = (await client.get("/api/artists")).json()
        assert [a["id"] for a in public] == [artist["id"]]

    @pytest.mark.asyncio
    async def test_commission_rate_bounds(self, client, admin, customer):
        _, admin_headers = admin
        _, headers = customer
        artist = (await client.post("/api/artists", data={"bio": "hi"}, headers=headers)).json()

        resp = await client.put(
            f"/api/admin/artists/{artist['id']}",
            json={"commission_rate": "1.5"},
            headers=admin_headers,
        )
        assert resp.status_code == 400


class TestAdminCatalog:
    @pytest.mark.asyncio
    async def test_product_lifecycle(self, client, admin, catalog):
        _, headers = admin
        categories = (await client.get("/api/categories")).json()
        phone_cases = next(c for c in categories if c["slug"] == "phone-cases")

        created = await client.post(
            "/api/admin/products",
            json=dict(NEW_PRODUCT, category_id=phone_cases["id"]),
            headers=headers,
        )
        assert created.status_code == 201
        product = created.json()
        assert product["base_price"] == 19.5

        updated = await client.put(
            f"/api/admin/products/{product['id']}",
            json={"base_price": "21.00"},
            headers=headers,
        )
        assert updated.json()["base_price"] == 21.0

        public = (await client.get("/api/products", params={"category": "phone-cases"})).json()
        assert [p["id"] for p in public] == [product["id"]]

        await client.delete(f"/api/admin/products/{product['id']}", headers=headers)
        everything = (await client.get("/api/admin/products", headers=headers)).json()
        assert next(p for p in everything if p["id"] == product["id"])["is_active"] is False

    @pytest.mark.asyncio
    async def test_product_needs_existing_category(self, client, admin):
        _, headers = admin
        resp = await client.post("/api/admin/products", json=dict(NEW_PRODUCT, category_id=999), headers=headers)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_negative_price_rejected(self, client, admin, catalog):
        _, headers = admin
        resp = await client.post(
            "/api/admin/products",
            json=dict(NEW_PRODUCT, category_id=1, base_price="-1"),
            headers=headers,
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_category_crud(self, client, admin):
        _, headers = admin
        created = await client.post(
            "/api/admin/categories",
            json={"name": "Mugs", "slug": "mugs", "sort_order": 9},
            headers=headers,
        )
        assert created.status_code == 201
        category_id = created.json()["id"]

        dup = await client.post("/api/admin/categories", json={"name": "Mugs 2", "slug": "mugs"}, headers=headers)
        assert dup.status_code == 409

        renamed = await client.put(f"/api/admin/categories/{category_id}", json={"name": "Cups"}, headers=headers)
        assert renamed.json()["name"] == "Cups"

        deleted = await client.delete(f"/api/admin/categories/{category_id}", headers=headers)
        assert deleted.status_code == 200
        assert (await client.get("/api/categories")).json() == []

    @pytest.mark.asyncio
    async def test_null_required_category_fields_are_ignored(self, client, admin):
        _, headers = admin
        created = await client.post(
            "/api/admin/categories",
            json={"name": "Mugs", "slug": "mugs", "sort_order": 9},
            headers=headers,
        )
        category_id = created.json()["id"]

        resp = await client.put(
            f"/api/admin/categories/{category_id}",
            json={"name": None, "slug": None, "sort_order": None, "description": "Ceramic"},
            headers=headers,
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Mugs"
        assert body["slug"] == "mugs"
        assert body["sort_order"] == 9
        assert body["description"] == "Ceramic"

    @pytest.mark.asyncio
    async def test_category_in_use_cannot_be_deleted(self, client, admin, catalog):
        _, headers = admin
        product = catalog["Custom Keychain"]

        resp = await client.delete(f"/api/admin/categories/{product.category_id}", headers=headers)

        assert resp.status_code == 409
        assert resp.json()["error"] == "category_in_use"


class TestAdminOrders:
    @pytest.mark.asyncio
    async def test_all_orders_visible(self, client, admin, customer, catalog):
        _, admin_headers = admin
        _, headers = customer
        await client.post("/api/cart", json={"product_id": catalog["Custom Keychain"].id}, headers=headers)
        await client.post(
            "/api/orders",
            json={"shipping_address": {
                "name": "C", "email": "c@example.com", "address": "1 St",
                "city": "Town", "zip_code": "12345", "country": "US",
            }},
            headers=headers,
        )

        orders = (await client.get("/api/admin/orders", headers=admin_headers)).json()
        assert len(orders) == 1

        stats = (await client.get("/api/admin/stats", headers=admin_headers)).json()
        assert stats["pending_orders"] == 1
        assert stats["total_revenue"] == 8.99
