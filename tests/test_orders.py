"""
Tests for checkout and order history
"""
import re
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import Select, func, select
from sqlalchemy.dialects import postgresql

from printhaus.core.exceptions import EmptyCartError
from printhaus.models.artist import Artist
from printhaus.models.cart import CartItem
from printhaus.models.design import Design
from printhaus.models.order import Order
from printhaus.schemas.order import OrderCreate
from printhaus.services.order_service import OrderService

ORDER_NUMBER = re.compile(r"^PH-\d{8}-[0-9A-F]{8}$")

SHIPPING_ADDRESS = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "address": "12 Analytical Row",
    "city": "London",
    "zip_code": "N1 9GU",
    "country": "UK",
}


async def add(client, headers, product_id, **extra):
    resp = await client.post("/api/cart", json={"product_id": product_id, **extra}, headers=headers)
    assert resp.status_code == 200
    return resp.json()


async def count(session_factory, column, *conditions):
    async with session_factory() as session:
        query = select(func.count(column))
        if conditions:
            query = query.where(*conditions)
        return (await session.execute(query)).scalar_one()


@pytest.fixture
async def design(session_factory, make_user):
    """A public 5.00 design by an artist with a 25% commission rate."""
    user, _ = await make_user("artist@example.com", "artist")
    async with session_factory() as session:
        artist = Artist(user_id=user.id, bio="Prints", is_verified=True, commission_rate=Decimal("0.25"))
        session.add(artist)
        await session.flush()
        design = Design(
            artist_id=artist.id,
            title="Fox",
            image_url="/uploads/fox.png",
            price=Decimal("5.00"),
        )
        session.add(design)
        await session.commit()
        await session.refresh(design)
        return design


class TestCheckout:
    @pytest.mark.asyncio
    async def test_checkout_creates_order_and_clears_cart(self, client, customer, catalog, session_factory):
        user, headers = customer
        await add(client, headers, catalog["Classic Cotton T-Shirt"].id, quantity=2,
                  customization={"color": "red", "size": "L"})
        await add(client, headers, catalog["Custom Keychain"].id)

        resp = await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS}, headers=headers)

        assert resp.status_code == 200
        order = resp.json()
        assert ORDER_NUMBER.match(order["order_number"])
        assert order["status"] == "pending"
        assert order["payment_status"] == "pending"
        assert order["total_amount"] == 58.97
        assert order["shipping_cost"] == 0.0
        assert order["grand_total"] == 58.97
        assert len(order["items"]) == 2
        shirt_line = next(i for i in order["items"] if i["quantity"] == 2)
        assert shirt_line["unit_price"] == 24.99
        assert shirt_line["customization"] == {"color": "red", "size": "L", "material": None,
                                               "quantity": None, "text": None}
        assert shirt_line["artist_commission"] is None

        assert (await client.get("/api/cart", headers=headers)).json() == []
        assert await count(session_factory, CartItem.id, CartItem.user_id == user.id) == 0

    @pytest.mark.asyncio
    async def test_shipping_charged_below_threshold(self, client, customer, catalog):
        _, headers = customer
        await add(client, headers, catalog["Vinyl Sticker Pack"].id, customization={"quantity": "10-pack"})

        order = (await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS},
                                   headers=headers)).json()

        assert order["total_amount"] == 12.99
        assert order["shipping_cost"] == 9.99
        assert order["grand_total"] == 22.98

    @pytest.mark.asyncio
    async def test_client_total_is_ignored(self, client, customer, catalog):
        _, headers = customer
        await add(client, headers, catalog["Premium Wooden Plaque"].id)

        resp = await client.post(
            "/api/orders",
            json={"shipping_address": SHIPPING_ADDRESS, "total_amount": 0.01, "items": []},
            headers=headers,
        )

        assert resp.status_code == 200
        assert resp.json()["total_amount"] == 39.99

    @pytest.mark.asyncio
    async def test_empty_cart_rejected(self, client, customer, session_factory):
        _, headers = customer
        resp = await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS}, headers=headers)

        assert resp.status_code == 400
        assert resp.json()["error"] == "empty_cart"
        assert await count(session_factory, Order.id) == 0

    @pytest.mark.asyncio
    async def test_invalid_address_rejected(self, client, customer, catalog):
        _, headers = customer
        await add(client, headers, catalog["Custom Keychain"].id)
        bad = dict(SHIPPING_ADDRESS, email="nope")

        resp = await client.post("/api/orders", json={"shipping_address": bad}, headers=headers)

        assert resp.status_code == 400
        assert (await client.get("/api/cart", headers=headers)).json() != []

    @pytest.mark.asyncio
    async def test_design_commission_and_download_count(self, client, customer, catalog, design, session_factory):
        _, headers = customer
        line = await add(client, headers, catalog["Classic Cotton T-Shirt"].id, quantity=2,
                         design_id=design.id)
        assert line["price"] == 29.99

        order = (await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS},
                                   headers=headers)).json()

        item = order["items"][0]
        assert item["design_id"] == design.id
        # 59.98 * 0.25
        assert item["artist_commission"] == 15.0
        async with session_factory() as session:
            refreshed = await session.get(Design, design.id)
            assert refreshed.download_count == 2

    @pytest.mark.asyncio
    async def test_failure_leaves_cart_intact(self, customer, catalog, session_factory):
        user, _ = customer
        async with session_factory() as session:
            session.add(CartItem(user_id=user.id, product_id=catalog["Custom Keychain"].id,
                                 quantity=1, price=Decimal("8.99"), customization={}))
            await session.commit()

        async with session_factory() as session:
            service = OrderService(session)
            service.cart.clear_cart = AsyncMock(side_effect=RuntimeError("disk on fire"))
            with pytest.raises(RuntimeError):
                await service.checkout(user.id, OrderCreate(shipping_address=SHIPPING_ADDRESS))

        assert await count(session_factory, Order.id) == 0
        assert await count(session_factory, CartItem.id, CartItem.user_id == user.id) == 1

    @pytest.mark.asyncio
    async def test_checkout_locks_user_and_cart_rows(self, customer, catalog, session_factory):
        user, _ = customer
        async with session_factory() as session:
            session.add(CartItem(user_id=user.id, product_id=catalog["Custom Keychain"].id,
                                 quantity=1, price=Decimal("8.99"), customization={}))
            await session.commit()

        executed = []
        async with session_factory() as session:
            real_execute = session.execute

            async def recording_execute(statement, *args, **kwargs):
                executed.append(statement)
                return await real_execute(statement, *args, **kwargs)

            with patch.object(session, "execute", side_effect=recording_execute):
                await OrderService(session).checkout(user.id, OrderCreate(shipping_address=SHIPPING_ADDRESS))

        locking = [
            str(statement.compile(dialect=postgresql.dialect()))
            for statement in executed
            if isinstance(statement, Select)
        ]
        locking = [sql for sql in locking if sql.rstrip().endswith("FOR UPDATE")]
        assert any("FROM users" in sql for sql in locking)
        assert any("FROM cart_items" in sql for sql in locking)

    @pytest.mark.asyncio
    async def test_second_checkout_sees_empty_cart(self, customer, catalog, session_factory):
        user, _ = customer
        async with session_factory() as session:
            session.add(CartItem(user_id=user.id, product_id=catalog["Custom Keychain"].id,
                                 quantity=1, price=Decimal("8.99"), customization={}))
            await session.commit()

        async with session_factory() as session:
            await OrderService(session).checkout(user.id, OrderCreate(shipping_address=SHIPPING_ADDRESS))
        async with session_factory() as session:
            with pytest.raises(EmptyCartError):
                await OrderService(session).checkout(user.id, OrderCreate(shipping_address=SHIPPING_ADDRESS))

        assert await count(session_factory, Order.id, Order.user_id == user.id) == 1

    @pytest.mark.asyncio
    async def test_service_raises_empty_cart(self, customer, session_factory):
        user, _ = customer
        async with session_factory() as session:
            with pytest.raises(EmptyCartError):
                await OrderService(session).checkout(user.id, OrderCreate(shipping_address=SHIPPING_ADDRESS))


class TestOrderNumbers:
    def test_format(self):
        assert ORDER_NUMBER.match(OrderService.generate_order_number())

    def test_numbers_differ(self):
        numbers = {OrderService.generate_order_number() for _ in range(200)}
        assert len(numbers) == 200

    @pytest.mark.asyncio
    async def test_collision_is_redrawn(self, client, customer, other_customer, catalog):
        _, headers = customer
        _, other_headers = other_customer
        await add(client, headers, catalog["Custom Keychain"].id)
        await add(client, other_headers, catalog["Custom Keychain"].id)

        with patch.object(
            OrderService,
            "generate_order_number",
            side_effect=["PH-20260101-AAAAAAAA", "PH-20260101-AAAAAAAA", "PH-20260101-BBBBBBBB"],
        ):
            first = await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS}, headers=headers)
            second = await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS},
                                       headers=other_headers)

        assert first.json()["order_number"] == "PH-20260101-AAAAAAAA"
        assert second.json()["order_number"] == "PH-20260101-BBBBBBBB"


class TestOrderHistory:
    @pytest.mark.asyncio
    async def test_list_and_get_own_orders(self, client, customer, catalog):
        _, headers = customer
        await add(client, headers, catalog["Custom Keychain"].id)
        created = (await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS},
                                     headers=headers)).json()

        listed = (await client.get("/api/orders", headers=headers)).json()
        assert [o["id"] for o in listed] == [created["id"]]

        fetched = await client.get(f"/api/orders/{created['id']}", headers=headers)
        assert fetched.status_code == 200
        assert fetched.json()["shipping_address"]["city"] == "London"

    @pytest.mark.asyncio
    async def test_other_users_order_is_not_found(self, client, customer, other_customer, catalog):
        _, headers = customer
        _, other_headers = other_customer
        await add(client, other_headers, catalog["Custom Keychain"].id)
        theirs = (await client.post("/api/orders", json={"shipping_address": SHIPPING_ADDRESS},
                                    headers=other_headers)).json()

        resp = await client.get(f"/api/orders/{theirs['id']}", headers=headers)
        assert resp.status_code == 404
