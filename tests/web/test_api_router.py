"""
Tests for the storefront HTTP API (web/api_router.py) through FastAPI's
TestClient, with the database dependencies pointed at the in-memory test
session.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from app import app
from exceptions.store import StoreUnavailableException
from models.cart import Cart
from repositories.cartItem import CartItemRepository
from web.api_router import get_session, get_session_factory


@pytest.fixture
def client(session, session_factory):
    async def override_session():
        yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    # No context manager: lifespan would create tables on the configured engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def products(session, create_category, create_product):
    shoes = create_category("shoes", "Shoes")
    items = [
        create_product(price=1250, brand="Acme", color="red", size="M", category=shoes, slug="red-runner"),
        create_product(price=4000, brand="Globex", color="black", size="L", category=shoes, slug="black-boot"),
    ]
    session.commit()
    return items


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestCatalogEndpoints:

    def test_catalog(self, client, products):
        response = client.get("/api/catalog", params=[("brand", "Acme"), ("perPage", "1000")])

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["pageSize"] == 96
        assert body["totalPages"] == 1
        assert body["priceBounds"] == {"min": 1250, "max": 1250}
        assert body["items"][0]["slug"] == "red-runner"
        assert body["items"][0]["categoryId"] == products[0].category_id
        assert [(b["value"], b["count"], b["selected"]) for b in body["brands"]] == \
            [("Acme", 1, True), ("Globex", 1, False)]
        assert body["query"] == "brand=Acme&page=1&perPage=96"
        assert body["prevQuery"] is None
        assert body["nextQuery"] is None
        assert body["currency"] == "USD"

    def test_catalog_ignores_malformed_input(self, client, products):
        response = client.get("/api/catalog", params={"min": "cheap", "page": "-5", "perPage": "x"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert (body["page"], body["pageSize"]) == (1, 24)

    def test_huge_page_is_an_empty_page(self, client, products):
        response = client.get("/api/catalog", params={"page": "99999999999999999999"})

        assert response.status_code == 200
        body = response.json()
        assert body["items"] == []
        assert body["total"] == 2
        assert body["nextQuery"] is None

    @pytest.mark.parametrize("bound", ["min", "max"])
    def test_huge_price_bound(self, client, products, bound):
        response = client.get("/api/catalog", params={bound: "1e20"})

        assert response.status_code == 200
        assert response.json()["total"] == (0 if bound == "min" else 2)

    def test_product_detail(self, client, products):
        response = client.get("/api/products/black-boot")

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 4000
        assert body["category"]["slug"] == "shoes"

    def test_unknown_product(self, client, products):
        assert client.get("/api/products/no-such-product").status_code == 404


class TestCartEndpoints:

    def test_get_cart_sets_session_cookie(self, client):
        response = client.get("/api/cart")

        assert response.status_code == 200
        assert response.json()["items"] == []
        assert "id" not in response.json()
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("cartId=")
        assert "httponly" in set_cookie.lower()
        assert "Max-Age=2592000" in set_cookie

        again = client.get("/api/cart")
        assert "set-cookie" not in again.headers

    def test_add_merges_quantities(self, client, products):
        client.post("/api/cart", json={"productId": products[0].id, "quantity": 2})
        response = client.post("/api/cart", json={"productId": products[0].id, "quantity": 3})

        assert response.status_code == 200
        body = response.json()
        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 5
        assert "cartId" not in body["items"][0]
        assert body["subtotal"] == 5 * 1250

    def test_add_defaults_to_one(self, client, products):
        body = client.post("/api/cart", json={"productId": products[1].id}).json()
        assert body["items"][0]["quantity"] == 1

    def test_add_unknown_product(self, client, products):
        assert client.post("/api/cart", json={"productId": 999}).status_code == 404

    def test_add_non_positive_quantity(self, client, products):
        assert client.post("/api/cart", json={"productId": products[0].id, "quantity": 0}).status_code == 422

    def test_add_huge_quantity(self, client, products):
        response = client.post("/api/cart", json={"productId": products[0].id, "quantity": 10 ** 20})
        assert response.status_code == 422

    def test_add_huge_product_id(self, client, products):
        assert client.post("/api/cart", json={"productId": 10 ** 20}).status_code == 422

    @pytest.mark.parametrize("payload", [{"productId": 999}, {"productId": 1, "quantity": 0}])
    def test_rejected_add_creates_no_cart(self, client, session, products, payload):
        response = client.post("/api/cart", json=payload)

        assert response.status_code in (404, 422)
        assert "set-cookie" not in response.headers
        assert session.scalar(select(func.count()).select_from(Cart)) == 0

    def test_add_store_failure(self, client, products):
        failure = AsyncMock(side_effect=StoreUnavailableException("cart_item.upsert"))
        with patch.object(CartItemRepository, "upsert", failure):
            response = client.post("/api/cart", json={"productId": products[0].id})
        assert response.status_code == 503

    def test_update_and_remove(self, client, products):
        cart = client.post("/api/cart", json={"productId": products[0].id, "quantity": 2}).json()
        cart_item_id = cart["items"][0]["id"]

        updated = client.put("/api/cart", json={"cartItemId": cart_item_id, "quantity": 4})
        assert updated.status_code == 200
        assert updated.json()["quantity"] == 4

        removed = client.put("/api/cart", json={"cartItemId": cart_item_id, "quantity": 0})
        assert removed.status_code == 200
        assert removed.json() is None
        assert client.get("/api/cart").json()["items"] == []

    def test_update_huge_quantity(self, client, products):
        cart = client.post("/api/cart", json={"productId": products[0].id, "quantity": 2}).json()
        cart_item_id = cart["items"][0]["id"]

        response = client.put("/api/cart", json={"cartItemId": cart_item_id, "quantity": 10 ** 20})

        assert response.status_code == 422
        assert client.get("/api/cart").json()["items"][0]["quantity"] == 2

    def test_update_without_cart(self, client):
        response = client.put("/api/cart", json={"cartItemId": 1, "quantity": 2})
        assert response.status_code == 200
        assert response.json() is None

    def test_clear(self, client, products):
        client.post("/api/cart", json={"productId": products[0].id})
        client.post("/api/cart", json={"productId": products[1].id})

        response = client.delete("/api/cart")

        assert response.status_code == 204
        assert client.get("/api/cart").json()["items"] == []
