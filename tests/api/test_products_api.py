"""Tests for product, product type and category endpoints."""

import pytest
from httpx import AsyncClient


class TestBrowseEndpoints:
    """Tests for shopper browsing endpoints."""

    @pytest.mark.asyncio
    async def test_list_products(self, client: AsyncClient, catalog) -> None:
        """Listing returns the envelope with shopper-visible products."""
        response = await client.get("/api/product")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == ""
        titles = [p["title"] for p in body["data"]]
        assert "Green Shirt" not in titles
        assert "Old Shirt" not in titles
        assert titles[0] == "Red Shirt"

        red = body["data"][0]
        assert [v["product_type_id"] for v in red["variants"]] == [catalog.small_type]
        assert red["variants"][0]["price"] == 10.0
        assert red["variants"][0]["product_type"]["name"] == "Small"

    @pytest.mark.asyncio
    async def test_list_products_capitalized_route(self, client: AsyncClient, catalog) -> None:
        """The capitalized listing path serves the same payload."""
        lower = await client.get("/api/product")
        upper = await client.get("/api/Product")

        assert upper.status_code == 200
        assert upper.json() == lower.json()

    @pytest.mark.asyncio
    async def test_featured(self, client: AsyncClient, catalog) -> None:
        """Featured endpoint lists featured products."""
        response = await client.get("/api/product/featured")

        assert [p["id"] for p in response.json()["data"]] == [catalog.red_shirt, catalog.cookbook]

    @pytest.mark.asyncio
    async def test_category(self, client: AsyncClient, catalog) -> None:
        """Category slug matching ignores case."""
        response = await client.get("/api/product/category/BOOKS")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["data"]] == [
            catalog.shirtless_summer,
            catalog.cookbook,
        ]


class TestGetProductEndpoint:
    """Tests for GET /api/product/{id}."""

    @pytest.mark.asyncio
    async def test_found(self, client: AsyncClient, catalog) -> None:
        """Visible product is returned with its visible variants."""
        response = await client.get(f"/api/product/{catalog.red_shirt}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Red Shirt"
        assert len(data["variants"]) == 1

    @pytest.mark.asyncio
    async def test_hidden_for_shopper(
        self, client: AsyncClient, catalog, shopper_headers: dict[str, str]
    ) -> None:
        """Hidden products answer 404 with the failure envelope."""
        response = await client.get(
            f"/api/product/{catalog.green_shirt}", headers=shopper_headers
        )

        assert response.status_code == 404
        body = response.json()
        assert body == {
            "data": None,
            "success": False,
            "message": "Sorry, but a product does not exist.",
        }

    @pytest.mark.asyncio
    async def test_hidden_for_admin(
        self, client: AsyncClient, catalog, admin_headers: dict[str, str]
    ) -> None:
        """Admins see hidden products and their hidden variants."""
        response = await client.get(f"/api/product/{catalog.green_shirt}", headers=admin_headers)
        red = await client.get(f"/api/product/{catalog.red_shirt}", headers=admin_headers)

        assert response.status_code == 200
        assert len(red.json()["data"]["variants"]) == 2

    @pytest.mark.asyncio
    async def test_deleted(
        self, client: AsyncClient, catalog, admin_headers: dict[str, str]
    ) -> None:
        """Deleted products are 404 even for admins."""
        response = await client.get(f"/api/product/{catalog.old_shirt}", headers=admin_headers)

        assert response.status_code == 404


class TestSearchEndpoints:
    """Tests for search and suggestions."""

    @pytest.mark.asyncio
    async def test_search_first_page(self, client: AsyncClient, catalog) -> None:
        """Without a page segment the first page is returned."""
        response = await client.get("/api/product/search/shirt")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["current_page"] == 1
        assert data["pages"] == 3
        assert len(data["products"]) == 2

    @pytest.mark.asyncio
    async def test_search_last_page(self, client: AsyncClient, catalog) -> None:
        """The last page holds the remainder."""
        response = await client.get("/api/product/search/shirt/3")

        data = response.json()["data"]
        assert data["current_page"] == 3
        assert [p["title"] for p in data["products"]] == ["Shirtless Summer"]

    @pytest.mark.asyncio
    async def test_search_invalid_page(self, client: AsyncClient, catalog) -> None:
        """Page zero is a validation failure."""
        response = await client.get("/api/product/search/shirt/0")

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_search_blank_text(self, client: AsyncClient, catalog) -> None:
        """Whitespace-only search text is a validation failure."""
        response = await client.get("/api/product/search/%20%20")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_suggestions(self, client: AsyncClient, catalog) -> None:
        """Suggestions are returned as plain strings."""
        response = await client.get("/api/product/searchsuggestions/shirt")

        assert response.status_code == 200
        assert response.json()["data"][:2] == ["Red Shirt", "shirt"]


class TestAdminEndpoints:
    """Tests for admin-only endpoints."""

    @pytest.mark.asyncio
    async def test_admin_listing_requires_authentication(
        self, client: AsyncClient, catalog
    ) -> None:
        """Anonymous callers get 401."""
        response = await client.get("/api/product/admin")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_admin_listing_forbidden_for_shopper(
        self, client: AsyncClient, catalog, shopper_headers: dict[str, str]
    ) -> None:
        """Shoppers get 403."""
        response = await client.get("/api/product/admin", headers=shopper_headers)

        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_admin_listing(
        self, client: AsyncClient, catalog, admin_headers: dict[str, str]
    ) -> None:
        """Admins list hidden products with their categories."""
        response = await client.get("/api/product/admin", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert "Green Shirt" in [p["title"] for p in data]
        assert data[0]["category"]["url"] == "shirts"

    @pytest.mark.asyncio
    async def test_create_update_delete(
        self, client: AsyncClient, catalog, admin_headers: dict[str, str]
    ) -> None:
        """A product can be created, updated and soft-deleted."""
        created = await client.post(
            "/api/product",
            json={
                "title": "Purple Shirt",
                "description": "Royal purple.",
                "category_id": catalog.shirts,
                "variants": [{"product_type_id": catalog.small_type, "price": "13.00"}],
            },
            headers=admin_headers,
        )
        assert created.status_code == 200
        product = created.json()["data"]
        assert product["variants"][0]["price"] == 13.0

        updated = await client.put(
            "/api/product",
            json={
                "id": product["id"],
                "title": "Violet Shirt",
                "category_id": catalog.shirts,
                "variants": [{"product_type_id": catalog.small_type, "price": "11.50"}],
            },
            headers=admin_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["title"] == "Violet Shirt"
        assert updated.json()["data"]["variants"][0]["price"] == 11.5

        deleted = await client.delete(f"/api/product/{product['id']}", headers=admin_headers)
        assert deleted.status_code == 200
        assert deleted.json()["data"] is True

        gone = await client.get(f"/api/product/{product['id']}", headers=admin_headers)
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_create_forbidden_for_shopper(
        self, client: AsyncClient, catalog, shopper_headers: dict[str, str]
    ) -> None:
        """Shoppers cannot create products."""
        response = await client.post(
            "/api/product",
            json={"title": "Nope", "category_id": catalog.shirts},
            headers=shopper_headers,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_missing(
        self, client: AsyncClient, catalog, admin_headers: dict[str, str]
    ) -> None:
        """Deleting an unknown product answers 404."""
        response = await client.delete("/api/product/9999", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found."


class TestLookupEndpoints:
    """Tests for product type and category listings."""

    @pytest.mark.asyncio
    async def test_product_types(self, client: AsyncClient, catalog) -> None:
        """Product types are listed in id order."""
        response = await client.get("/api/producttype")

        assert [t["name"] for t in response.json()["data"]] == ["Default", "Small", "Large"]

    @pytest.mark.asyncio
    async def test_categories(self, client: AsyncClient, catalog) -> None:
        """Categories are listed in id order."""
        response = await client.get("/api/category")

        assert [c["url"] for c in response.json()["data"]] == ["shirts", "books"]
