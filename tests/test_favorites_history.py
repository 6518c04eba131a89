"""
Test Case Suite: Favorites and History Module
Test ID Range: TC-066 to TC-076

This test suite validates saved properties (upsert semantics), favorite
checks, search history and recently viewed listings.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func
from app.models.favorite import Favorite
from app.models.history import ViewingHistory


class TestFavorites:
    """
    Test Case TC-066: Add Favorite
    Description: Verify a user can save a property with a note
    Expected Result: 201 with note stored
    """
    @pytest.mark.asyncio
    async def test_tc066_add_favorite(self, client: AsyncClient, alice_headers, bob_headers, create_listing):
        """TC-066: Add favorite"""
        prop = await create_listing(alice_headers)

        response = await client.post(f"/api/favorites/{prop['id']}", json={"notes": "near school"}, headers=bob_headers)
        assert response.status_code == 201
        assert response.json()["notes"] == "near school"
        assert response.json()["propertyId"] == prop["id"]

    """
    Test Case TC-067: Re-adding Favorite Upserts
    Description: Verify saving the same property twice keeps one row and replaces the note
    Expected Result: Single row; note replaced only when supplied
    """
    @pytest.mark.asyncio
    async def test_tc067_favorite_upsert(
        self, client: AsyncClient, alice_headers, bob_headers, create_listing, session_factory
    ):
        """TC-067: Favorite upsert"""
        prop = await create_listing(alice_headers)
        url = f"/api/favorites/{prop['id']}"

        first = (await client.post(url, json={"notes": "first"}, headers=bob_headers)).json()
        second = (await client.post(url, json={"notes": "second"}, headers=bob_headers)).json()
        third = (await client.post(url, json={}, headers=bob_headers)).json()

        assert first["id"] == second["id"] == third["id"]
        assert second["notes"] == "second"
        assert third["notes"] == "second"

        async with session_factory() as session:
            count = (await session.execute(select(func.count(Favorite.id)))).scalar()
        assert count == 1

    """
    Test Case TC-068: Favorite Missing Property
    Description: Verify saving an unknown property fails
    Expected Result: 404
    """
    @pytest.mark.asyncio
    async def test_tc068_favorite_missing_property(self, client: AsyncClient, bob_headers):
        """TC-068: Favorite missing property"""
        response = await client.post("/api/favorites/31337", json={}, headers=bob_headers)
        assert response.status_code == 404

    """
    Test Case TC-069: List Favorites With Listing Annotations
    Description: Verify favorites include the property with images and stats
    Expected Result: property.reviewCount and property.primaryImage present
    """
    @pytest.mark.asyncio
    async def test_tc069_list_favorites(self, client: AsyncClient, alice_headers, bob_headers, create_listing):
        """TC-069: List favorites"""
        prop = await create_listing(alice_headers)
        await client.post(f"/api/properties/{prop['id']}/reviews", json={"rating": 4}, headers=bob_headers)
        await client.post(f"/api/favorites/{prop['id']}", json={}, headers=bob_headers)

        response = await client.get("/api/favorites", headers=bob_headers)
        assert response.status_code == 200
        favorites = response.json()
        assert len(favorites) == 1
        assert favorites[0]["property"]["id"] == prop["id"]
        assert favorites[0]["property"]["reviewCount"] == 1
        assert favorites[0]["property"]["averageRating"] == 4
        assert favorites[0]["property"]["primaryImage"] is None

    """
    Test Case TC-070: Check and Remove Favorite
    Description: Verify the check endpoint tracks add and remove
    Expected Result: isFavorited true after add, false after delete
    """
    @pytest.mark.asyncio
    async def test_tc070_check_and_remove(self, client: AsyncClient, alice_headers, bob_headers, create_listing):
        """TC-070: Check and remove favorite"""
        prop = await create_listing(alice_headers)
        check_url = f"/api/favorites/{prop['id']}/check"

        assert (await client.get(check_url, headers=bob_headers)).json() == {"isFavorited": False}

        await client.post(f"/api/favorites/{prop['id']}", json={}, headers=bob_headers)
        assert (await client.get(check_url, headers=bob_headers)).json() == {"isFavorited": True}

        response = await client.delete(f"/api/favorites/{prop['id']}", headers=bob_headers)
        assert response.status_code == 204
        assert (await client.get(check_url, headers=bob_headers)).json() == {"isFavorited": False}


class TestSearchHistory:
    """
    Test Case TC-071: Record and List Searches
    Description: Verify searches are logged with filters and listed newest first
    Expected Result: 201 per record; list ordered newest first; limit respected
    """
    @pytest.mark.asyncio
    async def test_tc071_search_history(self, client: AsyncClient, bob_headers):
        """TC-071: Search history"""
        for query in ("condo", "house", "loft"):
            response = await client.post(
                "/api/search-history",
                json={"searchQuery": query, "filters": {"bedrooms": 2}},
                headers=bob_headers
            )
            assert response.status_code == 201

        response = await client.get("/api/search-history", headers=bob_headers)
        assert [r["searchQuery"] for r in response.json()] == ["loft", "house", "condo"]
        assert response.json()[0]["filters"] == {"bedrooms": 2}

        response = await client.get("/api/search-history", params={"limit": 2}, headers=bob_headers)
        assert len(response.json()) == 2

    """
    Test Case TC-072: Clear Search History
    Description: Verify DELETE removes only the caller's searches
    Expected Result: 204; caller empty, other user's history kept
    """
    @pytest.mark.asyncio
    async def test_tc072_clear_search_history(self, client: AsyncClient, alice_headers, bob_headers):
        """TC-072: Clear search history"""
        await client.post("/api/search-history", json={"searchQuery": "a"}, headers=bob_headers)
        await client.post("/api/search-history", json={"searchQuery": "b"}, headers=alice_headers)

        response = await client.delete("/api/search-history", headers=bob_headers)
        assert response.status_code == 204

        assert (await client.get("/api/search-history", headers=bob_headers)).json() == []
        assert len((await client.get("/api/search-history", headers=alice_headers)).json()) == 1


class TestViewingHistory:
    """
    Test Case TC-073: Repeat Views Keep One Row
    Description: Verify viewing the same property twice refreshes the existing row
    Expected Result: Same record id; single row in the table
    """
    @pytest.mark.asyncio
    async def test_tc073_viewing_upsert(
        self, client: AsyncClient, alice_headers, bob_headers, create_listing, session_factory
    ):
        """TC-073: Viewing history upsert"""
        prop = await create_listing(alice_headers)

        first = await client.post(f"/api/viewing-history/{prop['id']}", headers=bob_headers)
        second = await client.post(f"/api/viewing-history/{prop['id']}", headers=bob_headers)
        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["id"] == second.json()["id"]

        async with session_factory() as session:
            count = (await session.execute(select(func.count(ViewingHistory.id)))).scalar()
        assert count == 1

    """
    Test Case TC-074: List Viewing History With Properties
    Description: Verify recent views include annotated properties
    Expected Result: Each record carries its property
    """
    @pytest.mark.asyncio
    async def test_tc074_list_viewing_history(self, client: AsyncClient, alice_headers, bob_headers, create_listing):
        """TC-074: List viewing history"""
        first = await create_listing(alice_headers, title="First")
        second = await create_listing(alice_headers, title="Second")
        await client.post(f"/api/viewing-history/{first['id']}", headers=bob_headers)
        await client.post(f"/api/viewing-history/{second['id']}", headers=bob_headers)

        response = await client.get("/api/viewing-history", headers=bob_headers)
        assert response.status_code == 200
        records = response.json()
        assert {r["property"]["id"] for r in records} == {first["id"], second["id"]}
        assert all("reviewCount" in r["property"] for r in records)

    """
    Test Case TC-075: Clear Viewing History
    Description: Verify DELETE clears the caller's views
    Expected Result: 204 then empty list
    """
    @pytest.mark.asyncio
    async def test_tc075_clear_viewing_history(self, client: AsyncClient, alice_headers, bob_headers, create_listing):
        """TC-075: Clear viewing history"""
        prop = await create_listing(alice_headers)
        await client.post(f"/api/viewing-history/{prop['id']}", headers=bob_headers)

        assert (await client.delete("/api/viewing-history", headers=bob_headers)).status_code == 204
        assert (await client.get("/api/viewing-history", headers=bob_headers)).json() == []

    """
    Test Case TC-076: View Missing Property
    Description: Verify recording a view of an unknown property fails
    Expected Result: 404
    """
    @pytest.mark.asyncio
    async def test_tc076_view_missing_property(self, client: AsyncClient, bob_headers):
        """TC-076: View missing property"""
        response = await client.post("/api/viewing-history/8080", headers=bob_headers)
        assert response.status_code == 404
