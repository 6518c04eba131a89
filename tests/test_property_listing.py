"""
Test Case Suite: Property Listing and Search Module
Test ID Range: TC-011 to TC-030

This test suite validates the public listing queries: availability filtering,
review statistics, threshold/amenity/location filters, pagination, primary
image selection, featured listings and free-text search.
"""

import pytest
from httpx import AsyncClient
from app.models.property import PropertyImage
from app.models.review import Review


def ids_of(items):
    return [item["id"] for item in items]


class TestListingAvailability:
    """
    Test Case TC-011: Listing Only Returns Available Properties
    Description: Verify unavailable properties never appear, whatever filters are applied
    Expected Result: Only properties with available=true are returned
    """
    @pytest.mark.asyncio
    async def test_tc011_unavailable_properties_excluded(self, client: AsyncClient, alice_headers, create_listing):
        """TC-011: Unavailable properties excluded from every filter combination"""
        visible = await create_listing(alice_headers, title="Visible", parking=True)
        hidden = await create_listing(alice_headers, title="Hidden", available=False, parking=True)

        for params in [
            {},
            {"location": "spring"},
            {"amenities": "parking"},
            {"bedrooms": 1, "propertyType": "apartment"},
            {"minPrice": 0, "maxPrice": 10000000},
        ]:
            response = await client.get("/api/properties", params=params)
            assert response.status_code == 200
            returned = ids_of(response.json())
            assert visible["id"] in returned
            assert hidden["id"] not in returned
            assert all(item["available"] for item in response.json())


class TestListingStatistics:
    """
    Test Case TC-012: Review Statistics on Listings
    Description: Verify reviewCount and averageRating are computed from review rows
    Expected Result: Mean of ratings and exact count; 0/0 when there are no reviews
    """
    @pytest.mark.asyncio
    async def test_tc012_stats_match_review_rows(self, client: AsyncClient, alice_headers, create_listing, db_session):
        """TC-012: averageRating and reviewCount match review rows"""
        reviewed = await create_listing(alice_headers, title="Reviewed")
        unreviewed = await create_listing(alice_headers, title="Unreviewed")

        db_session.add_all([
            Review(property_id=reviewed["id"], user_id="alice-uid", rating=2),
            Review(property_id=reviewed["id"], user_id="alice-uid", rating=4),
            Review(property_id=reviewed["id"], user_id="alice-uid", rating=5),
        ])
        await db_session.commit()

        response = await client.get("/api/properties")
        assert response.status_code == 200
        by_id = {item["id"]: item for item in response.json()}

        assert by_id[reviewed["id"]]["reviewCount"] == 3
        assert by_id[reviewed["id"]]["averageRating"] == pytest.approx(11 / 3)
        assert by_id[unreviewed["id"]]["reviewCount"] == 0
        assert by_id[unreviewed["id"]]["averageRating"] == 0


class TestListingFilters:
    """
    Test Case TC-013: Bedrooms Filter is a Minimum
    Description: Verify bedrooms=N matches properties with at least N bedrooms
    Expected Result: 3-bedroom property matches bedrooms=2 but not bedrooms=4
    """
    @pytest.mark.asyncio
    async def test_tc013_bedrooms_minimum_threshold(self, client: AsyncClient, alice_headers, create_listing):
        """TC-013: bedrooms filter is a minimum threshold"""
        prop = await create_listing(alice_headers, bedrooms=3, bathrooms=2)

        response = await client.get("/api/properties", params={"bedrooms": 2})
        assert prop["id"] in ids_of(response.json())

        response = await client.get("/api/properties", params={"bedrooms": 4})
        assert prop["id"] not in ids_of(response.json())

        response = await client.get("/api/properties", params={"bathrooms": 2})
        assert prop["id"] in ids_of(response.json())

        response = await client.get("/api/properties", params={"bathrooms": 3})
        assert prop["id"] not in ids_of(response.json())

    """
    Test Case TC-014: Amenities Filter Requires All Amenities
    Description: Verify amenity filtering uses AND semantics
    Expected Result: parking-only property excluded for parking,pool and included for parking
    """
    @pytest.mark.asyncio
    async def test_tc014_amenities_and_semantics(self, client: AsyncClient, alice_headers, create_listing):
        """TC-014: amenities filter requires every listed amenity"""
        parking_only = await create_listing(alice_headers, parking=True, pool=False)
        both = await create_listing(alice_headers, parking=True, pool=True)

        response = await client.get("/api/properties", params={"amenities": "parking,pool"})
        returned = ids_of(response.json())
        assert parking_only["id"] not in returned
        assert both["id"] in returned

        response = await client.get("/api/properties", params={"amenities": "parking"})
        returned = ids_of(response.json())
        assert parking_only["id"] in returned
        assert both["id"] in returned

    """
    Test Case TC-015: Pet Friendly Amenity Accepts Both Spellings
    Description: Verify petFriendly and pet_friendly select the same column
    Expected Result: Same result set for both names
    """
    @pytest.mark.asyncio
    async def test_tc015_pet_friendly_aliases(self, client: AsyncClient, alice_headers, create_listing):
        """TC-015: petFriendly and pet_friendly are equivalent"""
        pets = await create_listing(alice_headers, petFriendly=True)
        no_pets = await create_listing(alice_headers)

        for name in ("petFriendly", "pet_friendly"):
            response = await client.get("/api/properties", params={"amenities": name})
            returned = ids_of(response.json())
            assert pets["id"] in returned
            assert no_pets["id"] not in returned

    """
    Test Case TC-016: Unknown Amenity Rejected
    Description: Verify an amenity outside the known set is a client error
    Expected Result: Returns 400 with a message
    """
    @pytest.mark.asyncio
    async def test_tc016_unknown_amenity_rejected(self, client: AsyncClient):
        """TC-016: unknown amenity returns 400"""
        response = await client.get("/api/properties", params={"amenities": "parking,helipad"})
        assert response.status_code == 400
        assert "helipad" in response.json()["message"]

    """
    Test Case TC-017: Location Filter is Case-Insensitive OR Across Fields
    Description: Verify location matches address, city or state as a substring
    Expected Result: "spring" matches city Springfield; address and state also match
    """
    @pytest.mark.asyncio
    async def test_tc017_location_case_insensitive_or(self, client: AsyncClient, alice_headers, create_listing):
        """TC-017: location substring match over address/city/state"""
        by_city = await create_listing(alice_headers, city="Springfield", state="Illinois", location="1 Main St")
        by_address = await create_listing(alice_headers, city="Chicago", state="Illinois", location="5 Spring Road")
        by_state = await create_listing(alice_headers, city="Austin", state="Texas", location="9 Oak Ave")

        response = await client.get("/api/properties", params={"location": "spring"})
        returned = ids_of(response.json())
        assert by_city["id"] in returned
        assert by_address["id"] in returned
        assert by_state["id"] not in returned

        response = await client.get("/api/properties", params={"location": "TEXAS"})
        assert ids_of(response.json()) == [by_state["id"]]

    """
    Test Case TC-018: Location Filter Treats Wildcards Literally
    Description: Verify % and _ in the search text are not SQL wildcards
    Expected Result: "%" matches nothing unless a field contains a literal percent sign
    """
    @pytest.mark.asyncio
    async def test_tc018_location_wildcards_escaped(self, client: AsyncClient, alice_headers, create_listing):
        """TC-018: LIKE wildcards in location are escaped"""
        await create_listing(alice_headers, location="12 Elm Street")

        response = await client.get("/api/properties", params={"location": "%"})
        assert response.status_code == 200
        assert response.json() == []

    """
    Test Case TC-019: Price Range and Property Type
    Description: Verify minPrice/maxPrice are inclusive bounds and propertyType is exact
    Expected Result: Only matching properties returned
    """
    @pytest.mark.asyncio
    async def test_tc019_price_range_and_type(self, client: AsyncClient, alice_headers, create_listing):
        """TC-019: inclusive price bounds and exact property type"""
        cheap = await create_listing(alice_headers, price=100000, propertyType="condo")
        mid = await create_listing(alice_headers, price=200000, propertyType="house")
        dear = await create_listing(alice_headers, price=300000, propertyType="house")

        response = await client.get("/api/properties", params={"minPrice": 200000, "maxPrice": 300000})
        assert sorted(ids_of(response.json())) == sorted([mid["id"], dear["id"]])

        response = await client.get("/api/properties", params={"propertyType": "condo"})
        assert ids_of(response.json()) == [cheap["id"]]

    """
    Test Case TC-020: Non-numeric Query Parameter
    Description: Verify malformed numeric filters are validation errors, not server errors
    Expected Result: Returns 400 "Invalid request"
    """
    @pytest.mark.asyncio
    async def test_tc020_non_numeric_filter(self, client: AsyncClient):
        """TC-020: non-numeric bedrooms returns 400"""
        response = await client.get("/api/properties", params={"bedrooms": "many"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"
        assert response.json()["errors"]


class TestListingPagination:
    """
    Test Case TC-021: Pagination Returns Disjoint Pages
    Description: Verify limit/offset pages do not overlap and follow newest-first order
    Expected Result: Two pages of 2 cover the 4 newest properties
    """
    @pytest.mark.asyncio
    async def test_tc021_pagination_disjoint(self, client: AsyncClient, alice_headers, create_listing):
        """TC-021: limit/offset pages are disjoint and newest first"""
        created = [await create_listing(alice_headers, title=f"Listing {i}") for i in range(5)]
        newest_first = [p["id"] for p in reversed(created)]

        first = await client.get("/api/properties", params={"limit": 2, "offset": 0})
        second = await client.get("/api/properties", params={"limit": 2, "offset": 2})

        first_ids = ids_of(first.json())
        second_ids = ids_of(second.json())
        assert len(first_ids) == 2
        assert len(second_ids) == 2
        assert not set(first_ids) & set(second_ids)
        assert first_ids + second_ids == newest_first[:4]

    """
    Test Case TC-022: Default Page Size
    Description: Verify the listing is capped at the default page size without a limit
    Expected Result: At most DEFAULT_PAGE_SIZE items
    """
    @pytest.mark.asyncio
    async def test_tc022_default_page_size(self, client: AsyncClient, alice_headers, create_listing):
        """TC-022: default limit applies"""
        from app.config import settings

        for i in range(settings.DEFAULT_PAGE_SIZE + 2):
            await create_listing(alice_headers, title=f"Bulk {i}")

        response = await client.get("/api/properties")
        assert len(response.json()) == settings.DEFAULT_PAGE_SIZE


class TestPrimaryImage:
    """
    Test Case TC-023: Primary Image Selection and Image Order
    Description: Verify images are ordered primary first then by id, and the flagged image is primary
    Expected Result: Images [2,1,3] with image 2 as primaryImage
    """
    @pytest.mark.asyncio
    async def test_tc023_primary_image_order(self, client: AsyncClient, alice_headers, create_listing, db_session):
        """TC-023: primary-flag-descending then id-ascending"""
        prop = await create_listing(alice_headers)

        first = PropertyImage(property_id=prop["id"], image_url="https://img/1.jpg", is_primary=False)
        db_session.add(first)
        await db_session.commit()
        second = PropertyImage(property_id=prop["id"], image_url="https://img/2.jpg", is_primary=True)
        db_session.add(second)
        await db_session.commit()
        third = PropertyImage(property_id=prop["id"], image_url="https://img/3.jpg", is_primary=False)
        db_session.add(third)
        await db_session.commit()

        response = await client.get("/api/properties")
        item = next(p for p in response.json() if p["id"] == prop["id"])
        assert ids_of(item["images"]) == [second.id, first.id, third.id]
        assert item["primaryImage"]["id"] == second.id

        detail = await client.get(f"/api/properties/{prop['id']}")
        assert ids_of(detail.json()["images"]) == [second.id, first.id, third.id]

    """
    Test Case TC-024: Primary Image Falls Back to First Image
    Description: Verify the first image by id is primary when none is flagged
    Expected Result: Lowest-id image selected; null when there are no images
    """
    @pytest.mark.asyncio
    async def test_tc024_primary_image_fallback(self, client: AsyncClient, alice_headers, create_listing, db_session):
        """TC-024: fallback to first image, None without images"""
        with_images = await create_listing(alice_headers)
        without_images = await create_listing(alice_headers)

        image_a = PropertyImage(property_id=with_images["id"], image_url="https://img/a.jpg")
        db_session.add(image_a)
        await db_session.commit()
        db_session.add(PropertyImage(property_id=with_images["id"], image_url="https://img/b.jpg"))
        await db_session.commit()

        response = await client.get("/api/properties")
        by_id = {item["id"]: item for item in response.json()}
        assert by_id[with_images["id"]]["primaryImage"]["id"] == image_a.id
        assert by_id[without_images["id"]]["primaryImage"] is None
        assert by_id[without_images["id"]]["images"] == []


class TestFeaturedAndSearch:
    """
    Test Case TC-025: Featured Properties
    Description: Verify flagged properties come first, then newest, capped at 6
    Expected Result: Featured property first; at most 6 results; unavailable excluded
    """
    @pytest.mark.asyncio
    async def test_tc025_featured_properties(self, client: AsyncClient, alice_headers, create_listing):
        """TC-025: featured flag first, newest next, limit 6"""
        flagged = await create_listing(alice_headers, title="Flagged", featured=True)
        await create_listing(alice_headers, title="Hidden flagged", featured=True, available=False)
        for i in range(7):
            await create_listing(alice_headers, title=f"Plain {i}")

        response = await client.get("/api/properties/featured")
        assert response.status_code == 200
        items = response.json()
        assert len(items) == 6
        assert items[0]["id"] == flagged["id"]
        assert all(item["available"] for item in items)

    """
    Test Case TC-026: Featured Without Flags is Newest First
    Description: Verify featured listing degrades to newest 6 when nothing is flagged
    Expected Result: Newest six ids in order
    """
    @pytest.mark.asyncio
    async def test_tc026_featured_newest_without_flags(self, client: AsyncClient, alice_headers, create_listing):
        """TC-026: no flagged properties means newest six"""
        created = [await create_listing(alice_headers, title=f"P{i}") for i in range(8)]

        response = await client.get("/api/properties/featured")
        assert ids_of(response.json()) == [p["id"] for p in reversed(created)][:6]

    """
    Test Case TC-027: Search by Location Text
    Description: Verify free-text search matches location fields
    Expected Result: Matching property returned; missing query gives 400
    """
    @pytest.mark.asyncio
    async def test_tc027_search(self, client: AsyncClient, alice_headers, create_listing):
        """TC-027: search is a location substring match"""
        match = await create_listing(alice_headers, city="Portland", state="Oregon")
        await create_listing(alice_headers, city="Denver", state="Colorado")

        response = await client.get("/api/properties/search", params={"q": "portl"})
        assert response.status_code == 200
        assert ids_of(response.json()) == [match["id"]]

        response = await client.get("/api/properties/search")
        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required"


class TestListingWireFormat:
    """
    Test Case TC-028: Listing Wire Format
    Description: Verify camelCase keys and string prices on listing items
    Expected Result: ownerId, propertyType, price "250000.00"
    """
    @pytest.mark.asyncio
    async def test_tc028_wire_format(self, client: AsyncClient, alice_headers, create_listing):
        """TC-028: camelCase fields, two-decimal price"""
        await create_listing(alice_headers, price=250000)

        item = (await client.get("/api/properties")).json()[0]
        assert item["ownerId"] == "alice-uid"
        assert item["propertyType"] == "apartment"
        assert item["price"] == "250000.00"
        assert "averageRating" in item
        assert "reviewCount" in item
        assert "primaryImage" in item
