"""
Test Case Suite: Admin and Contact Module
Test ID Range: TC-090 to TC-102

This test suite validates the admin back-office (users, sellers, counts,
dashboard, role grants) and the contact form workflow.
"""

import pytest
from httpx import AsyncClient


async def submit_contact(client, **overrides):
    body = {
        "name": "Dana Visitor",
        "email": "dana@example.com",
        "subject": "Listing question",
        "message": "Do you list commercial spaces?",
    }
    body.update(overrides)
    response = await client.post("/api/contact", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestAdminOverview:
    """
    Test Case TC-090: List Users
    Description: Verify the admin can list every local user
    Expected Result: 200 including users that have signed in
    """
    @pytest.mark.asyncio
    async def test_tc090_list_users(self, client: AsyncClient, alice_headers, bob_headers, admin_headers):
        """TC-090: Admin user list"""
        await client.get("/api/auth/user", headers=alice_headers)
        await client.get("/api/auth/user", headers=bob_headers)

        response = await client.get("/api/admin/users", headers=admin_headers)
        assert response.status_code == 200
        ids = {u["id"] for u in response.json()}
        assert {"alice-uid", "bob-uid", "admin-uid"} <= ids

    """
    Test Case TC-091: List Sellers With Counts
    Description: Verify sellers are users owning listings, with total and available counts
    Expected Result: Alice listed with 2 properties, 1 available; Bob absent
    """
    @pytest.mark.asyncio
    async def test_tc091_list_sellers(
        self, client: AsyncClient, alice_headers, bob_headers, admin_headers, create_listing
    ):
        """TC-091: Sellers"""
        await create_listing(alice_headers)
        await create_listing(alice_headers, available=False)
        await client.get("/api/auth/user", headers=bob_headers)

        response = await client.get("/api/admin/sellers", headers=admin_headers)
        assert response.status_code == 200
        sellers = response.json()
        assert [s["id"] for s in sellers] == ["alice-uid"]
        assert sellers[0]["propertyCount"] == 2
        assert sellers[0]["availablePropertyCount"] == 1

    """
    Test Case TC-092: Total Properties
    Description: Verify the total counts listings regardless of availability
    Expected Result: total == 3
    """
    @pytest.mark.asyncio
    async def test_tc092_total_properties(self, client: AsyncClient, alice_headers, admin_headers, create_listing):
        """TC-092: Total properties"""
        await create_listing(alice_headers)
        await create_listing(alice_headers)
        await create_listing(alice_headers, available=False)

        response = await client.get("/api/admin/total-properties", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"total": 3}

    """
    Test Case TC-093: Dashboard Aggregates
    Description: Verify user, listing and activity aggregates
    Expected Result: Counts reflect seeded data
    """
    @pytest.mark.asyncio
    async def test_tc093_dashboard(
        self, client: AsyncClient, alice_headers, bob_headers, admin_headers, create_listing
    ):
        """TC-093: Admin dashboard"""
        apartment = await create_listing(alice_headers)
        await create_listing(alice_headers, propertyType="house", featured=True, available=False)

        await client.post(f"/api/properties/{apartment['id']}/reviews", json={"rating": 5}, headers=bob_headers)
        await client.post(f"/api/properties/{apartment['id']}/reviews", json={"rating": 2}, headers=bob_headers)
        await client.post(
            f"/api/properties/{apartment['id']}/bookings",
            json={"name": "Bob", "email": "bob@example.com"},
            headers=bob_headers
        )
        await client.post("/api/conversations", json={"propertyId": apartment["id"]}, headers=bob_headers)
        await submit_contact(client)

        response = await client.get("/api/admin/dashboard", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()

        assert data["users"] == {"totalUsers": 3, "agents": 0, "admins": 1}

        assert data["properties"]["totalProperties"] == 2
        assert data["properties"]["availableProperties"] == 1
        assert data["properties"]["unavailableProperties"] == 1
        assert data["properties"]["featuredProperties"] == 1
        assert data["properties"]["propertiesByType"] == {"apartment": 1, "house": 1}

        assert data["activity"]["totalReviews"] == 2
        assert data["activity"]["averageRating"] == 3.5
        assert data["activity"]["bookingsByStatus"] == {"pending": 1}
        assert data["activity"]["unreadContactMessages"] == 1
        assert data["activity"]["totalConversations"] == 1

        assert len(data["recentProperties"]) == 2
        assert data["generatedAt"]

    """
    Test Case TC-094: Admin Grants Roles
    Description: Verify the admin can grant the admin role, which then opens admin routes
    Expected Result: Roles stored; Bob can call admin endpoints afterwards
    """
    @pytest.mark.asyncio
    async def test_tc094_grant_admin(self, client: AsyncClient, bob_headers, admin_headers):
        """TC-094: Grant admin"""
        await client.get("/api/auth/user", headers=bob_headers)
        assert (await client.get("/api/admin/users", headers=bob_headers)).status_code == 403

        response = await client.put(
            "/api/admin/users/bob-uid/roles",
            json={"roles": ["user", "admin"]},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["roles"] == ["user", "admin"]

        assert (await client.get("/api/admin/users", headers=bob_headers)).status_code == 200

    """
    Test Case TC-095: Grant Roles to Unknown User
    Description: Verify role changes for a missing user fail
    Expected Result: 404
    """
    @pytest.mark.asyncio
    async def test_tc095_grant_unknown_user(self, client: AsyncClient, admin_headers):
        """TC-095: Unknown user"""
        response = await client.put("/api/admin/users/ghost/roles", json={"roles": ["user"]}, headers=admin_headers)
        assert response.status_code == 404

    """
    Test Case TC-096: Admin Routes Require Token
    Description: Verify anonymous access is rejected before the role check
    Expected Result: 401
    """
    @pytest.mark.asyncio
    async def test_tc096_admin_requires_token(self, client: AsyncClient):
        """TC-096: Anonymous admin call"""
        for path in ["/api/admin/users", "/api/admin/dashboard", "/api/admin/contact-messages"]:
            assert (await client.get(path)).status_code == 401, path


class TestContactMessages:
    """
    Test Case TC-097: Public Contact Form
    Description: Verify anyone can submit a contact message
    Expected Result: 201 with status unread
    """
    @pytest.mark.asyncio
    async def test_tc097_submit_contact(self, client: AsyncClient):
        """TC-097: Contact form"""
        record = await submit_contact(client)
        assert record["status"] == "unread"
        assert record["reply"] is None
        assert record["email"] == "dana@example.com"

    """
    Test Case TC-098: Contact Form Validation
    Description: Verify invalid email and empty message are rejected
    Expected Result: 400 with field errors
    """
    @pytest.mark.asyncio
    async def test_tc098_contact_validation(self, client: AsyncClient):
        """TC-098: Contact validation"""
        response = await client.post("/api/contact", json={"name": "X", "email": "nope", "message": ""})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"
        assert response.json()["errors"]

    """
    Test Case TC-099: Admin Lists and Reads Messages
    Description: Verify listing is newest first and paginated
    Expected Result: Latest first; limit respected; 404 for unknown id
    """
    @pytest.mark.asyncio
    async def test_tc099_list_messages(self, client: AsyncClient, admin_headers):
        """TC-099: List contact messages"""
        first = await submit_contact(client, subject="first")
        second = await submit_contact(client, subject="second")

        response = await client.get("/api/admin/contact-messages", headers=admin_headers)
        assert [m["id"] for m in response.json()] == [second["id"], first["id"]]

        response = await client.get("/api/admin/contact-messages", params={"limit": 1, "offset": 1}, headers=admin_headers)
        assert [m["id"] for m in response.json()] == [first["id"]]

        response = await client.get(f"/api/admin/contact-messages/{first['id']}", headers=admin_headers)
        assert response.json()["subject"] == "first"

        response = await client.get("/api/admin/contact-messages/9999", headers=admin_headers)
        assert response.status_code == 404

    """
    Test Case TC-100: Update Message Status
    Description: Verify status transitions accept only known values
    Expected Result: 200 read; 400 for unknown status
    """
    @pytest.mark.asyncio
    async def test_tc100_update_status(self, client: AsyncClient, admin_headers):
        """TC-100: Contact message status"""
        record = await submit_contact(client)
        url = f"/api/admin/contact-messages/{record['id']}/status"

        response = await client.put(url, json={"status": "read"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "read"

        response = await client.put(url, json={"status": "archived"}, headers=admin_headers)
        assert response.status_code == 400

    """
    Test Case TC-101: Reply Marks Responded
    Description: Verify a reply is stored and flips status to responded
    Expected Result: 200 message; stored reply; blank reply 400
    """
    @pytest.mark.asyncio
    async def test_tc101_reply(self, client: AsyncClient, admin_headers):
        """TC-101: Reply to contact message"""
        record = await submit_contact(client)
        url = f"/api/admin/contact-messages/{record['id']}/reply"

        response = await client.post(url, json={"reply": "   "}, headers=admin_headers)
        assert response.status_code == 400

        response = await client.post(url, json={"reply": "Yes we do."}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Reply sent successfully"}

        stored = (await client.get(f"/api/admin/contact-messages/{record['id']}", headers=admin_headers)).json()
        assert stored["reply"] == "Yes we do."
        assert stored["status"] == "responded"

    """
    Test Case TC-102: Delete Message
    Description: Verify deletion is idempotent
    Expected Result: 204 twice; message gone
    """
    @pytest.mark.asyncio
    async def test_tc102_delete_message(self, client: AsyncClient, admin_headers):
        """TC-102: Delete contact message"""
        record = await submit_contact(client)
        url = f"/api/admin/contact-messages/{record['id']}"

        assert (await client.delete(url, headers=admin_headers)).status_code == 204
        assert (await client.delete(url, headers=admin_headers)).status_code == 204
        assert (await client.get(url, headers=admin_headers)).status_code == 404
