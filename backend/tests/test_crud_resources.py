"""
Pixeloria Backend — Content CRUD Tests
========================================

What:  The shared list / get / create / update / delete shape across
       portfolio, blogs, services, labs and admin testimonials.
How:   Real requests against a per-test SQLite database.

What we test:
    ✅ Create then get returns the same fields, for every collection
    ✅ Timestamps carry an explicit UTC offset
    ✅ Delete then get → 404 "<Resource> not found"
    ✅ Partial updates (PATCH, PUT alias) touch only the fields sent
    ✅ Invalid status / missing field / null for a NOT NULL column → 400
    ✅ Write gating: no token 401, non-editor 403
    ✅ Drafts hidden from anonymous callers, visible to the portal
"""

import uuid
from datetime import datetime, timedelta

import pytest

# (base path, create body, field changed by update, not-found message)
RESOURCES = [
    (
        "/api/portfolio",
        {
            "title": "Rebrand for Acme",
            "description": "Full identity refresh",
            "images": ["/uploads/images/2024/01/15/a.png"],
            "category": "branding",
            "tags": ["identity", "logo"],
            "tech_stack": ["Figma"],
            "results": ["+40% recall"],
            "link": "https://acme.io",
        },
        ("description", "Updated description"),
        "Project not found",
    ),
    (
        "/api/blogs",
        {
            "title": "Designing for speed",
            "excerpt": "Why milliseconds matter",
            "content": "Long form article body.",
            "author": "Pixeloria Team",
            "category": "performance",
            "tags": ["web-vitals"],
            "read_time": 6,
        },
        ("read_time", 8),
        "Post not found",
    ),
    (
        "/api/services",
        {
            "title": "Web Development",
            "description": "Sites and apps",
            "features": ["React", "FastAPI"],
            "price_range": "$5k-$20k",
            "duration": "4-8 weeks",
            "category": "development",
        },
        ("price_range", "$8k-$25k"),
        "Service not found",
    ),
    (
        "/api/labs",
        {
            "title": "Shader playground",
            "description": "WebGL experiments",
            "category": "3d",
            "tags": ["webgl"],
            "demo_url": "https://labs.pixeloria.com/shaders",
        },
        ("demo_url", "https://labs.pixeloria.com/v2"),
        "Lab project not found",
    ),
    (
        "/api/admin/testimonials",
        {
            "name": "Jordan Lee",
            "role": "CTO",
            "company": "Acme",
            "quote": "They shipped on time.",
            "rating": 5,
            "results": ["2x conversions"],
        },
        ("rating", 4),
        "Testimonial not found",
    ),
]

RESOURCE_IDS = [r[0].rsplit("/", 1)[-1] for r in RESOURCES]

# A NOT NULL list column per collection
LIST_FIELDS = {
    "/api/portfolio": "tags",
    "/api/blogs": "tags",
    "/api/services": "features",
    "/api/labs": "tags",
    "/api/admin/testimonials": "results",
}


@pytest.mark.parametrize("path,body,update,missing_message", RESOURCES, ids=RESOURCE_IDS)
class TestCrudLifecycle:

    @pytest.mark.asyncio
    async def test_create_then_get(self, client, editor_headers, path, body, update, missing_message):
        created = await client.post(path, json=body, headers=editor_headers)
        assert created.status_code == 201
        payload = created.json()
        assert payload["success"] is True
        assert payload["message"].endswith("created successfully")

        record = payload["data"]
        uuid.UUID(record["id"])
        assert record["created_at"]
        assert record["updated_at"]
        for key, value in body.items():
            assert record[key] == value

        fetched = await client.get(f"{path}/{record['id']}", headers=editor_headers)
        assert fetched.status_code == 200
        assert fetched.json()["data"] == record

    @pytest.mark.asyncio
    async def test_timestamps_are_utc(self, client, editor_headers, path, body, update, missing_message):
        record = (await client.post(path, json=body, headers=editor_headers)).json()["data"]
        fetched = (await client.get(f"{path}/{record['id']}", headers=editor_headers)).json()["data"]

        for value in (record["created_at"], record["updated_at"], fetched["created_at"]):
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            assert parsed.utcoffset() == timedelta(0)

    @pytest.mark.asyncio
    async def test_partial_update(self, client, editor_headers, path, body, update, missing_message):
        record = (await client.post(path, json=body, headers=editor_headers)).json()["data"]
        field, value = update

        response = await client.patch(f"{path}/{record['id']}", json={field: value}, headers=editor_headers)

        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated[field] == value
        for key in body:
            if key != field:
                assert updated[key] == record[key]

    @pytest.mark.asyncio
    async def test_put_is_an_alias_for_patch(self, client, editor_headers, path, body, update, missing_message):
        record = (await client.post(path, json=body, headers=editor_headers)).json()["data"]
        field, value = update

        response = await client.put(f"{path}/{record['id']}", json={field: value}, headers=editor_headers)

        assert response.status_code == 200
        assert response.json()["data"][field] == value

    @pytest.mark.asyncio
    async def test_null_status_rejected(self, client, editor_headers, path, body, update, missing_message):
        record = (await client.post(path, json=body, headers=editor_headers)).json()["data"]

        response = await client.patch(f"{path}/{record['id']}", json={"status": None}, headers=editor_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "status cannot be null"
        unchanged = await client.get(f"{path}/{record['id']}", headers=editor_headers)
        assert unchanged.json()["data"]["status"] == record["status"]

    @pytest.mark.asyncio
    async def test_null_list_rejected(self, client, editor_headers, path, body, update, missing_message):
        record = (await client.post(path, json=body, headers=editor_headers)).json()["data"]
        field = LIST_FIELDS[path]

        response = await client.patch(f"{path}/{record['id']}", json={field: None}, headers=editor_headers)

        assert response.status_code == 400
        assert response.json()["message"] == f"{field} cannot be null"
        unchanged = await client.get(f"{path}/{record['id']}", headers=editor_headers)
        assert unchanged.json()["data"][field] == body[field]

    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, client, editor_headers, path, body, update, missing_message):
        record = (await client.post(path, json=body, headers=editor_headers)).json()["data"]

        deleted = await client.delete(f"{path}/{record['id']}", headers=editor_headers)
        assert deleted.status_code == 200
        assert deleted.json()["success"] is True

        response = await client.get(f"{path}/{record['id']}", headers=editor_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": missing_message}

    @pytest.mark.asyncio
    async def test_update_and_delete_unknown_id(self, client, editor_headers, path, body, update, missing_message):
        unknown = uuid.uuid4()
        field, value = update
        put = await client.put(f"{path}/{unknown}", json={field: value}, headers=editor_headers)
        delete = await client.delete(f"{path}/{unknown}", headers=editor_headers)
        assert put.status_code == 404
        assert delete.status_code == 404
        assert delete.json()["message"] == missing_message

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, client, editor_headers, path, body, update, missing_message):
        response = await client.post(path, json={**body, "status": "archived"}, headers=editor_headers)
        assert response.status_code == 400
        assert response.json()["field"] == "status"

    @pytest.mark.asyncio
    async def test_writes_require_token(self, client, path, body, update, missing_message):
        response = await client.post(path, json=body)
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Access token required"}

    @pytest.mark.asyncio
    async def test_writes_require_editor_role(
        self, client, viewer_headers, client_headers, path, body, update, missing_message
    ):
        as_viewer = await client.post(path, json=body, headers=viewer_headers)
        as_client = await client.post(path, json=body, headers=client_headers)
        assert as_viewer.status_code == 403
        assert as_client.status_code == 403


class TestValidation:

    @pytest.mark.asyncio
    async def test_missing_required_field(self, client, editor_headers):
        response = await client.post("/api/blogs", json={"title": "No body"}, headers=editor_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["field"] == "content"
        assert body["message"].startswith("Validation error: content")

    @pytest.mark.asyncio
    async def test_null_for_required_field_rejected(self, client, editor_headers):
        record = (
            await client.post("/api/labs", json={"title": "Experiment"}, headers=editor_headers)
        ).json()["data"]

        response = await client.put(f"/api/labs/{record['id']}", json={"title": None}, headers=editor_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "title cannot be null"

    @pytest.mark.asyncio
    async def test_malformed_id(self, client):
        response = await client.get("/api/portfolio/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["field"] == "record_id"

    @pytest.mark.asyncio
    async def test_limit_bounds(self, client):
        response = await client.get("/api/blogs", params={"limit": 0})
        assert response.status_code == 400


class TestVisibility:

    @pytest.mark.asyncio
    async def test_anonymous_list_shows_only_published(self, client, editor_headers):
        await client.post("/api/blogs", json={"title": "Live post", "content": "x"}, headers=editor_headers)
        await client.post(
            "/api/blogs", json={"title": "Draft post", "content": "x", "status": "draft"}, headers=editor_headers
        )

        response = await client.get("/api/blogs")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        assert [p["title"] for p in data["items"]] == ["Live post"]

    @pytest.mark.asyncio
    async def test_anonymous_cannot_list_drafts(self, client):
        response = await client.get("/api/blogs", params={"status": "draft"})
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_portal_user_lists_drafts(self, client, editor_headers, viewer_headers):
        await client.post(
            "/api/portfolio", json={"title": "Secret project", "status": "draft"}, headers=editor_headers
        )
        response = await client.get("/api/portfolio", params={"status": "draft"}, headers=viewer_headers)
        assert response.status_code == 200
        assert response.json()["data"]["total"] == 1

    @pytest.mark.asyncio
    async def test_draft_by_id_hidden_from_anonymous(self, client, editor_headers):
        record = (
            await client.post(
                "/api/labs", json={"title": "Hidden lab", "status": "draft"}, headers=editor_headers
            )
        ).json()["data"]

        anonymous = await client.get(f"/api/labs/{record['id']}")
        portal = await client.get(f"/api/labs/{record['id']}", headers=editor_headers)

        assert anonymous.status_code == 404
        assert portal.status_code == 200

    @pytest.mark.asyncio
    async def test_services_public_status_is_active(self, client, editor_headers):
        await client.post("/api/services", json={"title": "SEO"}, headers=editor_headers)
        await client.post(
            "/api/services", json={"title": "Legacy hosting", "status": "inactive"}, headers=editor_headers
        )

        response = await client.get("/api/services")

        assert [s["title"] for s in response.json()["data"]["items"]] == ["SEO"]

    @pytest.mark.asyncio
    async def test_testimonials_require_portal_to_read(self, client, client_headers):
        anonymous = await client.get("/api/admin/testimonials")
        as_client = await client.get("/api/admin/testimonials", headers=client_headers)
        assert anonymous.status_code == 401
        assert as_client.status_code == 403


class TestListing:

    @pytest.mark.asyncio
    async def test_pagination_and_category_filter(self, client, editor_headers):
        for i in range(5):
            await client.post(
                "/api/portfolio",
                json={"title": f"Project {i}", "category": "web" if i % 2 == 0 else "mobile"},
                headers=editor_headers,
            )

        page = (await client.get("/api/portfolio", params={"limit": 2, "offset": 1})).json()["data"]
        assert page["total"] == 5
        assert page["limit"] == 2
        assert page["offset"] == 1
        assert len(page["items"]) == 2

        web = (await client.get("/api/portfolio", params={"category": "web"})).json()["data"]
        assert web["total"] == 3
        assert {p["category"] for p in web["items"]} == {"web"}
