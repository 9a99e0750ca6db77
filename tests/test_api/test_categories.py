"""Tests for category endpoints."""

import uuid

import pytest
from httpx import AsyncClient

BASE = "/api/categories"


async def create(client: AsyncClient, headers: dict, **body) -> dict:
    response = await client.post(BASE, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["category"]


class TestCreateCategory:
    """Tests for POST /api/categories."""

    @pytest.mark.asyncio
    async def test_create_returns_envelope(self, client: AsyncClient, editor_headers: dict):
        response = await client.post(
            BASE,
            json={"name": "Web Development", "color": "#3B82F6", "sortOrder": 3},
            headers=editor_headers,
        )

        assert response.status_code == 201
        category = response.json()["category"]
        assert category["slug"] == "web-development"
        assert category["sortOrder"] == 3
        assert category["parentId"] is None
        assert category["isActive"] is True
        assert "createdAt" in category
        assert "updatedAt" in category

    @pytest.mark.asyncio
    async def test_create_child(self, client: AsyncClient, editor_headers: dict):
        parent = await create(client, editor_headers, name="Technology")

        child = await create(client, editor_headers, name="Python", parentId=parent["id"])

        assert child["parentId"] == parent["id"]

    @pytest.mark.asyncio
    async def test_missing_parent_is_404(self, client: AsyncClient, editor_headers: dict):
        response = await client.post(
            BASE,
            json={"name": "Orphan", "parentId": str(uuid.uuid4())},
            headers=editor_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Parent category not found"}

    @pytest.mark.asyncio
    async def test_client_slug_is_ignored(self, client: AsyncClient, editor_headers: dict):
        category = await create(client, editor_headers, name="Home Office", slug="custom")

        assert category["slug"] == "home-office"

    @pytest.mark.asyncio
    async def test_empty_color_is_accepted(self, client: AsyncClient, editor_headers: dict):
        category = await create(client, editor_headers, name="Plain", color="")

        assert category["color"] is None

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"name": ""},
            {"name": "x" * 101},
            {"name": "Bad color", "color": "blue"},
            {"name": "Bad order", "sortOrder": -1},
            {"name": "Bad parent", "parentId": "nope"},
            {"name": "Extra", "owner": "me"},
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_body_is_400(self, client: AsyncClient, editor_headers: dict, body: dict):
        response = await client.post(BASE, json=body, headers=editor_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid request"
        assert data["details"]

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient):
        response = await client.post(BASE, json={"name": "Anonymous"})

        assert response.status_code == 401
        assert response.json() == {"error": "Access token required"}

    @pytest.mark.asyncio
    async def test_requires_editor_role(self, client: AsyncClient, reader_headers: dict):
        response = await client.post(BASE, json={"name": "Reader"}, headers=reader_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Insufficient permissions"}


class TestAnonymousCreate:
    """POST is open when allow_anonymous_create is set."""

    @pytest.fixture
    def test_settings(self, test_settings):
        return test_settings.model_copy(update={"allow_anonymous_create": True})

    @pytest.mark.asyncio
    async def test_create_without_token(self, client: AsyncClient):
        response = await client.post(BASE, json={"name": "Open"})

        assert response.status_code == 201
        assert response.json()["category"]["slug"] == "open"

    @pytest.mark.asyncio
    async def test_invalid_token_still_rejected(self, client: AsyncClient):
        response = await client.post(
            BASE,
            json={"name": "Open"},
            headers={"Authorization": "Bearer forged"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_updates_still_need_editor(self, client: AsyncClient):
        category = (await client.post(BASE, json={"name": "Open"})).json()["category"]

        response = await client.put(f"{BASE}/{category['id']}", json={"name": "Closed"})

        assert response.status_code == 401


class TestReadCategories:
    """Tests for the public read endpoints."""

    @pytest.mark.asyncio
    async def test_get_one(self, client: AsyncClient, editor_headers: dict):
        created = await create(client, editor_headers, name="Health")

        response = await client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["category"]["slug"] == "health"

    @pytest.mark.asyncio
    async def test_get_missing_is_404(self, client: AsyncClient):
        response = await client.get(f"{BASE}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Category not found"}

    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, client: AsyncClient):
        response = await client.get(f"{BASE}/not-a-uuid")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_envelope_and_pagination(self, client: AsyncClient, editor_headers: dict):
        for i in range(3):
            await create(client, editor_headers, name=f"Item {i}", sortOrder=i)

        response = await client.get(BASE, params={"page": 2, "limit": 2})

        assert response.status_code == 200
        data = response.json()
        assert [c["name"] for c in data["categories"]] == ["Item 2"]
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    @pytest.mark.asyncio
    async def test_list_roots_only(self, client: AsyncClient, editor_headers: dict):
        root = await create(client, editor_headers, name="Root")
        await create(client, editor_headers, name="Child", parentId=root["id"])

        roots = (await client.get(BASE, params={"parentId": "null"})).json()
        children = (await client.get(BASE, params={"parentId": root["id"]})).json()
        everything = (await client.get(BASE)).json()

        assert [c["name"] for c in roots["categories"]] == ["Root"]
        assert [c["name"] for c in children["categories"]] == ["Child"]
        assert everything["pagination"]["total"] == 2

    @pytest.mark.asyncio
    async def test_list_bad_parent_filter_is_400(self, client: AsyncClient):
        response = await client.get(BASE, params={"parentId": "root"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_search_and_sort(self, client: AsyncClient, editor_headers: dict):
        await create(client, editor_headers, name="Technology")
        await create(client, editor_headers, name="Biotech")
        await create(client, editor_headers, name="Cooking")

        response = await client.get(
            BASE,
            params={"search": "TECH", "sortBy": "name", "sortOrder": "desc"},
        )

        assert [c["name"] for c in response.json()["categories"]] == ["Technology", "Biotech"]

    @pytest.mark.asyncio
    async def test_list_inactive(self, client: AsyncClient, editor_headers: dict):
        category = await create(client, editor_headers, name="Old")
        await client.put(f"{BASE}/{category['id']}", json={"isActive": False}, headers=editor_headers)

        active = (await client.get(BASE)).json()
        inactive = (await client.get(BASE, params={"isActive": "false"})).json()

        assert active["categories"] == []
        assert [c["name"] for c in inactive["categories"]] == ["Old"]

    @pytest.mark.asyncio
    async def test_list_limit_over_max_is_400(self, client: AsyncClient):
        response = await client.get(BASE, params={"limit": 500})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_hierarchy(self, client: AsyncClient, editor_headers: dict):
        root = await create(client, editor_headers, name="Root")
        child = await create(client, editor_headers, name="Child", parentId=root["id"])
        leaf = await create(client, editor_headers, name="Leaf", parentId=child["id"])

        response = await client.get(f"{BASE}/{root['id']}/hierarchy")

        assert response.status_code == 200
        hierarchy = response.json()["hierarchy"]
        assert [(n["id"], n["depth"]) for n in hierarchy] == [
            (root["id"], 0),
            (child["id"], 1),
            (leaf["id"], 2),
        ]

    @pytest.mark.asyncio
    async def test_hierarchy_of_missing_root_is_empty(self, client: AsyncClient):
        response = await client.get(f"{BASE}/{uuid.uuid4()}/hierarchy")

        assert response.status_code == 200
        assert response.json() == {"hierarchy": []}


class TestMutateCategories:
    """Tests for editor-only mutations."""

    @pytest.mark.asyncio
    async def test_update_renames_slug(self, client: AsyncClient, editor_headers: dict):
        category = await create(client, editor_headers, name="Tech", icon="chip")

        response = await client.put(
            f"{BASE}/{category['id']}",
            json={"name": "Technology"},
            headers=editor_headers,
        )

        assert response.status_code == 200
        updated = response.json()["category"]
        assert updated["slug"] == "technology"
        assert updated["icon"] == "chip"

    @pytest.mark.asyncio
    async def test_update_null_name_is_400(self, client: AsyncClient, editor_headers: dict):
        category = await create(client, editor_headers, name="Tech")

        response = await client.put(
            f"{BASE}/{category['id']}",
            json={"name": None},
            headers=editor_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_requires_token(self, client: AsyncClient, editor_headers: dict):
        category = await create(client, editor_headers, name="Tech")

        response = await client.put(f"{BASE}/{category['id']}", json={"name": "X"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_update_with_rejected_token(self, client: AsyncClient, editor_headers: dict):
        category = await create(client, editor_headers, name="Tech")

        response = await client.put(
            f"{BASE}/{category['id']}",
            json={"name": "X"},
            headers={"Authorization": "Bearer forged"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}

    @pytest.mark.asyncio
    async def test_update_forbidden_for_reader(
        self,
        client: AsyncClient,
        editor_headers: dict,
        reader_headers: dict,
    ):
        category = await create(client, editor_headers, name="Tech")

        response = await client.put(
            f"{BASE}/{category['id']}",
            json={"name": "X"},
            headers=reader_headers,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_can_delete(self, client: AsyncClient, editor_headers: dict, admin_headers: dict):
        category = await create(client, editor_headers, name="Temp")

        response = await client.delete(f"{BASE}/{category['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Category deleted successfully"}
        assert (await client.get(f"{BASE}/{category['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_with_children_is_409(self, client: AsyncClient, editor_headers: dict):
        parent = await create(client, editor_headers, name="Parent")
        await create(client, editor_headers, name="Kid", parentId=parent["id"])

        response = await client.delete(f"{BASE}/{parent['id']}", headers=editor_headers)

        assert response.status_code == 409
        assert "children" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_delete_missing_is_404(self, client: AsyncClient, editor_headers: dict):
        response = await client.delete(f"{BASE}/{uuid.uuid4()}", headers=editor_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_reparent_scenario(self, client: AsyncClient, editor_headers: dict):
        a = await create(client, editor_headers, name="A")
        b = await create(client, editor_headers, name="B", parentId=a["id"])
        c = await create(client, editor_headers, name="C", parentId=b["id"])

        cycle = await client.put(
            f"{BASE}/{a['id']}/hierarchy",
            json={"parentId": c["id"]},
            headers=editor_headers,
        )
        assert cycle.status_code == 409
        assert cycle.json() == {"error": "Cannot set parent to a descendant category"}

        moved = await client.put(
            f"{BASE}/{c['id']}/hierarchy",
            json={"parentId": a["id"]},
            headers=editor_headers,
        )
        assert moved.status_code == 200
        assert moved.json()["category"]["parentId"] == a["id"]

        to_root = await client.put(
            f"{BASE}/{c['id']}/hierarchy",
            json={"parentId": None},
            headers=editor_headers,
        )
        assert to_root.json()["category"]["parentId"] is None

    @pytest.mark.asyncio
    async def test_reparent_requires_editor(self, client: AsyncClient, editor_headers: dict):
        a = await create(client, editor_headers, name="A")

        response = await client.put(f"{BASE}/{a['id']}/hierarchy", json={"parentId": None})

        assert response.status_code == 401
