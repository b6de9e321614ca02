"""
Fauna API: Endpoint Tests
============================

What:  HTTP-level tests for /api/animals, /api/species, /api/categories and /health.
How:   HTTPX AsyncClient over ASGITransport; the app's database dependency is
       replaced by the in-memory store from conftest.

What we test:
    ✅ Create → join → list round trip across the three collections
    ✅ PATCH renames propagate into joined animal reads
    ✅ Malformed identifiers → 400, unknown identifiers → 404
    ✅ DELETE of an unknown id still reports success
    ✅ Sorting, skip/limit, limit=0 and substring filters
    ✅ Animals with dangling species references are still listed
    ✅ Store failures → 500 with a generic body
    ✅ Request ID header and health status
    ✅ X-Request-Timeout budget reaches every store call
"""

import pymongo
import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from fauna_api.config import settings

MISSING_ID = "64b7f0c2a1b2c3d4e5f60718"


@pytest.fixture
def store_budgets(monkeypatch):
    """Records the timeout every store call is wrapped in."""
    budgets = []
    real_timeout = pymongo.timeout

    def recording_timeout(seconds):
        budgets.append(seconds)
        return real_timeout(seconds)

    monkeypatch.setattr(pymongo, "timeout", recording_timeout)
    return budgets


async def create(client, resource, body):
    response = await client.post(f"/api/{resource}", json=body)
    assert response.status_code == 201, response.text
    return response.json()


async def seed_zoo(client):
    mammals = await create(client, "categories", {"category_name": "Mammals"})
    lion = await create(client, "species", {"species_name": "Lion", "category": mammals["_id"]})
    leo = await create(
        client,
        "animals",
        {
            "animal_name": "Leo",
            "birthdate": "2019-03-01T00:00:00Z",
            "species": lion["_id"],
            "location": {"type": "Point", "coordinates": [36.8, -1.3]},
        },
    )
    return mammals, lion, leo


class TestAnimalJoins:

    @pytest.mark.asyncio
    async def test_list_joins_species_and_category(self, test_client):
        _, _, leo = await seed_zoo(test_client)

        response = await test_client.get("/api/animals")

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["_id"] == leo["_id"]
        assert body[0]["species"] == "Lion"
        assert body[0]["category"] == "Mammals"
        assert body[0]["location"] == {"type": "Point", "coordinates": [36.8, -1.3]}

    @pytest.mark.asyncio
    async def test_get_animal_by_id(self, test_client):
        _, _, leo = await seed_zoo(test_client)

        response = await test_client.get(f"/api/animals/{leo['_id']}")

        assert response.status_code == 200
        assert response.json()["animal_name"] == "Leo"
        assert response.json()["category"] == "Mammals"

    @pytest.mark.asyncio
    async def test_category_rename_visible_through_join(self, test_client):
        mammals, _, leo = await seed_zoo(test_client)

        response = await test_client.patch(
            f"/api/categories/{mammals['_id']}", json={"category_name": "Felines"}
        )
        assert response.status_code == 200
        assert response.json() == {"success": "true", "message": "Category updated successfully"}

        animal = (await test_client.get(f"/api/animals/{leo['_id']}")).json()
        assert animal["category"] == "Felines"

    @pytest.mark.asyncio
    async def test_dangling_species_reference_still_listed(self, test_client):
        await create(test_client, "animals", {"animal_name": "Ghost", "species": MISSING_ID})

        body = (await test_client.get("/api/animals")).json()

        assert [a["animal_name"] for a in body] == ["Ghost"]
        assert "species" not in body[0]
        assert "category" not in body[0]

    @pytest.mark.asyncio
    async def test_filter_by_joined_names(self, test_client):
        await seed_zoo(test_client)
        await create(test_client, "animals", {"animal_name": "Rex"})

        by_category = (await test_client.get("/api/animals", params={"category_name": "MAMM"})).json()
        by_species = (await test_client.get("/api/animals", params={"species_name": "tiger"})).json()

        assert [a["animal_name"] for a in by_category] == ["Leo"]
        assert by_species == []

    @pytest.mark.asyncio
    async def test_get_unknown_animal(self, test_client):
        response = await test_client.get(f"/api/animals/{MISSING_ID}")
        assert response.status_code == 404
        assert response.json() == {"error": "Animal not found"}


class TestListing:

    @pytest.mark.asyncio
    async def test_default_sort_is_name_ascending(self, test_client):
        for name in ("Reptiles", "Birds", "Mammals"):
            await create(test_client, "categories", {"category_name": name})

        body = (await test_client.get("/api/categories")).json()

        assert [c["category_name"] for c in body] == ["Birds", "Mammals", "Reptiles"]

    @pytest.mark.asyncio
    async def test_sort_order_without_sort_by_keeps_name_ascending(self, test_client):
        for name in ("b", "c", "a"):
            await create(test_client, "categories", {"category_name": name})

        response = await test_client.get("/api/categories", params={"sort_order": "desc"})

        assert [c["category_name"] for c in response.json()] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_sort_desc_skip_and_limit(self, test_client):
        for name in ("a", "b", "c", "d"):
            await create(test_client, "categories", {"category_name": name})

        response = await test_client.get(
            "/api/categories", params={"sort_by": "category_name", "sort_order": "desc", "skip": 1, "limit": 2}
        )

        assert [c["category_name"] for c in response.json()] == ["c", "b"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource", ["animals", "species", "categories"])
    async def test_limit_zero_returns_empty_list(self, test_client, resource):
        await seed_zoo(test_client)

        response = await test_client.get(f"/api/{resource}", params={"limit": 0})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_default_limit_is_ten(self, test_client):
        for i in range(12):
            await create(test_client, "categories", {"category_name": f"c{i:02d}"})

        body = (await test_client.get("/api/categories")).json()

        assert len(body) == 10

    @pytest.mark.asyncio
    async def test_negative_limit_rejected(self, test_client):
        response = await test_client.get("/api/categories", params={"limit": -1})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid query parameter 'limit'"}

    @pytest.mark.asyncio
    async def test_species_filter_by_category(self, test_client):
        mammals, lion, _ = await seed_zoo(test_client)
        await create(test_client, "species", {"species_name": "Eagle"})

        body = (await test_client.get("/api/species", params={"category_id": mammals["_id"]})).json()

        assert [s["_id"] for s in body] == [lion["_id"]]
        assert body[0]["category"] == mammals["_id"]

    @pytest.mark.asyncio
    async def test_species_filter_invalid_category(self, test_client):
        response = await test_client.get("/api/species", params={"category_id": "nope"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid category ID format"}

    @pytest.mark.asyncio
    async def test_name_filter_is_literal(self, test_client):
        await create(test_client, "categories", {"category_name": "Mammals"})

        body = (await test_client.get("/api/categories", params={"category_name": ".*"})).json()

        assert body == []


class TestIdentifiers:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource", ["animals", "species", "categories"])
    @pytest.mark.parametrize("method", ["get", "patch", "delete"])
    async def test_malformed_id_rejected(self, test_client, resource, method):
        kwargs = {"json": {"image": "x"}} if method == "patch" else {}

        response = await test_client.request(method.upper(), f"/api/{resource}/123", **kwargs)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid ID format"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource", ["species", "categories"])
    async def test_unknown_id_not_found(self, test_client, resource):
        response = await test_client.get(f"/api/{resource}/{MISSING_ID}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_unknown_species(self, test_client):
        response = await test_client.patch(f"/api/species/{MISSING_ID}", json={"species_name": "Lion"})
        assert response.status_code == 404
        assert response.json() == {"error": "Species not found"}

    @pytest.mark.asyncio
    async def test_delete_unknown_id_succeeds(self, test_client):
        response = await test_client.delete(f"/api/animals/{MISSING_ID}")
        assert response.status_code == 200
        assert response.json() == {"success": "true", "message": "Animal deleted successfully"}

    @pytest.mark.asyncio
    async def test_create_assigns_distinct_ids(self, test_client):
        first = await create(test_client, "categories", {"category_name": "Birds"})
        second = await create(test_client, "categories", {"category_name": "Birds"})

        assert first["_id"] != second["_id"]
        assert ObjectId.is_valid(first["_id"])


class TestWrites:

    @pytest.mark.asyncio
    async def test_delete_leaves_references(self, test_client):
        mammals, lion, _ = await seed_zoo(test_client)

        response = await test_client.delete(f"/api/categories/{mammals['_id']}")
        assert response.status_code == 200

        species = (await test_client.get(f"/api/species/{lion['_id']}")).json()
        assert species["category"] == mammals["_id"]
        assert (await test_client.get(f"/api/categories/{mammals['_id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_patch_species_partial(self, test_client):
        _, lion, _ = await seed_zoo(test_client)

        await test_client.patch(f"/api/species/{lion['_id']}", json={"image": "lion.png"})

        species = (await test_client.get(f"/api/species/{lion['_id']}")).json()
        assert species["image"] == "lion.png"
        assert species["species_name"] == "Lion"

    @pytest.mark.asyncio
    async def test_patch_without_fields_rejected(self, test_client):
        mammals = await create(test_client, "categories", {"category_name": "Mammals"})

        response = await test_client.patch(f"/api/categories/{mammals['_id']}", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "No fields to update"}

    @pytest.mark.asyncio
    async def test_malformed_body_rejected(self, test_client):
        response = await test_client.post(
            "/api/categories",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Failed to parse request body"}

    @pytest.mark.asyncio
    async def test_create_species_invalid_category(self, test_client):
        response = await test_client.post("/api/species", json={"species_name": "Lion", "category": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid category ID"}


class TestOperational:

    @pytest.mark.asyncio
    async def test_store_failure_is_generic_500(self, test_client, fake_db, monkeypatch):
        async def unavailable(*args, **kwargs):
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")

        monkeypatch.setattr(fake_db["animals"], "aggregate", unavailable)

        response = await test_client.get("/api/animals")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/api/categories", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

        generated = await test_client.get("/api/categories")
        assert len(generated.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_health_without_store_client(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestRequestDeadline:

    @pytest.mark.asyncio
    async def test_header_budget_bounds_store_calls(self, test_client, store_budgets):
        await create(test_client, "categories", {"category_name": "Mammals"})
        store_budgets.clear()

        response = await test_client.get("/api/categories", headers={"X-Request-Timeout": "2"})

        assert response.status_code == 200
        assert store_budgets
        assert all(0 < budget <= 2 for budget in store_budgets)

    @pytest.mark.asyncio
    async def test_default_budget_without_header(self, test_client, store_budgets):
        response = await test_client.get("/api/animals")

        assert response.status_code == 200
        assert store_budgets
        assert all(2 < budget <= settings.request_timeout_seconds for budget in store_budgets)

    @pytest.mark.asyncio
    async def test_header_budget_capped(self, test_client, store_budgets):
        response = await test_client.get("/api/species", headers={"X-Request-Timeout": "100000"})

        assert response.status_code == 200
        assert all(budget <= settings.request_timeout_max_seconds for budget in store_budgets)
