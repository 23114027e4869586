"""
Tests for brains and their memory statistics.
"""


async def create_brain(client, name="Work", config=None):
    response = await client.post("/api/brains", json={"name": name, "configJson": config or {"model": "x"}})
    assert response.status_code == 201
    return response.json()


class TestBrainRoutes:
    """CRUD over /api/brains."""

    async def test_create_accepts_config_text(self, client):
        response = await client.post("/api/brains", json={"name": "Work", "configJson": '{"depth": 2}'})

        assert response.status_code == 201
        assert response.json()["config_json"] == {"depth": 2}

    async def test_create_requires_name_and_config(self, client):
        response = await client.post("/api/brains", json={"name": "Work"})

        assert response.status_code == 400
        assert response.json() == {"error": "Name and configJson are required"}

    async def test_invalid_config_text(self, client):
        response = await client.post("/api/brains", json={"name": "Work", "configJson": "{nope"})

        assert response.status_code == 400
        assert response.json() == {"error": "configJson must be valid JSON."}

    async def test_duplicate_name(self, client):
        await create_brain(client)

        response = await client.post("/api/brains", json={"name": "Work", "configJson": {}})

        assert response.status_code == 409
        assert response.json() == {"error": "A brain with this name already exists."}

    async def test_list_get_update_delete(self, client):
        work = await create_brain(client, "Work")
        await create_brain(client, "Home")

        assert [b["name"] for b in (await client.get("/api/brains")).json()] == ["Home", "Work"]
        assert (await client.get(f"/api/brains/{work['id']}")).json()["name"] == "Work"

        updated = await client.put(f"/api/brains/{work['id']}", json={"name": "Office", "configJson": {"a": 1}})
        assert updated.json()["name"] == "Office"
        assert updated.json()["config_json"] == {"a": 1}

        clash = await client.put(f"/api/brains/{work['id']}", json={"name": "Home", "configJson": {}})
        assert clash.status_code == 409

        deleted = await client.delete(f"/api/brains/{work['id']}")
        assert deleted.json() == {"message": "Brain deleted successfully"}
        missing = await client.get(f"/api/brains/{work['id']}")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Brain not found"}

    async def test_deleting_brain_keeps_its_entities(self, client):
        brain = await create_brain(client)
        entity = (await client.post("/api/entities", json={
            "name": "Ada", "type": "Person", "brainId": brain["id"],
        })).json()

        await client.delete(f"/api/brains/{brain['id']}")

        kept = (await client.get(f"/api/entities/{entity['id']}")).json()
        assert kept["brain_id"] is None


class TestBrainStats:
    """Entity and relationship counts per brain."""

    async def test_global_memory_first(self, client):
        brain = await create_brain(client)
        ada = (await client.post("/api/entities", json={"name": "Ada", "type": "Person"})).json()
        bob = (await client.post("/api/entities", json={
            "name": "Bob", "type": "Person", "brainId": brain["id"],
        })).json()
        await client.post("/api/entities", json={"name": "Cy", "type": "Person", "brainId": brain["id"]})
        await client.post("/api/entities/relationships", json={
            "sourceEntityId": ada["id"],
            "targetEntityId": bob["id"],
            "predicateName": "knows",
            "brainId": brain["id"],
        })

        stats = (await client.get("/api/brains/stats")).json()

        assert stats[0]["name"] == "Global Memory"
        assert stats[0]["entityCount"] == 1
        assert stats[0]["relationshipCount"] == 0
        assert stats[1] == {
            "id": brain["id"],
            "name": "Work",
            "entityCount": 2,
            "relationshipCount": 1,
        }
