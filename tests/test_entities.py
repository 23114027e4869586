"""
Tests for the structured memory graph: entities, relationships, predicates
and the maintenance operations (merge, split, duplicates, bulk, unused).
"""
import pytest

from repositories import EntityRepository, RelationshipRepository, PredicateRepository
from utils.text import trigram_similarity


async def create_entity(client, name, type_="Person", **extra):
    response = await client.post("/api/entities", json={"name": name, "type": type_, **extra})
    assert response.status_code == 201
    return response.json()


async def link(client, source, target, predicate="knows"):
    response = await client.post("/api/entities/relationships", json={
        "sourceEntityId": source["id"],
        "targetEntityId": target["id"],
        "predicateName": predicate,
    })
    assert response.status_code == 201
    return response.json()


class TestEntityRoutes:
    """CRUD and history over /api/entities."""

    async def test_create_requires_name_and_type(self, client):
        response = await client.post("/api/entities", json={"name": "Ada"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: name and type"}

    async def test_create_same_name_and_type_updates_description(self, client):
        first = await create_entity(client, "Ada", description="old")
        second = await create_entity(client, "Ada", description="new")

        assert second["id"] == first["id"]
        assert second["description"] == "new"
        assert len((await client.get("/api/entities")).json()) == 1

    async def test_same_name_different_type_is_a_new_entity(self, client):
        person = await create_entity(client, "Mercury", "Planet")
        element = await create_entity(client, "Mercury", "Element")

        assert person["id"] != element["id"]

    async def test_list_filters_by_brain(self, client):
        brain = (await client.post("/api/brains", json={"name": "Work", "configJson": {}})).json()
        await create_entity(client, "Ada", brainId=brain["id"])
        await create_entity(client, "Bob")

        response = await client.get("/api/entities", params={"brainId": brain["id"]})

        assert [e["name"] for e in response.json()] == ["Ada"]

    async def test_update_writes_history(self, client):
        entity = await create_entity(client, "Ada", description="Mathematician")

        response = await client.put(f"/api/entities/{entity['id']}", json={
            "description": "Programmer",
            "tags": ["pioneer"],
        })
        assert response.status_code == 200
        assert response.json()["description"] == "Programmer"

        history = (await client.get(f"/api/entities/{entity['id']}/history")).json()
        by_field = {h["field_name"]: h for h in history}
        assert set(by_field) == {"description", "tags"}
        assert by_field["description"]["old_value"] == "Mathematician"
        assert by_field["description"]["new_value"] == "Programmer"
        assert by_field["tags"]["old_value"] == "[]"
        assert by_field["tags"]["new_value"] == '["pioneer"]'
        assert sorted(h["version"] for h in history) == [1, 2]

    async def test_update_unchanged_field_is_not_logged(self, client):
        entity = await create_entity(client, "Ada", description="Same")

        await client.put(f"/api/entities/{entity['id']}", json={"description": "Same"})

        assert (await client.get(f"/api/entities/{entity['id']}/history")).json() == []

    async def test_update_rejects_blank_name(self, client):
        entity = await create_entity(client, "Ada")

        response = await client.put(f"/api/entities/{entity['id']}", json={"name": ""})

        assert response.status_code == 400

    async def test_update_into_existing_name_and_type_conflicts(self, client):
        await create_entity(client, "Ada")
        bob = await create_entity(client, "Bob")

        response = await client.put(f"/api/entities/{bob['id']}", json={"name": "Ada"})

        assert response.status_code == 409

    async def test_get_and_delete(self, client):
        entity = await create_entity(client, "Ada")

        assert (await client.get(f"/api/entities/{entity['id']}")).json()["name"] == "Ada"
        deleted = await client.delete(f"/api/entities/{entity['id']}")
        assert deleted.json() == {"message": "Entity deleted successfully"}
        missing = await client.get(f"/api/entities/{entity['id']}")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Entity not found"}


class TestRelationshipRoutes:
    """Edges between entities."""

    async def test_create_and_graph(self, client):
        ada = await create_entity(client, "Ada")
        bob = await create_entity(client, "Bob")
        rel = await link(client, ada, bob, "mentors")

        graph = (await client.get("/api/entities/relationships")).json()

        assert {n["name"] for n in graph["nodes"]} == {"Ada", "Bob"}
        assert graph["edges"] == [{
            "id": rel["id"],
            "source": ada["id"],
            "target": bob["id"],
            "label": "mentors",
            "context": None,
        }]

    async def test_duplicate_triple_is_reported_not_created(self, client):
        ada = await create_entity(client, "Ada")
        bob = await create_entity(client, "Bob")
        await link(client, ada, bob)

        response = await client.post("/api/entities/relationships", json={
            "sourceEntityId": ada["id"],
            "targetEntityId": bob["id"],
            "predicateName": "knows",
        })

        assert response.status_code == 200
        assert response.json() == {"message": "Relationship already exists."}
        assert len((await client.get("/api/entities/relationships")).json()["edges"]) == 1

    async def test_create_requires_all_parts(self, client):
        response = await client.post("/api/entities/relationships", json={"sourceEntityId": "x"})

        assert response.status_code == 400

    async def test_create_with_unknown_entity(self, client):
        ada = await create_entity(client, "Ada")

        response = await client.post("/api/entities/relationships", json={
            "sourceEntityId": ada["id"],
            "targetEntityId": "missing",
            "predicateName": "knows",
        })

        assert response.status_code == 404
        assert response.json() == {"error": "Entity not found"}

    async def test_create_from_names(self, client):
        await create_entity(client, "Ada")
        await create_entity(client, "Babbage")
        payload = {"source": "Ada", "predicate": "works_with", "target": "Babbage"}

        created = await client.post("/api/entities/relationships/from-names", json=payload)
        again = await client.post("/api/entities/relationships/from-names", json=payload)

        assert created.status_code == 201
        assert again.status_code == 200
        assert again.json()["relationship"]["id"] == created.json()["id"]
        predicates = (await client.get("/api/predicates")).json()
        assert [p["name"] for p in predicates] == ["works_with"]

    async def test_create_from_names_unknown_target(self, client):
        await create_entity(client, "Ada")

        response = await client.post("/api/entities/relationships/from-names", json={
            "source": "Ada", "predicate": "knows", "target": "Nobody",
        })

        assert response.status_code == 404
        assert response.json() == {"error": "Target entity 'Nobody' not found."}

    async def test_update_changes_predicate(self, client):
        ada = await create_entity(client, "Ada")
        bob = await create_entity(client, "Bob")
        rel = await link(client, ada, bob)

        response = await client.put(f"/api/entities/relationships/{rel['id']}", json={
            "predicateName": "admires",
            "context": "letters",
        })

        assert response.status_code == 200
        edges = (await client.get(f"/api/entities/{ada['id']}/relationships")).json()
        assert edges[0]["predicate_name"] == "admires"
        assert edges[0]["target_name"] == "Bob"
        assert edges[0]["context"] == "letters"

    async def test_update_requires_predicate_name(self, client):
        response = await client.put("/api/entities/relationships/any", json={"context": "x"})

        assert response.status_code == 400
        assert response.json() == {"error": "predicateName is required"}

    async def test_delete(self, client):
        ada = await create_entity(client, "Ada")
        bob = await create_entity(client, "Bob")
        rel = await link(client, ada, bob)

        deleted = await client.delete(f"/api/entities/relationships/{rel['id']}")
        missing = await client.delete(f"/api/entities/relationships/{rel['id']}")

        assert deleted.json() == {"message": "Relationship deleted successfully"}
        assert missing.status_code == 404


class TestGraphMaintenance:
    """Merge, split, duplicates, bulk actions and unused entities."""

    async def test_merge_moves_edges_and_aliases(self, client):
        target = await create_entity(client, "Ada Lovelace", aliases=["Ada"])
        source = await create_entity(client, "Countess of Lovelace", aliases=["Augusta"])
        bob = await create_entity(client, "Bob")
        await link(client, source, bob)
        await link(client, bob, source, "admires")

        response = await client.post("/api/entities/merge", json={
            "targetId": target["id"],
            "sourceId": source["id"],
        })

        assert response.status_code == 200
        assert response.json()["success"] is True
        merged = (await client.get(f"/api/entities/{target['id']}")).json()
        assert merged["aliases"] == ["Ada", "Augusta", "Countess of Lovelace"]
        assert (await client.get(f"/api/entities/{source['id']}")).status_code == 404
        edges = (await client.get(f"/api/entities/{target['id']}/relationships")).json()
        assert {e["predicate_name"] for e in edges} == {"knows", "admires"}

    async def test_merge_drops_duplicate_and_self_edges(self, client):
        target = await create_entity(client, "Ada")
        source = await create_entity(client, "Ada L.")
        bob = await create_entity(client, "Bob")
        await link(client, target, bob)
        await link(client, source, bob)
        await link(client, source, target, "same_as")

        await client.post("/api/entities/merge", json={"targetId": target["id"], "sourceId": source["id"]})

        edges = (await client.get("/api/entities/relationships")).json()["edges"]
        assert len(edges) == 1
        assert edges[0]["source"] == target["id"]
        assert edges[0]["target"] == bob["id"]

    async def test_merge_with_itself_is_rejected(self, client):
        ada = await create_entity(client, "Ada")

        response = await client.post("/api/entities/merge", json={"targetId": ada["id"], "sourceId": ada["id"]})

        assert response.status_code == 400

    async def test_merge_unknown_source(self, client):
        ada = await create_entity(client, "Ada")

        response = await client.post("/api/entities/merge", json={"targetId": ada["id"], "sourceId": "nope"})

        assert response.status_code == 404
        assert response.json() == {"error": "Source entity not found"}

    async def test_split_redistributes_relationships(self, client):
        source = await create_entity(client, "Jordan")
        paris = await create_entity(client, "Paris", "Place")
        nile = await create_entity(client, "Nile", "Place")
        first = await link(client, source, paris, "lives_in")
        second = await link(client, source, nile, "visited")
        doomed = await link(client, paris, source, "hosts")

        response = await client.post("/api/entities/split", json={
            "sourceEntityId": source["id"],
            "newEntities": [
                {"id": "a", "name": "Jordan (person)", "type": "Person"},
                {"id": "b", "name": "Jordan (country)", "type": "Place"},
            ],
            "relationshipMigrations": [
                {"relationshipId": first["id"], "newOwnerEntityId": "a"},
                {"relationshipId": second["id"], "newOwnerEntityId": "b"},
                {"relationshipId": doomed["id"], "newOwnerEntityId": "DELETE"},
            ],
        })

        assert response.status_code == 200
        person_id, country_id = response.json()["newEntityIds"]
        assert (await client.get(f"/api/entities/{source['id']}")).status_code == 404

        edges = {e["id"]: e for e in (await client.get("/api/entities/relationships")).json()["edges"]}
        assert set(edges) == {first["id"], second["id"]}
        assert edges[first["id"]]["source"] == person_id
        assert edges[second["id"]]["source"] == country_id

    async def test_split_needs_two_entities(self, client):
        source = await create_entity(client, "Jordan")

        response = await client.post("/api/entities/split", json={
            "sourceEntityId": source["id"],
            "newEntities": [{"id": "a", "name": "Only one", "type": "Person"}],
            "relationshipMigrations": [],
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body for splitting entity."}

    async def test_duplicates_pairs_similar_names(self, client):
        await create_entity(client, "John Smith")
        await create_entity(client, "Jon Smith")
        await create_entity(client, "Paris", "Place")

        pairs = (await client.get("/api/entities/duplicates")).json()

        assert len(pairs) == 1
        names = {pairs[0]["entity1"]["name"], pairs[0]["entity2"]["name"]}
        assert names == {"John Smith", "Jon Smith"}
        assert pairs[0]["entity1"]["id"] < pairs[0]["entity2"]["id"]
        assert pairs[0]["similarity"] > 0.4

    async def test_bulk_change_type_and_tags(self, client):
        ada = await create_entity(client, "Ada", tags=["math"])
        bob = await create_entity(client, "Bob")
        ids = [ada["id"], bob["id"]]

        retyped = await client.post("/api/entities/bulk-actions", json={
            "action": "change_type", "ids": ids, "payload": {"newType": "Engineer"},
        })
        tagged = await client.post("/api/entities/bulk-actions", json={
            "action": "add_tags", "ids": ids, "payload": {"tags": ["math", "vip"]},
        })

        assert retyped.status_code == 200
        assert tagged.json()["message"] == "Action 'add_tags' completed on 2 entities."
        entities = {e["name"]: e for e in (await client.get("/api/entities")).json()}
        assert entities["Ada"]["type"] == "Engineer"
        assert entities["Ada"]["tags"] == ["math", "vip"]
        assert entities["Bob"]["tags"] == ["math", "vip"]

    async def test_bulk_delete(self, client):
        ada = await create_entity(client, "Ada")
        await create_entity(client, "Bob")

        await client.post("/api/entities/bulk-actions", json={"action": "delete", "ids": [ada["id"]]})

        assert [e["name"] for e in (await client.get("/api/entities")).json()] == ["Bob"]

    @pytest.mark.parametrize("body", [
        {"action": "change_type", "ids": ["x"], "payload": {}},
        {"action": "add_tags", "ids": ["x"], "payload": {"tags": []}},
        {"action": "explode", "ids": ["x"]},
        {"action": "delete", "ids": []},
    ])
    async def test_bulk_rejects_bad_requests(self, client, body):
        response = await client.post("/api/entities/bulk-actions", json=body)

        assert response.status_code == 400

    async def test_unused_excludes_linked_entities(self, client):
        ada = await create_entity(client, "Ada")
        bob = await create_entity(client, "Bob")
        await create_entity(client, "Loner")
        await link(client, ada, bob)

        unused = (await client.get("/api/entities/unused")).json()

        assert [e["name"] for e in unused] == ["Loner"]


class TestPredicateRoutes:
    """Predicate vocabulary."""

    async def test_create_upserts_by_name(self, client):
        first = await client.post("/api/predicates", json={"name": "knows"})
        second = await client.post("/api/predicates", json={"name": "knows", "description": "acquainted"})

        assert second.json()["id"] == first.json()["id"]
        assert second.json()["description"] == "acquainted"

    async def test_create_requires_name(self, client):
        response = await client.post("/api/predicates", json={"description": "x"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required field: name"}

    async def test_update_rename_conflict(self, client):
        await client.post("/api/predicates", json={"name": "knows"})
        other = (await client.post("/api/predicates", json={"name": "likes"})).json()

        response = await client.put(f"/api/predicates/{other['id']}", json={"name": "knows"})

        assert response.status_code == 409

    async def test_delete(self, client):
        predicate = (await client.post("/api/predicates", json={"name": "knows"})).json()

        deleted = await client.delete(f"/api/predicates/{predicate['id']}")

        assert deleted.json() == {"message": "Predicate deleted successfully"}
        assert (await client.get("/api/predicates")).json() == []


class TestEntityRepository:
    """Repository behaviour not visible through a single route."""

    async def test_ensure_predicate_is_idempotent(self, session):
        repo = PredicateRepository(session)

        first = await repo.ensure("knows")
        second = await repo.ensure("knows")

        assert first.id == second.id

    async def test_create_if_missing(self, session):
        entities = EntityRepository(session)
        ada, _ = await entities.upsert({"name": "Ada", "type": "Person"})
        bob, _ = await entities.upsert({"name": "Bob", "type": "Person"})
        predicate = await PredicateRepository(session).ensure("knows")
        repo = RelationshipRepository(session)

        _, created = await repo.create_if_missing(ada.id, bob.id, predicate.id)
        _, again = await repo.create_if_missing(ada.id, bob.id, predicate.id)

        assert created is True
        assert again is False

    def test_trigram_similarity_bounds(self):
        assert trigram_similarity("Ada", "ada") == 1.0
        assert trigram_similarity("Ada", "") == 0.0
        assert 0.0 < trigram_similarity("John Smith", "Jon Smith") < 1.0
