"""HTTP-level tests for the persons and relationships routers."""

import pytest
from sqlalchemy.exc import OperationalError

from lineage.core import relationship_sync


@pytest.fixture
def people(client):
    def _create(first_name, last_name, **extra):
        resp = client.post(
            "/persons",
            json={"first_name": first_name, "last_name": last_name, **extra},
        )
        assert resp.status_code == 201
        return resp.json()["id"]

    return _create


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.json()["message"]


def test_openapi_lists_relationship_routes(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert "/relationships" in paths
    assert "/relationships/{relationship_id}" in paths


class TestPersons:

    def test_create_and_get(self, client, people):
        person_id = people("Ada", "Lovelace", date_of_birth="1815-12-10")

        resp = client.get(f"/persons/{person_id}")

        assert resp.status_code == 200
        body = resp.json()
        assert body["first_name"] == "Ada"
        assert body["date_of_birth"] == "1815-12-10"
        assert body["is_living"] is True

    def test_blank_name_rejected(self, client):
        resp = client.post("/persons", json={"first_name": "", "last_name": "X"})
        assert resp.status_code == 422

    def test_missing_person(self, client):
        resp = client.get("/persons/nope")
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "PERSON_NOT_FOUND"

    def test_delete_removes_relationship_pairs(self, client, people):
        a = people("Ann", "Smith")
        b = people("Bob", "Smith")
        client.post(
            "/relationships",
            json={"person_id": a, "related_person_id": b, "type": "SPOUSE"},
        )

        resp = client.delete(f"/persons/{a}")

        assert resp.status_code == 204
        listed = client.get("/relationships", params={"person_id": b}).json()
        assert listed["items"] == []


class TestCreateRelationship:

    def test_created_pair_visible_from_both_sides(self, client, people):
        p1 = people("Parent", "One")
        p2 = people("Kid", "One")

        resp = client.post(
            "/relationships",
            json={"person_id": p1, "related_person_id": p2, "type": "PARENT"},
        )
        assert resp.status_code == 201
        rel_id = resp.json()["id"]

        forward = client.get("/relationships", params={"person_id": p1}).json()
        inverse = client.get("/relationships", params={"person_id": p2}).json()

        assert [item["id"] for item in forward["items"]] == [rel_id]
        assert forward["items"][0]["type"] == "PARENT"
        assert forward["items"][0]["related_person"]["id"] == p2
        assert inverse["items"][0]["type"] == "CHILD"
        assert inverse["items"][0]["is_active"] is True

    def test_self_relationship_is_400(self, client, people):
        a = people("Ann", "Smith")

        resp = client.post(
            "/relationships",
            json={"person_id": a, "related_person_id": a, "type": "SIBLING"},
        )

        assert resp.status_code == 400
        assert resp.json()["error_code"] == "SELF_RELATIONSHIP"

    def test_duplicate_is_400(self, client, people):
        a = people("Ann", "Smith")
        b = people("Bob", "Smith")
        payload = {"person_id": a, "related_person_id": b, "type": "SIBLING"}
        client.post("/relationships", json=payload)

        resp = client.post("/relationships", json=payload)

        assert resp.status_code == 400
        assert resp.json() == {
            "error": "This relationship already exists",
            "error_code": "DUPLICATE_RELATIONSHIP",
        }

    def test_unknown_person_is_404(self, client, people):
        a = people("Ann", "Smith")

        resp = client.post(
            "/relationships",
            json={"person_id": a, "related_person_id": "ghost", "type": "SPOUSE"},
        )

        assert resp.status_code == 404
        assert resp.json()["error_code"] == "PERSON_NOT_FOUND"

    def test_invalid_type_is_422(self, client, people):
        a = people("Ann", "Smith")
        b = people("Bob", "Smith")

        resp = client.post(
            "/relationships",
            json={"person_id": a, "related_person_id": b, "type": "COUSIN"},
        )

        assert resp.status_code == 422


class TestListRelationships:

    def test_without_person_id_is_empty_page(self, client):
        body = client.get("/relationships").json()
        assert body == {
            "items": [],
            "pagination": {"page": 1, "limit": 50, "total": 0, "pages": 0},
        }

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
    def test_bad_pagination_is_400(self, client, params):
        resp = client.get("/relationships", params={"person_id": "x", **params})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_PAGINATION"

    def test_paginates_and_filters(self, client, people):
        me = people("Me", "Smith")
        siblings = [people(f"Sib{i}", "Smith") for i in range(3)]
        parent = people("Mum", "Smith")
        for sib in siblings:
            client.post(
                "/relationships",
                json={"person_id": me, "related_person_id": sib, "type": "SIBLING"},
            )
        client.post(
            "/relationships",
            json={"person_id": me, "related_person_id": parent, "type": "CHILD"},
        )

        page_two = client.get(
            "/relationships",
            params={"person_id": me, "type": "SIBLING", "page": 2, "limit": 2},
        ).json()

        assert page_two["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}
        assert len(page_two["items"]) == 1
        assert page_two["items"][0]["type"] == "SIBLING"

    def test_items_come_back_in_creation_order(self, client, people):
        me = people("Me", "Smith")
        created_ids = []
        for i in range(8):
            sib = people(f"Sib{i}", "Smith")
            created_ids.append(
                client.post(
                    "/relationships",
                    json={"person_id": me, "related_person_id": sib, "type": "SIBLING"},
                ).json()["id"]
            )

        items = client.get("/relationships", params={"person_id": me}).json()["items"]

        assert [item["id"] for item in items] == created_ids


class TestSingleRelationship:

    def test_get_one(self, client, people):
        a = people("Ann", "Smith")
        b = people("Bob", "Jones")
        rel_id = client.post(
            "/relationships",
            json={
                "person_id": a,
                "related_person_id": b,
                "type": "SPOUSE",
                "marriage_date": "2000-01-01",
            },
        ).json()["id"]

        body = client.get(f"/relationships/{rel_id}").json()

        assert body["marriage_date"] == "2000-01-01"
        assert body["divorce_date"] is None
        assert body["related_person"] == {
            "id": b, "first_name": "Bob", "last_name": "Jones", "gender": None,
        }

    def test_update_divorce_marks_both_inactive(self, client, people):
        a = people("Ann", "Smith")
        b = people("Bob", "Smith")
        rel_id = client.post(
            "/relationships",
            json={"person_id": a, "related_person_id": b, "type": "SPOUSE"},
        ).json()["id"]

        resp = client.put(
            f"/relationships/{rel_id}",
            json={"marriage_date": "2000-01-01", "divorce_date": "2010-01-01"},
        )

        assert resp.status_code == 200
        assert resp.json() == {"id": rel_id}
        theirs = client.get("/relationships", params={"person_id": b}).json()["items"]
        assert theirs[0]["is_active"] is False
        assert theirs[0]["divorce_date"] == "2010-01-01"

    def test_delete_then_404(self, client, people):
        a = people("Parent", "One")
        b = people("Kid", "One")
        rel_id = client.post(
            "/relationships",
            json={"person_id": a, "related_person_id": b, "type": "PARENT"},
        ).json()["id"]

        assert client.delete(f"/relationships/{rel_id}").status_code == 204
        assert client.get("/relationships", params={"person_id": b}).json()["items"] == []

        for method in ("get", "delete"):
            resp = getattr(client, method)(f"/relationships/{rel_id}")
            assert resp.status_code == 404
            assert resp.json()["error_code"] == "RELATIONSHIP_NOT_FOUND"

    def test_update_missing_is_404(self, client):
        resp = client.put("/relationships/missing", json={})
        assert resp.status_code == 404


def test_database_failure_is_500(client, people, monkeypatch):
    a = people("Ann", "Smith")
    b = people("Bob", "Smith")

    def broken_create(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(relationship_sync, "create_relationship", broken_create)

    resp = client.post(
        "/relationships",
        json={"person_id": a, "related_person_id": b, "type": "SPOUSE"},
    )

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error", "error_code": "INTERNAL_ERROR"}


class TestFamilyTreeRoutes:

    @pytest.fixture
    def family(self, client, people):
        """grandpa -> dad -> me, dad's sister aunt, aunt -> cousin."""
        ids = {
            "grandpa": people("Grandpa", "Smith", gender="MALE"),
            "dad": people("Dad", "Smith", gender="MALE"),
            "aunt": people("Aunt", "Smith", gender="FEMALE"),
            "me": people("Me", "Smith"),
            "cousin": people("Cousin", "Jones", gender="FEMALE"),
        }
        for parent, child in [
            ("grandpa", "dad"), ("grandpa", "aunt"), ("dad", "me"), ("aunt", "cousin"),
        ]:
            client.post(
                "/relationships",
                json={
                    "person_id": ids[parent],
                    "related_person_id": ids[child],
                    "type": "PARENT",
                },
            )
        return ids

    def test_ancestors(self, client, family):
        body = client.get(f"/persons/{family['me']}/ancestors").json()

        assert [(e["person"]["id"], e["generation"]) for e in body] == [
            (family["dad"], 1),
            (family["grandpa"], 2),
        ]

    def test_ancestors_generation_limit(self, client, family):
        body = client.get(
            f"/persons/{family['me']}/ancestors", params={"max_generations": 1}
        ).json()

        assert [e["person"]["id"] for e in body] == [family["dad"]]

    def test_zero_generations_rejected(self, client, family):
        resp = client.get(f"/persons/{family['me']}/ancestors", params={"max_generations": 0})
        assert resp.status_code == 422

    def test_descendants(self, client, family):
        body = client.get(f"/persons/{family['grandpa']}/descendants").json()

        by_generation = {}
        for entry in body:
            by_generation.setdefault(entry["generation"], set()).add(entry["person"]["id"])
        assert by_generation == {
            1: {family["dad"], family["aunt"]},
            2: {family["me"], family["cousin"]},
        }

    def test_unknown_person_ancestors_404(self, client):
        resp = client.get("/persons/ghost/ancestors")
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "PERSON_NOT_FOUND"

    def test_path_to_cousin(self, client, family):
        body = client.get(
            "/relationships/path",
            params={"person_id": family["me"], "other_person_id": family["cousin"]},
        ).json()

        assert body["found"] is True
        assert body["relationship"] == "1st cousin"
        assert body["distance"] == 4
        assert body["steps"] == ["parent", "parent", "child", "child"]
        assert [p["id"] for p in body["path"]] == [
            family["me"], family["dad"], family["grandpa"], family["aunt"], family["cousin"],
        ]

    def test_path_between_unconnected_persons(self, client, people, family):
        stranger = people("Stranger", "Doe")

        body = client.get(
            "/relationships/path",
            params={"person_id": family["me"], "other_person_id": stranger},
        ).json()

        assert body == {
            "found": False, "relationship": None, "distance": None, "path": [], "steps": [],
        }

    def test_common_ancestor(self, client, family):
        body = client.get(
            "/relationships/common-ancestor",
            params={"person_id": family["me"], "other_person_id": family["cousin"]},
        ).json()

        assert body["found"] is True
        assert body["person"]["id"] == family["grandpa"]
        assert body["generations_from_person"] == 2
        assert body["generations_from_other"] == 2
