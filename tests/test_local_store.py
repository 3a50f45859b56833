import json

import pytest

from family_client.config import MEMBERS_KEY
from family_client.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore
from family_client.local_store import DEMO_MEMBERS, DuplicateMemberError, LocalStore


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return LocalStore(kv)


def stored(kv):
    return json.loads(kv.get(MEMBERS_KEY))


class TestInitialization:
    def test_seeds_demo_members_when_nothing_is_stored(self, store, kv):
        members = store.list_family_members()
        assert [m["id"] for m in members] == ["divya-001", "tushar-002"]
        assert stored(kv) == members

    def test_seeds_when_stored_value_is_corrupt(self, kv):
        kv.set(MEMBERS_KEY, "{not json")
        assert len(LocalStore(kv).list_family_members()) == len(DEMO_MEMBERS)

    def test_loads_persisted_members(self, kv):
        kv.set(MEMBERS_KEY, json.dumps([{"id": "a", "name": "Ana", "relationship": "Mother"}]))
        assert LocalStore(kv).list_family_members() == [{"id": "a", "name": "Ana", "relationship": "Mother"}]

    def test_drops_case_insensitive_duplicates_and_repersists(self, kv):
        kv.set(
            MEMBERS_KEY,
            json.dumps(
                [
                    {"id": "1", "name": "Ana", "relationship": "Mother"},
                    {"id": "2", "name": "ANA", "relationship": "mother"},
                    {"id": "3", "name": "Ana", "relationship": "Sister"},
                ]
            ),
        )
        members = LocalStore(kv).list_family_members()
        assert [m["id"] for m in members] == ["1", "3"]
        assert [m["id"] for m in stored(kv)] == ["1", "3"]

    def test_info_reports_state(self, store):
        assert store.info()["isInitialized"] is False
        store.list_family_members()
        assert store.info() == {"type": "local", "membersCount": 2, "isInitialized": True}


class TestCreate:
    def test_applies_defaults_and_prepends(self, store, kv):
        member = store.create_family_member({"name": "Maya", "relationship": "Daughter", "age": 6})
        assert member["id"].startswith("local-")
        assert member["healthScore"] == 80
        assert member["medications"] == 0
        assert member["conditions"] == []
        assert member["status"] == "good"
        assert store.list_family_members()[0]["id"] == member["id"]
        assert stored(kv)[0]["id"] == member["id"]

    def test_keeps_supplied_health_score_and_status(self, store):
        member = store.create_family_member({"name": "Raj", "relationship": "Father", "healthScore": 55})
        assert member["status"] == "poor"

    def test_rejects_duplicate_name_and_relationship(self, store):
        store.create_family_member({"name": "Maya", "relationship": "Daughter"})
        before = len(store.list_family_members())
        with pytest.raises(DuplicateMemberError, match="already exists"):
            store.create_family_member({"name": "maya", "relationship": "DAUGHTER"})
        assert len(store.list_family_members()) == before

    def test_same_name_with_other_relationship_is_allowed(self, store):
        store.create_family_member({"name": "Divya", "relationship": "Cousin"})
        assert len(store.list_family_members()) == 3

    def test_requires_name_and_relationship(self, store):
        with pytest.raises(ValueError):
            store.create_family_member({"name": "Nobody"})


class TestUpdate:
    def test_health_score_only_update_leaves_other_fields(self, store):
        created = store.create_family_member(
            {"name": "Maya", "relationship": "Daughter", "age": 6, "conditions": ["Asthma"]}
        )
        updated = store.update_family_member(created["id"], {"healthScore": 95})
        assert updated["healthScore"] == 95
        assert updated["status"] == "excellent"
        untouched = {k: v for k, v in updated.items() if k not in ("healthScore", "status")}
        assert untouched == {k: v for k, v in created.items() if k not in ("healthScore", "status")}

    def test_status_kept_when_health_score_not_supplied(self, store):
        created = store.create_family_member({"name": "Maya", "relationship": "Daughter"})
        updated = store.update_family_member(created["id"], {"conditions": ["Diabetes", "Heart disease"]})
        assert updated["status"] == created["status"]
        assert updated["conditions"] == ["Diabetes", "Heart disease"]

    def test_unknown_id_is_a_silent_no_op(self, store, kv):
        store.list_family_members()
        before = kv.get(MEMBERS_KEY)
        assert store.update_family_member("missing", {"name": "X"}) is None
        assert kv.get(MEMBERS_KEY) == before


class TestDelete:
    def test_removes_and_persists(self, store, kv):
        store.delete_family_member("divya-001")
        assert [m["id"] for m in stored(kv)] == ["tushar-002"]

    def test_unknown_id_is_ignored(self, store):
        store.delete_family_member("missing")
        assert len(store.list_family_members()) == 2


def test_json_file_store_survives_restart(tmp_path):
    path = str(tmp_path / "nested" / "store.json")
    first = LocalStore(JsonFileKeyValueStore(path))
    created = first.create_family_member({"name": "Maya", "relationship": "Daughter"})

    second = LocalStore(JsonFileKeyValueStore(path))
    assert second.list_family_members()[0]["id"] == created["id"]


def test_json_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("garbage")
    kv = JsonFileKeyValueStore(str(path))
    assert kv.get(MEMBERS_KEY) is None
    kv.set("k", "v")
    assert kv.get("k") == "v"
