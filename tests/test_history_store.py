from conftest import ReadOnlyStorage
from core.history_store import (
    CredentialStore,
    HistoryStore,
    deserialize_history,
    serialize_history,
)
from core.storage import InMemoryStorage, JsonFileStorage
from models.session_models import CreativityLevel, HistoryEntry, PromptStyle


def make_entry(idea, prompt="[PERSONA]\n..."):
    return HistoryEntry(
        idea_summary=idea,
        style=PromptStyle.CODING,
        creativity=CreativityLevel.LOW,
        generated_prompt=prompt,
    )


def test_entries_are_newest_first():
    store = HistoryStore(InMemoryStorage())
    first = store.add(make_entry("first"))
    second = store.add(make_entry("second"))
    assert [e.id for e in store.entries()] == [second.id, first.id]


def test_serialization_round_trip_keeps_order():
    entries = [make_entry("a"), make_entry("b [2 file(s)]"), make_entry("c")]
    entries[1] = entries[1].model_copy(update={"final_result": "done"})
    assert deserialize_history(serialize_history(entries)) == entries


def test_store_reloads_from_storage():
    storage = InMemoryStorage()
    store = HistoryStore(storage)
    entry = store.add(make_entry("persist me"))
    store.update_final_result(entry.id, "result")

    reloaded = HistoryStore(storage)
    assert reloaded.entries() == store.entries()
    assert reloaded.get(entry.id).final_result == "result"


def test_corrupt_history_is_treated_as_empty():
    storage = InMemoryStorage({"vertex_architect_history": "{not json"})
    assert HistoryStore(storage).entries() == []

    storage = InMemoryStorage({"vertex_architect_history": '[{"id": 1}]'})
    assert HistoryStore(storage).entries() == []


def test_update_of_deleted_entry_is_dropped():
    store = HistoryStore(InMemoryStorage())
    entry = store.add(make_entry("gone soon"))
    assert store.delete(entry.id) is True
    assert store.update_final_result(entry.id, "late result") is False
    assert store.entries() == []


def test_delete_unknown_id_returns_false():
    store = HistoryStore(InMemoryStorage())
    store.add(make_entry("keep"))
    assert store.delete("missing") is False
    assert len(store.entries()) == 1


def test_unknown_enum_values_fall_back_to_defaults():
    entry = HistoryEntry(
        idea_summary="legacy",
        style="Something Else",
        creativity="Extreme",
        generated_prompt="p",
    )
    assert entry.style == PromptStyle.GENERAL
    assert entry.creativity == CreativityLevel.MEDIUM


def test_json_file_storage_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    HistoryStore(JsonFileStorage(path)).add(make_entry("on disk"))
    CredentialStore(JsonFileStorage(path)).save("secret")

    storage = JsonFileStorage(path)
    assert [e.idea_summary for e in HistoryStore(storage).entries()] == ["on disk"]
    assert CredentialStore(storage).load() == "secret"


def test_json_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("garbage", encoding="utf-8")
    storage = JsonFileStorage(path)
    assert storage.get("vertex_api_key") is None
    storage.set("vertex_api_key", "k")
    assert storage.get("vertex_api_key") == "k"


def test_saving_empty_credential_removes_it():
    storage = InMemoryStorage()
    creds = CredentialStore(storage)
    creds.save("abc")
    creds.save("")
    assert creds.load() == ""
    assert storage.get("vertex_api_key") is None


def test_credential_write_failure_is_logged_not_raised(caplog):
    creds = CredentialStore(ReadOnlyStorage())
    creds.save("abc")
    creds.save("")
    assert creds.load() == ""
    assert "Failed to persist API key" in caplog.text
