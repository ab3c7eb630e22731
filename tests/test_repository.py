"""Tests for ethereal.repository.JournalRepository."""

import json

from ethereal.models import Thought, UserSettings
from ethereal.repository import (
    SETTINGS_KEY,
    THOUGHTS_KEY,
    JournalRepository,
    merge_settings,
)
from ethereal.storage import MemoryStorage


def make_thought(n: int, **kwargs) -> Thought:
    return Thought(id=str(1700000000000 + n), content=f"thought {n}",
                   created_at=1700000000000 + n, **kwargs)


class TestThoughts:
    def test_empty_store_lists_nothing(self, repository):
        assert repository.list_thoughts() == []

    def test_add_prepends(self, repository):
        first, second, new = make_thought(1), make_thought(2), make_thought(3)
        repository.replace_all([first, second])

        repository.add_thought(new)

        listed = repository.list_thoughts()
        assert listed[0] == new
        assert listed[1:] == [first, second]

    def test_replace_all_overwrites(self, repository):
        repository.replace_all([make_thought(1)])
        repository.replace_all([make_thought(2)])
        assert [t.id for t in repository.list_thoughts()] == [make_thought(2).id]

    def test_update_replaces_by_id(self, repository):
        repository.replace_all([make_thought(1), make_thought(2)])
        edited = make_thought(2).model_copy(update={"content": "edited"})

        repository.update_thought(edited)

        listed = repository.list_thoughts()
        assert [t.id for t in listed] == [make_thought(1).id, make_thought(2).id]
        assert listed[1].content == "edited"

    def test_update_absent_id_is_noop(self, repository):
        repository.replace_all([make_thought(1)])
        repository.update_thought(make_thought(9))
        assert repository.list_thoughts() == [make_thought(1)]

    def test_delete_removes_exactly_one(self, repository):
        thoughts = [make_thought(i) for i in range(5)]
        repository.replace_all(thoughts)
        target = thoughts[2].id

        repository.delete_thought(target)

        listed = repository.list_thoughts()
        assert len(listed) == 4
        assert all(t.id != target for t in listed)

    def test_delete_absent_id_is_noop(self, repository):
        thoughts = [make_thought(i) for i in range(3)]
        repository.replace_all(thoughts)
        repository.delete_thought("missing")
        assert repository.list_thoughts() == thoughts

    def test_toggle_favorite_flips_one_record(self, repository):
        repository.replace_all([make_thought(1), make_thought(2, is_favorite=False)])

        repository.toggle_favorite(make_thought(2).id)

        listed = repository.list_thoughts()
        assert listed[1].is_favorite is True
        assert not listed[0].is_favorite

    def test_toggle_favorite_twice_restores(self, repository):
        repository.replace_all([make_thought(1, is_favorite=True)])
        repository.toggle_favorite(make_thought(1).id)
        repository.toggle_favorite(make_thought(1).id)
        assert repository.list_thoughts()[0].is_favorite is True

    def test_toggle_unset_flag_becomes_true(self, repository):
        repository.replace_all([make_thought(1)])
        repository.toggle_favorite(make_thought(1).id)
        assert repository.list_thoughts()[0].is_favorite is True

    def test_get_thought(self, repository):
        repository.replace_all([make_thought(1), make_thought(2)])
        assert repository.get_thought(make_thought(2).id) == make_thought(2)
        assert repository.get_thought("missing") is None

    def test_clear_thoughts(self, repository):
        repository.replace_all([make_thought(1)])
        repository.clear_thoughts()
        assert repository.list_thoughts() == []

    def test_stored_as_camel_case_json(self):
        storage = MemoryStorage()
        repo = JournalRepository(storage)
        repo.add_thought(make_thought(1, ai_insight="breathe", is_favorite=True))

        stored = json.loads(storage.get_item(THOUGHTS_KEY))
        assert stored[0]["createdAt"] == 1700000000001
        assert stored[0]["aiInsight"] == "breathe"
        assert stored[0]["isFavorite"] is True
        assert "mood" not in stored[0]

    def test_corrupt_json_reads_as_empty(self):
        repo = JournalRepository(MemoryStorage({THOUGHTS_KEY: "{not json"}))
        assert repo.list_thoughts() == []

    def test_non_list_reads_as_empty(self):
        repo = JournalRepository(MemoryStorage({THOUGHTS_KEY: '{"id": "1"}'}))
        assert repo.list_thoughts() == []

    def test_malformed_records_are_skipped(self):
        raw = json.dumps([
            {"id": "1", "content": "ok", "createdAt": 1, "tags": []},
            {"content": "no id"},
        ])
        repo = JournalRepository(MemoryStorage({THOUGHTS_KEY: raw}))
        assert [t.id for t in repo.list_thoughts()] == ["1"]

    def test_reads_records_without_tags(self):
        raw = json.dumps([{"id": "1", "content": "ok", "createdAt": 1}])
        repo = JournalRepository(MemoryStorage({THOUGHTS_KEY: raw}))
        assert repo.list_thoughts()[0].tags == []


class TestSettings:
    def test_empty_store_returns_defaults(self, repository):
        assert repository.get_settings() == UserSettings()

    def test_save_then_get(self, repository):
        settings = repository.get_settings().model_copy(
            update={"user_name": "Mira", "is_initialized": True}
        )
        repository.save_settings(settings)

        loaded = repository.get_settings()
        assert loaded.user_name == "Mira"
        assert loaded.is_initialized is True
        assert loaded.ai_personality == UserSettings().ai_personality
        assert loaded.show_mood_trends == UserSettings().show_mood_trends

    def test_missing_keys_filled_from_defaults(self):
        raw = json.dumps({"userName": "Mira", "isInitialized": True})
        repo = JournalRepository(MemoryStorage({SETTINGS_KEY: raw}))

        loaded = repo.get_settings()
        assert loaded.user_name == "Mira"
        assert loaded.is_ai_enabled is True
        assert loaded.avatar_url == UserSettings().avatar_url

    def test_invalid_field_falls_back_to_default(self):
        raw = json.dumps({"userName": "Mira", "aiPersonality": "sarcastic"})
        repo = JournalRepository(MemoryStorage({SETTINGS_KEY: raw}))

        loaded = repo.get_settings()
        assert loaded.user_name == "Mira"
        assert loaded.ai_personality == "philosophical"

    def test_unknown_and_legacy_keys_ignored(self):
        raw = json.dumps({"userName": "Mira", "password": "hunter22", "theme": "dark"})
        storage = MemoryStorage({SETTINGS_KEY: raw})
        repo = JournalRepository(storage)

        repo.save_settings(repo.get_settings())

        stored = json.loads(storage.get_item(SETTINGS_KEY))
        assert "password" not in stored
        assert stored["userName"] == "Mira"

    def test_corrupt_settings_read_as_defaults(self):
        repo = JournalRepository(MemoryStorage({SETTINGS_KEY: "]["}))
        assert repo.get_settings() == UserSettings()

    def test_old_version_keys_untouched(self):
        storage = MemoryStorage({"ethereal_settings_v1": '{"userName": "old"}'})
        repo = JournalRepository(storage)

        repo.save_settings(UserSettings(user_name="new"))

        assert storage.get_item("ethereal_settings_v1") == '{"userName": "old"}'
        assert repo.get_settings().user_name == "new"


def test_merge_settings_prefers_stored():
    merged = merge_settings({"a": 1}, {"a": 0, "b": 2})
    assert merged == {"a": 1, "b": 2}
