"""Tests de NoteService: validación, actualización parcial y acotamiento por dueño."""
import pytest
from bson import ObjectId

from marksense.api.schemas.note import NoteUpdate
from marksense.core.exceptions import NotFound, ValidationError

OWNER = "owner-a"
OTHER = "owner-b"


async def _make(service, **overrides):
    data = {"title": "Groceries", "content": "- milk\n- eggs", "tags": ["home"]}
    data.update(overrides)
    return await service.create(OWNER, data["title"], data["content"], data["tags"])


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_then_get_round_trips_fields(self, note_service):
        title = "t" * 100
        content = "c" * 10_000
        created = await note_service.create(OWNER, title, content, ["a", "b"])

        fetched = await note_service.get(OWNER, created.id)
        assert ObjectId.is_valid(fetched.id)
        assert (fetched.title, fetched.content, fetched.tags) == (title, content, ["a", "b"])
        assert fetched.user_id == OWNER
        assert fetched.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_title_is_trimmed_and_tags_lowercased(self, note_service):
        note = await note_service.create(OWNER, "  Hello  ", "body", [" Go ", "RUST"])
        assert note.title == "Hello"
        assert note.tags == ["go", "rust"]

    @pytest.mark.asyncio
    async def test_repeated_tags_are_kept_as_sent(self, note_service):
        note = await note_service.create(OWNER, "t", "c", ["go", "go"])
        assert note.tags == ["go", "go"]

    @pytest.mark.asyncio
    async def test_whitespace_content_is_accepted(self, note_service):
        note = await note_service.create(OWNER, "t", "   ")
        assert note.content == "   "

    @pytest.mark.asyncio
    async def test_tags_default_to_empty(self, note_service):
        note = await note_service.create(OWNER, "t", "c")
        assert note.tags == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "title,content,tags,message",
        [
            ("t" * 101, "c", None, "Title cannot exceed 100 characters"),
            ("t", "c" * 10_001, None, "Content cannot exceed 10000 characters"),
            ("t", "c", [f"tag{i}" for i in range(11)], "Cannot have more than 10 tags"),
            ("t", "c", ["x"] * 11, "Cannot have more than 10 tags"),
            ("", "c", None, "Title and content are required"),
            ("t", None, None, "Title and content are required"),
            ("   ", "c", None, "Title and content are required"),
        ],
    )
    async def test_validation(self, note_service, note_repo, title, content, tags, message):
        with pytest.raises(ValidationError) as exc:
            await note_service.create(OWNER, title, content, tags)
        assert exc.value.message == message
        assert note_repo.docs == {}


class TestUpdate:
    @pytest.mark.asyncio
    async def test_only_content_keeps_title_and_tags(self, note_service):
        note = await _make(note_service)
        updated = await note_service.update(OWNER, note.id, NoteUpdate.model_validate({"content": "x"}))
        assert updated.content == "x"
        assert updated.title == "Groceries"
        assert updated.tags == ["home"]
        assert updated.updated_at > note.updated_at

    @pytest.mark.asyncio
    async def test_empty_tags_clear_tags(self, note_service):
        note = await _make(note_service)
        updated = await note_service.update(OWNER, note.id, NoteUpdate.model_validate({"tags": []}))
        assert updated.tags == []
        assert (updated.title, updated.content) == (note.title, note.content)

    @pytest.mark.asyncio
    async def test_absent_tags_are_untouched(self, note_service):
        note = await _make(note_service)
        updated = await note_service.update(OWNER, note.id, NoteUpdate.model_validate({"title": "New"}))
        assert updated.title == "New"
        assert updated.tags == ["home"]

    @pytest.mark.asyncio
    async def test_null_fields_count_as_absent(self, note_service):
        note = await _make(note_service)
        patch = NoteUpdate.model_validate({"title": None, "tags": None})
        updated = await note_service.update(OWNER, note.id, patch)
        assert updated.title == note.title
        assert updated.tags == note.tags

    @pytest.mark.asyncio
    async def test_provided_fields_are_validated(self, note_service):
        note = await _make(note_service)
        with pytest.raises(ValidationError):
            await note_service.update(OWNER, note.id, NoteUpdate.model_validate({"title": "t" * 101}))
        with pytest.raises(ValidationError):
            await note_service.update(OWNER, note.id, NoteUpdate.model_validate({"content": ""}))
        with pytest.raises(ValidationError):
            await note_service.update(OWNER, note.id, NoteUpdate.model_validate({"tags": [str(i) for i in range(11)]}))


class TestOwnership:
    @pytest.mark.asyncio
    async def test_other_user_gets_not_found(self, note_service):
        note = await _make(note_service)

        with pytest.raises(NotFound):
            await note_service.get(OTHER, note.id)
        with pytest.raises(NotFound):
            await note_service.update(OTHER, note.id, NoteUpdate.model_validate({"content": "hijack"}))
        with pytest.raises(NotFound):
            await note_service.delete(OTHER, note.id)

        still_there = await note_service.get(OWNER, note.id)
        assert still_there.content == note.content

    @pytest.mark.asyncio
    async def test_invalid_update_on_foreign_note_is_not_found(self, note_service):
        note = await _make(note_service)
        with pytest.raises(NotFound):
            await note_service.update(OTHER, note.id, NoteUpdate.model_validate({"title": ""}))
        with pytest.raises(NotFound):
            await note_service.update(OWNER, str(ObjectId()), NoteUpdate.model_validate({"title": "t" * 101}))

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, note_service):
        with pytest.raises(NotFound):
            await note_service.get(OWNER, "not-an-object-id")

    @pytest.mark.asyncio
    async def test_delete_removes_note(self, note_service):
        note = await _make(note_service)
        await note_service.delete(OWNER, note.id)
        with pytest.raises(NotFound):
            await note_service.get(OWNER, note.id)


class TestList:
    @pytest.mark.asyncio
    async def test_lists_only_own_notes_most_recent_first(self, note_service):
        first = await _make(note_service, title="first")
        second = await _make(note_service, title="second")
        await note_service.create(OTHER, "foreign", "c")
        await note_service.update(OWNER, first.id, NoteUpdate.model_validate({"content": "bump"}))

        notes = await note_service.list(OWNER)
        assert [n.id for n in notes] == [first.id, second.id]
