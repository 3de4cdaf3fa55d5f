import json

from art_curator.exhibitions import (
    AddToExhibition,
    CreateExhibition,
    DeleteExhibition,
    ExhibitionState,
    ExhibitionStore,
    RemoveFromExhibition,
    RenameExhibition,
    SetError,
    SetLoading,
    exhibitions_containing,
    get_exhibition,
    is_artwork_in_any,
    reduce,
    total_artworks,
)
from fakes import artwork


def state_with(*names):
    state = ExhibitionState()
    for name in names:
        state = reduce(state, CreateExhibition(name, exhibition_id=f"ex-{name}"))
    return state


class TestReducer:
    def test_create(self):
        state = reduce(ExhibitionState(), CreateExhibition("Impressionists", "Light and colour"))

        assert len(state.exhibitions) == 1
        exhibition = state.exhibitions[0]
        assert exhibition.name == "Impressionists"
        assert exhibition.description == "Light and colour"
        assert exhibition.id.startswith("exhibition_")
        assert exhibition.created_at
        assert exhibition.artworks == ()

    def test_reducer_does_not_mutate_previous_state(self):
        before = state_with("a")

        after = reduce(before, AddToExhibition("ex-a", artwork(1)))

        assert before.exhibitions[0].artworks == ()
        assert len(after.exhibitions[0].artworks) == 1

    def test_add_dedupes_by_composite_key(self):
        state = state_with("a")
        state = reduce(state, AddToExhibition("ex-a", artwork(1, "metropolitan")))
        state = reduce(state, AddToExhibition("ex-a", artwork(1, "metropolitan")))
        state = reduce(state, AddToExhibition("ex-a", artwork(1, "harvard")))

        keys = [a.key for a in state.exhibitions[0].artworks]
        assert keys == [("metropolitan", "1"), ("harvard", "1")]

    def test_add_to_unknown_exhibition_is_a_no_op(self):
        state = state_with("a")

        assert reduce(state, AddToExhibition("missing", artwork(1))).exhibitions == state.exhibitions

    def test_remove_uses_source_and_id(self):
        state = state_with("a")
        state = reduce(state, AddToExhibition("ex-a", artwork(1, "metropolitan")))
        state = reduce(state, AddToExhibition("ex-a", artwork(1, "harvard")))

        state = reduce(state, RemoveFromExhibition("ex-a", "1", "harvard"))

        assert [a.key for a in state.exhibitions[0].artworks] == [("metropolitan", "1")]

    def test_delete(self):
        state = state_with("a", "b")

        state = reduce(state, DeleteExhibition("ex-a"))

        assert [e.id for e in state.exhibitions] == ["ex-b"]

    def test_rename_keeps_description_unless_given(self):
        state = reduce(ExhibitionState(), CreateExhibition("old", "desc", "ex-1"))

        renamed = reduce(state, RenameExhibition("ex-1", name="new"))
        assert renamed.exhibitions[0].name == "new"
        assert renamed.exhibitions[0].description == "desc"

        cleared = reduce(renamed, RenameExhibition("ex-1", description=""))
        assert cleared.exhibitions[0].name == "new"
        assert cleared.exhibitions[0].description == ""

    def test_loading_and_error(self):
        state = reduce(ExhibitionState(), SetLoading(True))
        assert state.is_loading

        state = reduce(state, SetError("disk full"))
        assert state.error == "disk full"
        assert state.is_loading is False

        state = reduce(state, CreateExhibition("a"))
        assert state.error is None


class TestQueries:
    def test_lookup_and_counts(self):
        state = state_with("a", "b")
        state = reduce(state, AddToExhibition("ex-a", artwork(1)))
        state = reduce(state, AddToExhibition("ex-b", artwork(1)))
        state = reduce(state, AddToExhibition("ex-b", artwork(2)))

        assert get_exhibition(state, "ex-b").name == "b"
        assert get_exhibition(state, "nope") is None
        assert total_artworks(state) == 3
        assert is_artwork_in_any(state, artwork(2))
        assert not is_artwork_in_any(state, artwork(2, "harvard"))
        assert not is_artwork_in_any(state, None)
        assert [e.id for e in exhibitions_containing(state, artwork(1))] == ["ex-a", "ex-b"]


class TestStore:
    def test_persists_every_change(self, tmp_path):
        path = tmp_path / "exhibitions.json"
        store = ExhibitionStore(path)

        exhibition = store.create("Favourites", "Things I like")
        store.add(exhibition.id, artwork(436535, title="Wheat Field with Cypresses"))

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["exhibitions"][0]["name"] == "Favourites"
        assert saved["exhibitions"][0]["artworks"][0]["id"] == "436535"

        reopened = ExhibitionStore(path)
        assert reopened.exhibitions == store.exhibitions

    def test_remove_rename_delete(self, tmp_path):
        store = ExhibitionStore(tmp_path / "exhibitions.json")
        exhibition = store.create("A")
        store.add(exhibition.id, artwork(1))

        store.remove(exhibition.id, 1, "metropolitan")
        store.rename(exhibition.id, "B")
        assert store.exhibitions[0].artworks == ()
        assert store.exhibitions[0].name == "B"

        store.delete(exhibition.id)
        assert store.exhibitions == ()

    def test_edit_name_and_description_persists(self, tmp_path):
        path = tmp_path / "exhibitions.json"
        store = ExhibitionStore(path)
        exhibition = store.create("Draft", "First notes")

        store.rename(exhibition.id, "Final", "Revised notes")

        reopened = ExhibitionStore(path).exhibitions[0]
        assert (reopened.name, reopened.description) == ("Final", "Revised notes")

    def test_failed_write_keeps_previous_file(self, tmp_path, monkeypatch):
        path = tmp_path / "exhibitions.json"
        store = ExhibitionStore(path)
        store.create("Keep me")

        def partial_dump(payload, f, **kwargs):
            f.write('{"exhibitions": [')
            raise OSError("disk full")

        monkeypatch.setattr(json, "dump", partial_dump)
        store.create("Lost")
        monkeypatch.undo()

        assert [e.name for e in ExhibitionStore(path).exhibitions] == ["Keep me"]
        assert list(tmp_path.iterdir()) == [path]

    def test_missing_file_starts_empty(self, tmp_path):
        assert ExhibitionStore(tmp_path / "nope.json").exhibitions == ()

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "exhibitions.json"
        path.write_text("{not json", encoding="utf-8")

        assert ExhibitionStore(path).exhibitions == ()
