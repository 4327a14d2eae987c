"""
DiaryStore测试：加载、日记本/标签/条目写入以及关联的整体替换
"""
import pytest
from sqlalchemy.exc import OperationalError

from routers.services.auth_service import AuthState
from routers.services.diary_service import DiaryService
from routers.services.diary_store import DiaryStore
from storage.repositories import EntryBookRepository, EntryRepository, EntryTagRepository


@pytest.fixture
def store(session_factory, owner):
    return DiaryStore(session_factory, owner)


async def add_book(store, name, description=""):
    assert await store.add_book(name, description)
    return next(book for book in store.books if book.name == name)


async def add_tag(store, name):
    assert await store.add_tag(name)
    return next(tag for tag in store.tags if tag.name == name)


async def count_rows(session_factory, repo_cls, **filters):
    async with session_factory() as session:
        return await repo_cls(session).count(**filters)


async def test_round_trip_entry_with_books_and_tags(store):
    b1 = await add_book(store, "Pessoal")
    b2 = await add_book(store, "Trabalho")
    t1 = await add_tag(store, "ideias")

    entry_id = await store.save_entry("Primeiro dia", "Comecei o diário", [b1.id, b2.id], [t1.id])

    assert entry_id is not None
    assert len(store.entries) == 1
    entry = store.entries[0]
    assert entry.id == entry_id
    assert {book.id for book in entry.books} == {b1.id, b2.id}
    assert [tag.id for tag in entry.tags] == [t1.id]
    assert entry.display_date == entry.created_at.strftime("%d/%m/%Y")


@pytest.mark.parametrize(
    "title, content, with_book",
    [
        ("", "conteúdo", True),
        ("título", "", True),
        ("título", "conteúdo", False),
    ],
)
async def test_save_entry_is_noop_without_title_content_or_book(store, session_factory, owner, title, content, with_book):
    book = await add_book(store, "Pessoal")
    book_ids = [book.id] if with_book else []

    assert await store.save_entry(title, content, book_ids, []) is None

    assert store.entries == []
    assert await count_rows(session_factory, EntryRepository, user_id=owner.user_id) == 0


async def test_save_blocked_when_user_has_no_books(store, session_factory, owner):
    assert await store.save_entry("T", "C", [], []) is None
    await store.load_entries()
    assert store.entries == []
    assert await count_rows(session_factory, EntryRepository, user_id=owner.user_id) == 0


async def test_update_replaces_links_without_residue(store, session_factory):
    b1 = await add_book(store, "Pessoal")
    b2 = await add_book(store, "Trabalho")
    t1 = await add_tag(store, "alegria")
    t2 = await add_tag(store, "cansaço")
    t3 = await add_tag(store, "viagem")
    entry_id = await store.save_entry("Dia", "Texto", [b1.id, b2.id], [t1.id, t2.id])

    saved_id = await store.save_entry("Dia editado", "Texto novo", [b2.id], [t3.id], editing_entry_id=entry_id)

    assert saved_id == entry_id
    entry = store.find_entry(entry_id)
    assert entry.title == "Dia editado"
    assert entry.content == "Texto novo"
    assert [book.id for book in entry.books] == [b2.id]
    assert [tag.id for tag in entry.tags] == [t3.id]

    async with session_factory() as session:
        assert await EntryBookRepository(session).get_book_ids_by_entry_id(entry_id) == [b2.id]
        tags = await EntryTagRepository(session).get_tags_by_entry_id(entry_id)
        assert [tag.id for tag in tags] == [t3.id]


async def test_editing_entry_to_remove_only_tag_leaves_zero_tags(store):
    book = await add_book(store, "Pessoal")
    tag = await add_tag(store, "único")
    entry_id = await store.save_entry("Dia", "Texto", [book.id], [tag.id])

    await store.save_entry("Dia", "Texto", [book.id], [], editing_entry_id=entry_id)
    await store.load_entries()

    assert store.find_entry(entry_id).tags == []


async def test_entries_are_newest_first(store):
    book = await add_book(store, "Pessoal")
    first = await store.save_entry("Primeiro", "a", [book.id], [])
    second = await store.save_entry("Segundo", "b", [book.id], [])

    assert [entry.id for entry in store.entries] == [second, first]


async def test_books_by_creation_and_tags_alphabetical(store):
    for name in ("Zeta", "Alpha", "Mid"):
        await store.add_book(name, "")
    for name in ("zeta", "Beta", "alpha", "mid"):
        await store.add_tag(name)

    assert [book.name for book in store.books] == ["Zeta", "Alpha", "Mid"]
    assert [tag.name for tag in store.tags] == ["alpha", "Beta", "mid", "zeta"]


async def test_blank_names_are_ignored(store):
    assert await store.add_book("   ", "sem nome") is False
    assert await store.add_tag("") is False
    assert store.books == []
    assert store.tags == []


async def test_delete_book_removes_it_from_entries_but_keeps_entries(store, session_factory):
    b1 = await add_book(store, "Pessoal")
    b2 = await add_book(store, "Trabalho")
    shared = await store.save_entry("Compartilhada", "x", [b1.id, b2.id], [])
    only_b1 = await store.save_entry("Só pessoal", "y", [b1.id], [])

    assert await store.delete_book(b1.id) is True

    assert [book.id for book in store.books] == [b2.id]
    assert [book.id for book in store.find_entry(shared).books] == [b2.id]
    assert store.find_entry(only_b1).books == []
    assert await count_rows(session_factory, EntryBookRepository, book_id=b1.id) == 0


async def test_delete_missing_book_leaves_state_unchanged(store):
    book = await add_book(store, "Pessoal")
    before = list(store.books)

    assert await store.delete_book("does-not-exist") is False
    assert store.books == before == [book]


async def test_delete_entry_removes_its_link_rows(store, session_factory):
    book = await add_book(store, "Pessoal")
    tag = await add_tag(store, "nota")
    entry_id = await store.save_entry("Dia", "Texto", [book.id], [tag.id])

    assert await store.delete_entry(entry_id) is True

    assert store.entries == []
    assert await count_rows(session_factory, EntryBookRepository, entry_id=entry_id) == 0
    assert await count_rows(session_factory, EntryTagRepository, entry_id=entry_id) == 0


async def test_failed_save_rolls_back_entry_and_links(store, session_factory, owner):
    book = await add_book(store, "Pessoal")

    assert await store.save_entry("Dia", "Texto", [book.id, "missing-book"], []) is None

    assert store.entries == []
    assert await count_rows(session_factory, EntryRepository, user_id=owner.user_id) == 0
    assert await count_rows(session_factory, EntryBookRepository, book_id=book.id) == 0


async def test_failed_update_keeps_previous_links(store):
    book = await add_book(store, "Pessoal")
    tag = await add_tag(store, "nota")
    entry_id = await store.save_entry("Dia", "Texto", [book.id], [tag.id])

    result = await store.save_entry("Dia", "Outro", [book.id], ["missing-tag"], editing_entry_id=entry_id)

    assert result is None
    await store.load_entries()
    entry = store.find_entry(entry_id)
    assert entry.content == "Texto"
    assert [t.id for t in entry.tags] == [tag.id]


async def test_update_of_unknown_entry_creates_nothing(store, session_factory, owner):
    book = await add_book(store, "Pessoal")

    assert await store.save_entry("Dia", "Texto", [book.id], [], editing_entry_id="ghost") is None
    assert await count_rows(session_factory, EntryRepository, user_id=owner.user_id) == 0


async def test_duplicate_selection_is_collapsed(store):
    book = await add_book(store, "Pessoal")
    tag = await add_tag(store, "nota")

    entry_id = await store.save_entry("Dia", "Texto", [book.id, book.id], [tag.id, tag.id])

    entry = store.find_entry(entry_id)
    assert len(entry.books) == 1
    assert len(entry.tags) == 1


async def test_owners_cannot_see_or_link_each_others_rows(session_factory, owner, other_owner):
    mine = DiaryStore(session_factory, owner)
    theirs = DiaryStore(session_factory, other_owner)
    my_book = await add_book(mine, "Meu")
    await mine.save_entry("Meu dia", "Texto", [my_book.id], [])

    await theirs.load_all()
    assert theirs.books == []
    assert theirs.entries == []

    their_book = await add_book(theirs, "Deles")
    assert await theirs.save_entry("Intruso", "x", [my_book.id], []) is None
    assert await mine.delete_book(their_book.id) is False
    assert await mine.delete_entry("whatever") is False


async def test_unauthenticated_store_suppresses_loads_and_writes(session_factory, owner):
    seeded = DiaryStore(session_factory, owner)
    book = await add_book(seeded, "Pessoal")
    await seeded.save_entry("Dia", "Texto", [book.id], [])

    anonymous = DiaryStore(session_factory, None)
    await anonymous.load_all()

    assert anonymous.books == []
    assert anonymous.tags == []
    assert anonymous.entries == []
    assert await anonymous.add_book("Novo", "") is False
    assert await anonymous.add_tag("novo") is False
    assert await anonymous.save_entry("T", "C", [book.id], []) is None


async def test_read_failure_keeps_stale_collection(store, monkeypatch):
    book = await add_book(store, "Pessoal")
    await store.save_entry("Dia", "Texto", [book.id], [])
    before = list(store.entries)

    async def broken(self, user_id):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(DiaryService, "list_entries", broken)

    assert await store.load_entries() is False
    assert store.entries == before


async def test_store_follows_auth_state(session_factory, owner):
    seeded = DiaryStore(session_factory, owner)
    await add_book(seeded, "Pessoal")
    await add_tag(seeded, "nota")

    auth_state = AuthState()
    store = DiaryStore(session_factory)
    unsubscribe = store.observe(auth_state)

    await auth_state.publish(owner)
    assert store.auth_context == owner
    assert [book.name for book in store.books] == ["Pessoal"]
    assert [tag.name for tag in store.tags] == ["nota"]

    await auth_state.publish(None)
    assert store.books == []
    assert store.tags == []
    assert store.entries == []

    unsubscribe()
    await auth_state.publish(owner)
    assert store.books == []
