"""
视图状态转换、条目过滤与视图状态持久化测试
"""
from datetime import datetime

import redis_client
from models import ALL_BOOKS, AuthContext, BookResponse, DiaryViewState, EntryResponse, TagResponse
from routers.services.view_state import (
    apply_filters,
    begin_edit_entry,
    begin_new_entry,
    filter_entries,
    reset_compose,
    toggle_book_selection,
    toggle_selection,
    toggle_tag_selection,
    update_draft,
    ViewStateService,
)

WORK = BookResponse(id="b-work", name="Trabalho")
TRAVEL = BookResponse(id="b-travel", name="Viagens")
RAIN = TagResponse(id="t-rain", name="Chuva")
FAMILY = TagResponse(id="t-family", name="Família")


def make_entry(entry_id, title, content, books, tags):
    return EntryResponse(
        id=entry_id,
        title=title,
        content=content,
        created_at=datetime(2024, 3, 1, 12, 0),
        books=books,
        tags=tags,
    )


ENTRIES = [
    make_entry("e3", "Reunião longa", "Discussão sobre o projeto", [WORK], []),
    make_entry("e2", "Lisboa", "Dia de chuva no Chiado", [TRAVEL], [RAIN]),
    make_entry("e1", "Domingo", "Almoço em casa", [TRAVEL, WORK], [FAMILY]),
]


def test_filter_all_with_empty_search_keeps_entries_in_order():
    assert filter_entries(ENTRIES, ALL_BOOKS, "") == ENTRIES


def test_filter_by_book_membership():
    result = filter_entries(ENTRIES, "b-travel", "")
    assert [entry.id for entry in result] == ["e2", "e1"]


def test_search_is_case_insensitive_over_title_content_and_tags():
    assert [e.id for e in filter_entries(ENTRIES, ALL_BOOKS, "LISBOA")] == ["e2"]
    assert [e.id for e in filter_entries(ENTRIES, ALL_BOOKS, "projeto")] == ["e3"]
    assert [e.id for e in filter_entries(ENTRIES, ALL_BOOKS, "famí")] == ["e1"]


def test_book_filter_and_search_must_both_match():
    assert filter_entries(ENTRIES, "b-work", "chuva") == []
    assert [e.id for e in filter_entries(ENTRIES, "b-travel", "chuva")] == ["e2"]


def test_filter_is_idempotent():
    once = filter_entries(ENTRIES, "b-work", "o")
    assert filter_entries(once, "b-work", "o") == once


def test_unknown_book_filter_matches_nothing():
    assert filter_entries(ENTRIES, "b-missing", "") == []


def test_toggle_selection_adds_then_removes():
    selected = toggle_selection([], "t-rain")
    assert selected == ["t-rain"]
    assert toggle_selection(selected, "t-rain") == []


def test_toggle_tag_selection_does_not_mutate_input():
    state = DiaryViewState(selected_tag_ids=["t-rain"])
    toggled = toggle_tag_selection(state, "t-family")
    assert toggled.selected_tag_ids == ["t-rain", "t-family"]
    assert state.selected_tag_ids == ["t-rain"]


def test_toggle_book_selection():
    state = toggle_book_selection(DiaryViewState(), "b-work")
    assert state.selected_book_ids == ["b-work"]
    assert toggle_book_selection(state, "b-work").selected_book_ids == []


def test_begin_new_entry_clears_previous_draft():
    state = DiaryViewState(
        editing_entry_id="e1",
        draft_title="old",
        draft_content="old",
        selected_book_ids=["b-work"],
        selected_tag_ids=["t-rain"],
    )
    state = begin_new_entry(state)
    assert state.is_writing is True
    assert state.editing_entry_id is None
    assert state.draft_title == ""
    assert state.selected_book_ids == []
    assert state.selected_tag_ids == []


def test_begin_edit_entry_prefills_from_entry():
    state = begin_edit_entry(DiaryViewState(), ENTRIES[2])
    assert state.is_writing is True
    assert state.editing_entry_id == "e1"
    assert state.draft_title == "Domingo"
    assert state.draft_content == "Almoço em casa"
    assert state.selected_book_ids == ["b-travel", "b-work"]
    assert state.selected_tag_ids == ["t-family"]


def test_reset_compose_returns_to_idle_but_keeps_filters():
    state = apply_filters(DiaryViewState(), "b-work", "chuva")
    state = update_draft(begin_edit_entry(state, ENTRIES[0]), "novo", "texto")
    state = reset_compose(state)
    assert state == DiaryViewState(book_filter="b-work", search_term="chuva")


def test_apply_filters_falls_back_to_all():
    state = apply_filters(DiaryViewState(book_filter="b-work"), "", "")
    assert state.book_filter == ALL_BOOKS
    assert state.search_term == ""


def test_view_state_round_trips_through_dict():
    state = begin_edit_entry(DiaryViewState(), ENTRIES[1])
    assert DiaryViewState(**state.model_dump()).model_dump() == state.model_dump()


async def test_view_state_is_persisted_per_user(fake_redis):
    ana = AuthContext(user_id="user-001", email="ana@example.com")
    bruno = AuthContext(user_id="user-002", email="bruno@example.com")
    state = begin_edit_entry(DiaryViewState(), ENTRIES[1])

    await ViewStateService.save(ana, state)

    assert (await ViewStateService.load(ana)).model_dump() == state.model_dump()
    assert (await ViewStateService.load(bruno)).model_dump() == DiaryViewState().model_dump()


async def test_anonymous_view_state_is_not_persisted(fake_redis):
    await ViewStateService.save(None, DiaryViewState(search_term="chuva"))
    assert (await ViewStateService.load(None)).search_term == ""


async def test_invalid_stored_view_state_falls_back_to_default(fake_redis):
    ana = AuthContext(user_id="user-001", email="ana@example.com")
    await redis_client.set_view_state(ana.user_id, {"selected_tag_ids": "not-a-list"})

    assert (await ViewStateService.load(ana)).model_dump() == DiaryViewState().model_dump()
