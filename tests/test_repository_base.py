import sqlite3
import uuid
from dataclasses import dataclass, field

import pytest

from ledgerapi.repository_base import (
    PaginationRequest,
    RecordNotFoundError,
    SqlRepository,
    migrate,
)


@dataclass
class Note:
    text: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)


class NoteRepository(SqlRepository[Note]):
    table = "notes"
    columns = ("id", "text")

    def _to_row(self, entity):
        return {"id": str(entity.id), "text": entity.text}

    def _from_row(self, row):
        return Note(text=row["text"], id=uuid.UUID(row["id"]))


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE notes (id TEXT PRIMARY KEY, text TEXT NOT NULL)")
    yield conn
    conn.close()


@pytest.fixture
def repo(connection):
    return NoteRepository(connection)


def _fill(repo, count):
    notes = [Note(f"note {i}") for i in range(count)]
    for note in notes:
        SqlRepository.create(repo, note)
    return notes


def test_create_then_get_by_id_round_trips(repo):
    note = Note("hello")
    SqlRepository.create(repo, note)
    assert SqlRepository.get_by_id(repo, note.id) == note


def test_get_by_id_missing_raises(repo):
    _fill(repo, 2)
    with pytest.raises(RecordNotFoundError):
        SqlRepository.get_by_id(repo, uuid.uuid4())


def test_create_duplicate_key_raises(repo):
    note = Note("once")
    SqlRepository.create(repo, note)
    with pytest.raises(sqlite3.IntegrityError):
        SqlRepository.create(repo, Note("twice", id=note.id))


def test_get_all_returns_every_record(repo):
    notes = _fill(repo, 4)
    assert SqlRepository.get_all(repo) == notes


def test_update_changes_stored_record(repo):
    note = Note("before")
    SqlRepository.create(repo, note)
    note.text = "after"
    SqlRepository.update(repo, note)
    assert SqlRepository.get_by_id(repo, note.id).text == "after"
    assert len(SqlRepository.get_all(repo)) == 1


def test_update_inserts_unknown_record(repo):
    note = Note("fresh")
    SqlRepository.update(repo, note)
    assert SqlRepository.get_all(repo) == [note]


def test_delete_removes_record(repo):
    notes = _fill(repo, 3)
    SqlRepository.delete(repo, notes[1].id)
    assert SqlRepository.get_all(repo) == [notes[0], notes[2]]
    with pytest.raises(RecordNotFoundError):
        SqlRepository.get_by_id(repo, notes[1].id)


def test_delete_missing_leaves_table_unchanged(repo):
    notes = _fill(repo, 2)
    SqlRepository.delete(repo, uuid.uuid4())
    assert SqlRepository.get_all(repo) == notes


def test_pages_cover_all_records_once(repo):
    notes = _fill(repo, 7)
    first = repo.get_paginated(PaginationRequest(page=1, page_size=3))
    collected = []
    for page in range(1, first.total_pages + 1):
        response = repo.get_paginated(PaginationRequest(page=page, page_size=3))
        assert response.page == page
        assert len(response.data) <= 3
        collected.extend(response.data)
    assert collected == notes
    assert first.total == len(notes)
    assert (first.total_pages - 1) * 3 < len(notes) <= first.total_pages * 3


def test_exact_multiple_has_no_partial_page(repo):
    notes = _fill(repo, 4)
    response = repo.get_paginated(PaginationRequest(page=1, page_size=2))
    assert response.total_pages * response.page_size == len(notes)


@pytest.mark.parametrize(
    "request_value",
    [None, PaginationRequest(page=0, page_size=0), PaginationRequest(page=-3, page_size=-1)],
)
def test_non_positive_values_fall_back_to_defaults(repo, request_value):
    _fill(repo, 2)
    response = repo.get_paginated(request_value)
    assert (response.page, response.page_size) == (1, 10)


def test_page_past_end_is_empty(repo):
    notes = _fill(repo, 3)
    response = repo.get_paginated(PaginationRequest(page=5, page_size=2))
    assert response.data == []
    assert response.page == 5
    assert response.total == len(notes)


def test_empty_table_has_no_pages(repo):
    response = repo.get_paginated(PaginationRequest())
    assert response.data == []
    assert response.total == 0
    assert response.total_pages == 0


def test_migrate_creates_tables_and_is_idempotent(connection):
    migrate(connection)
    migrate(connection)
    names = {
        row[0]
        for row in connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }
    assert {"accounts", "transactions"} <= names