"""Tests for the file store: row and bytes on disk must stay in step."""
import os

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from models.file import File
from utils.errors import NotFound, ValidationFailed


def stored_files(uploads):
    return sorted(os.listdir(os.path.join(uploads.root, uploads.subdir)))


def assert_rows_have_files(db, uploads):
    for record in db.all(File).values():
        assert uploads.exists(record.path), record


def test_create_then_read_round_trip(file_store, uploads, make_upload):
    created = file_store.create(make_upload(b"hello", "note.txt"))

    record = file_store.read(created.id)
    assert record.name == "note.txt"
    assert record.extension == "txt"
    assert record.mimetype == "text/plain"
    assert record.size == 5
    assert record.uploaded is not None
    assert record.path.startswith("upload/")
    assert uploads.read(record.path) == b"hello"


def test_create_names_are_unpredictable(file_store, make_upload):
    first = file_store.create(make_upload(filename="same.txt"))
    second = file_store.create(make_upload(filename="same.txt"))

    assert first.path != second.path
    assert "same" not in first.path


def test_create_without_extension(file_store, make_upload):
    record = file_store.create(make_upload(filename="README"))
    assert record.extension == ""


def test_create_without_upload_writes_nothing(file_store, uploads):
    with pytest.raises(ValidationFailed):
        file_store.create(None)
    assert stored_files(uploads) == []


def test_create_removes_placed_file_when_insert_fails(file_store, db, uploads, make_upload, monkeypatch):
    def failing_save():
        raise OperationalError("INSERT INTO files", {}, Exception("disk full"))

    monkeypatch.setattr(db, "save", failing_save)

    with pytest.raises(OperationalError):
        file_store.create(make_upload())
    assert stored_files(uploads) == []


def test_read_missing(file_store):
    with pytest.raises(NotFound) as exc:
        file_store.read(42)
    assert exc.value.message == "file by id 42 not found"
    assert exc.value.status_code == 404


def test_list_pages_by_ascending_id(file_store, make_upload):
    for i in range(5):
        file_store.create(make_upload(filename=f"f{i}.txt"))

    assert [f.id for f in file_store.list(page_size=2, page_number=2)] == [3, 4]
    assert [f.id for f in file_store.list()] == [1, 2, 3, 4, 5]
    assert [f.id for f in file_store.list(page_size=2, page_number=3)] == [5]
    assert file_store.list(page_size=2, page_number=4) == []
    # page 0 would be a negative offset, it clamps to the first page
    assert [f.id for f in file_store.list(page_size=2, page_number=0)] == [1, 2]
    assert file_store.list(page_size=0, page_number=1) == []


def test_replace_swaps_bytes_and_removes_old_file(file_store, db, uploads, make_upload):
    original = file_store.create(make_upload(b"old", "old.txt"))
    old_path = original.path

    replaced = file_store.replace(original.id, make_upload(b"new contents", "new.md", "text/markdown"))

    assert replaced.id == original.id
    assert replaced.name == "new.md"
    assert replaced.extension == "md"
    assert replaced.size == len(b"new contents")
    assert replaced.path != old_path
    assert uploads.read(replaced.path) == b"new contents"
    assert not uploads.exists(old_path)
    assert stored_files(uploads) == [os.path.basename(replaced.path)]
    assert_rows_have_files(db, uploads)


def test_replace_missing_touches_nothing(file_store, uploads, make_upload):
    file_store.create(make_upload())
    before = stored_files(uploads)

    with pytest.raises(NotFound):
        file_store.replace(99, make_upload(b"new"))
    assert stored_files(uploads) == before


def test_replace_when_row_vanishes_keeps_old_file(file_store, db, uploads, make_upload, monkeypatch):
    original = file_store.create(make_upload(b"old"))
    monkeypatch.setattr(db, "execute", lambda statement: 0)

    with pytest.raises(NotFound):
        file_store.replace(original.id, make_upload(b"new"))

    assert stored_files(uploads) == [os.path.basename(original.path)]
    assert uploads.read(original.path) == b"old"


def test_delete_missing_is_a_no_op(file_store, uploads, make_upload):
    file_store.create(make_upload())
    before = stored_files(uploads)

    result = file_store.delete(1000)

    assert result.deleted_count == 0
    assert stored_files(uploads) == before


def test_delete_removes_row_then_file(file_store, uploads, make_upload):
    record = file_store.create(make_upload())
    path = record.path

    result = file_store.delete(record.id)

    assert result.deleted_count == 1
    assert not uploads.exists(path)
    with pytest.raises(NotFound):
        file_store.read(record.id)


def test_delete_when_file_already_gone(file_store, uploads, make_upload):
    record = file_store.create(make_upload())
    uploads.remove(record.path)

    assert file_store.delete(record.id).deleted_count == 1


def test_prepare_download(file_store, uploads, make_upload):
    record = file_store.create(make_upload(b"data", "report.pdf", "application/pdf"))

    download = file_store.prepare_download(record.id)

    assert download.display_name == "report.pdf"
    assert os.path.join(download.root_dir, download.file_name) == uploads.resolve(record.path)
    assert os.path.isfile(os.path.join(download.root_dir, download.file_name))


def test_prepare_download_rejects_paths_outside_root(file_store, db, make_upload):
    record = file_store.create(make_upload())
    db.execute(update(File).where(File.id == record.id).values(path="../../etc/passwd"))

    with pytest.raises(NotFound):
        file_store.prepare_download(record.id)


def test_prepare_download_rejects_dotfiles(file_store, db, make_upload):
    record = file_store.create(make_upload())
    db.execute(update(File).where(File.id == record.id).values(path="upload/.env"))

    with pytest.raises(NotFound):
        file_store.prepare_download(record.id)


def test_ids_beyond_64_bits_never_match(file_store, uploads, make_upload):
    file_store.create(make_upload())
    before = stored_files(uploads)

    with pytest.raises(NotFound):
        file_store.read(2 ** 70)
    with pytest.raises(NotFound):
        file_store.replace(-(2 ** 70), make_upload(b"new"))
    assert file_store.delete(2 ** 70).deleted_count == 0
    assert stored_files(uploads) == before
