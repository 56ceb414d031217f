import threading

from models import FileRecord
from store import FileStore

def make_record(payload: bytes = b"payload", name: str = "a.txt") -> FileRecord:
    return FileRecord.create(payload, original_name=name, mime_type="text/plain")

def test_put_and_get(file_store: FileStore):
    record = make_record()
    file_store.put(record)

    assert file_store.get(record.id) is record
    assert file_store.count() == 1

def test_get_missing_returns_none(file_store: FileStore):
    assert file_store.get("0" * 32) is None

def test_delete_reports_whether_record_was_removed(file_store: FileStore):
    record = make_record()
    file_store.put(record)

    assert file_store.delete(record.id) is True
    assert file_store.delete(record.id) is False
    assert file_store.get(record.id) is None

def test_list_all_keeps_insertion_order(file_store: FileStore):
    records = [make_record(name=f"file_{i}.txt") for i in range(5)]
    for record in records:
        file_store.put(record)

    assert [r.id for r in file_store.list_all()] == [r.id for r in records]

def test_list_all_returns_snapshot(file_store: FileStore):
    record = make_record()
    file_store.put(record)
    snapshot = file_store.list_all()

    file_store.delete(record.id)

    assert snapshot == [record]
    assert file_store.list_all() == []

def test_clear_empties_store(file_store: FileStore):
    for _ in range(3):
        file_store.put(make_record())

    file_store.clear()

    assert file_store.count() == 0

def test_concurrent_puts_and_deletes(file_store: FileStore):
    records = [make_record(name=f"{i}.bin") for i in range(200)]

    def put_all(chunk):
        for record in chunk:
            file_store.put(record)

    threads = [threading.Thread(target=put_all, args=(records[i::4],)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert file_store.count() == 200

    removed = []

    def delete_all(chunk):
        for record in chunk:
            removed.append(file_store.delete(record.id))

    threads = [threading.Thread(target=delete_all, args=(records,)) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert removed.count(True) == 200
    assert file_store.count() == 0
