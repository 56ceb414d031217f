import threading
from typing import Dict, List, Optional

from fastapi import FastAPI, Request

from models import FileRecord

class FileStore:
    def __init__(self):
        self._records: Dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    def put(self, record: FileRecord) -> None:
        # Ids are 128-bit random tokens, a collision overwrites.
        with self._lock:
            self._records[record.id] = record

    def get(self, file_id: str) -> Optional[FileRecord]:
        with self._lock:
            return self._records.get(file_id)

    def delete(self, file_id: str) -> bool:
        with self._lock:
            return self._records.pop(file_id, None) is not None

    def list_all(self) -> List[FileRecord]:
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

_state_lock = threading.Lock()

def get_app_store(app: FastAPI) -> FileStore:
    store = getattr(app.state, "file_store", None)
    if store is None:
        with _state_lock:
            store = getattr(app.state, "file_store", None)
            if store is None:
                store = FileStore()
                app.state.file_store = store
    return store

def get_store(request: Request) -> FileStore:
    return get_app_store(request.app)
