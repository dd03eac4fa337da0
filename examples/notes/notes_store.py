"""In-memory note storage shared by the handler files."""

import threading
from dataclasses import asdict, dataclass

from roost import NotFound


@dataclass(frozen=True, slots=True)
class Note:
    id: int
    title: str
    body: str


_notes: dict[int, Note] = {}
_next_id = 1
_lock = threading.Lock()


def reset() -> None:
    global _next_id
    with _lock:
        _notes.clear()
        _next_id = 1


def create(title: str, body: str = "") -> dict:
    global _next_id
    with _lock:
        note = Note(id=_next_id, title=title, body=body)
        _notes[note.id] = note
        _next_id += 1
    return asdict(note)


def all_notes() -> list[dict]:
    with _lock:
        return [asdict(note) for note in _notes.values()]


def get(note_id: int) -> dict:
    with _lock:
        note = _notes.get(note_id)
    if note is None:
        raise NotFound(f"Note {note_id} not found")
    return asdict(note)


def delete(note_id: int) -> None:
    with _lock:
        if _notes.pop(note_id, None) is None:
            raise NotFound(f"Note {note_id} not found")
