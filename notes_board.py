"""Important notes and announcements board."""

from typing import Callable, List, Optional

from capabilities import can_post_note
from schemas import Note, User

DELETE_CONFIRMATION = "Are you sure you want to permanently delete this note? This action cannot be undone."
EMPTY_MESSAGE = "No important notes at the moment."


def format_date(note: Note) -> str:
    return f"{note.timestamp:%B} {note.timestamp.day}, {note.timestamp.year}"


class NotesBoard:
    """Admin-only add/edit/delete over the owner's notes.

    At most one note is in edit mode; its draft lives here until saved or
    cancelled.
    """

    def __init__(
        self,
        user: User,
        on_add_note: Callable[[str], None],
        on_edit_note: Callable[[str, str], None],
        on_delete_note: Callable[[str], None],
    ):
        self.user = user
        self.on_add_note = on_add_note
        self.on_edit_note = on_edit_note
        self.on_delete_note = on_delete_note
        self.editing_note_id: Optional[str] = None
        self.editing_content = ""

    @property
    def can_manage(self) -> bool:
        return can_post_note(self.user.role)

    def add(self, content: str) -> bool:
        if not self.can_manage or not content.strip():
            return False
        self.on_add_note(content)
        return True

    def start_edit(self, note: Note) -> bool:
        if not self.can_manage:
            return False
        self.editing_note_id = note.id
        self.editing_content = note.content
        return True

    def set_draft(self, content: str) -> bool:
        if self.editing_note_id is None:
            return False
        self.editing_content = content
        return True

    def cancel_edit(self) -> None:
        self.editing_note_id = None
        self.editing_content = ""

    def save_edit(self) -> bool:
        if self.editing_note_id is None or not self.editing_content.strip():
            return False
        self.on_edit_note(self.editing_note_id, self.editing_content)
        self.cancel_edit()
        return True

    def delete(self, note_id: str, confirm: Callable[[str], bool]) -> bool:
        if not self.can_manage or not confirm(DELETE_CONFIRMATION):
            return False
        if note_id == self.editing_note_id:
            self.cancel_edit()
        self.on_delete_note(note_id)
        return True

    def forget_missing(self, notes: List[Note]) -> None:
        # a note deleted elsewhere cannot stay in edit mode
        if self.editing_note_id is not None and all(n.id != self.editing_note_id for n in notes):
            self.cancel_edit()

    def view(self, notes: List[Note]) -> dict:
        items = []
        for note in notes:
            items.append({
                "id": note.id,
                "content": note.content,
                "author": note.author,
                "timestamp": note.timestamp.isoformat(),
                "date": format_date(note),
                "editing": note.id == self.editing_note_id,
                "draft": self.editing_content if note.id == self.editing_note_id else None,
            })
        return {
            "notes": items,
            "empty_message": EMPTY_MESSAGE if not items else None,
            "can_manage": self.can_manage,
            "editing_note_id": self.editing_note_id,
        }
