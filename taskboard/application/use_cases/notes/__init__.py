"""Task note use cases."""

from taskboard.application.use_cases.notes.note_operations import TaskNoteService

__all__ = ["TaskNoteService"]
