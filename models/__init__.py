from database.connection import Base
from models.note import Note, NoteColor
from models.like import Like
from models.report import Report

__all__ = ["Base", "Note", "NoteColor", "Like", "Report"]
