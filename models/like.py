from sqlalchemy import Column, String, ForeignKey, DateTime, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from database.connection import Base


class Like(Base):
    """
    Like model - existence of a row means the session likes the note

    At most one row per (note_id, session_id). Rows are only created and
    removed by the like toggle, which keeps Note.likes_count in step.
    """
    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("note_id", "session_id", name="uq_likes_note_session"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    note_id = Column(String, ForeignKey("notes.id"), nullable=False, index=True)
    session_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    note = relationship("Note", back_populates="likes")

    def __repr__(self):
        return f"<Like(note_id={self.note_id}, session_id={self.session_id})>"
