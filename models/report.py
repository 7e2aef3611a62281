from sqlalchemy import Column, String, ForeignKey, DateTime, Integer
from sqlalchemy.orm import relationship
from datetime import datetime

from database.connection import Base


class Report(Base):
    """
    Report model - append-only record that a session flagged a note

    No uniqueness: the same session may report the same note repeatedly.
    """
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    note_id = Column(String, ForeignKey("notes.id"), nullable=False, index=True)
    session_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    note = relationship("Note", back_populates="reports")

    def __repr__(self):
        return f"<Report(note_id={self.note_id})>"
