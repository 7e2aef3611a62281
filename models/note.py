from sqlalchemy import Column, String, ForeignKey, DateTime, Enum, Integer
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum

from database.connection import Base

class NoteColor(str, enum.Enum):
    ORANGE = "#FFDDC1"
    YELLOW = "#FFD3A5"
    BLUE = "#C7CEEA"
    GREEN = "#A8E6CF"
    PINK = "#FFAAA5"
    PURPLE = "#E6B3FF"

class Note(Base):
    __tablename__ = "notes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    short_id = Column(String(6), unique=True, nullable=False, index=True)
    message = Column(String(150), nullable=False)
    color = Column(Enum(NoteColor, values_callable=lambda colors: [c.value for c in colors]), default=NoteColor.ORANGE, nullable=False)
    recipient = Column(String(50), nullable=True)
    from_sender = Column(String(50), nullable=True)
    image_url = Column(String, nullable=True)
    replying_to_id = Column(String, ForeignKey("notes.id"), nullable=True, index=True)
    session_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    likes_count = Column(Integer, default=0, nullable=False)

    parent = relationship("Note", remote_side=[id], back_populates="replies")
    replies = relationship("Note", back_populates="parent", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="note", cascade="all, delete-orphan")
    reports = relationship("Report", back_populates="note", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Note(short_id={self.short_id}, replying_to_id={self.replying_to_id})>"
