from pydantic import BaseModel, Field, StringConstraints, field_validator
from typing import Annotated, Optional
from datetime import datetime
from enum import Enum

class NoteColor(str, Enum):
    ORANGE = "#FFDDC1"
    YELLOW = "#FFD3A5"
    BLUE = "#C7CEEA"
    GREEN = "#A8E6CF"
    PINK = "#FFAAA5"
    PURPLE = "#E6B3FF"

Message = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=150)]
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]

class NoteCreate(BaseModel):
    message: Message
    color: NoteColor = NoteColor.ORANGE
    recipient: Optional[ShortText] = None
    from_sender: Optional[ShortText] = None
    image_url: Optional[str] = None
    replying_to_id: Optional[str] = None

    @field_validator("recipient", "from_sender", "image_url", "replying_to_id")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        # Optional fields are only kept when they carry text
        if value is None:
            return None
        value = value.strip()
        return value or None

class NoteResponse(BaseModel):
    id: str
    short_id: str
    message: str
    color: NoteColor
    recipient: Optional[str] = None
    from_sender: Optional[str] = None
    image_url: Optional[str] = None
    replying_to_id: Optional[str] = None
    created_at: datetime
    likes_count: int

    class Config:
        from_attributes = True

class NoteView(NoteResponse):
    post_number: int
    replies_count: int = 0
    is_own: bool = False

class BoardPage(BaseModel):
    notes: list[NoteView]
    page: int
    page_size: int
    total_count: int
    has_next: bool
    has_previous: bool

class ReplyCount(BaseModel):
    note_id: str
    replies_count: int

class LikeResponse(BaseModel):
    note_id: str
    liked: bool
    likes_count: int

class DeleteResponse(BaseModel):
    success: bool = True

class ReportResponse(BaseModel):
    success: bool = True
    message: str = Field(default="Thank you for reporting inappropriate content.")
