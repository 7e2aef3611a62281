from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional
import logging
import random
import string

from database.connection import get_db
from models.like import Like
from models.note import Note
from models.report import Report
from schemas.note import (
    BoardPage,
    DeleteResponse,
    LikeResponse,
    NoteCreate,
    NoteResponse,
    NoteView,
    ReplyCount,
    ReportResponse,
)
from utils.board import derive_board, derive_thread, has_next_page, has_previous_page
from utils.changefeed import DELETE, INSERT, UPDATE, NoteChange
from utils.context import BoardContext, get_context
from utils.errors import storage_errors
from utils.session import get_session_id

logger = logging.getLogger(__name__)

router = APIRouter()


def generate_short_id(db: Session) -> str:
    """Generate unique 6-character note code (A-Z, 0-9)"""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=6))
        existing = db.query(Note).filter(Note.short_id == code).first()
        if not existing:
            return code


def get_note_or_404(db: Session, note_id: str) -> Note:
    note = db.query(Note).filter(Note.id == note_id).first()
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


def count_replies(db: Session, note_id: str) -> int:
    return db.query(Note).filter(Note.replying_to_id == note_id).count()


def replies_count_or_zero(db: Session, note_id: str) -> int:
    # A failed count shows the note without replies instead of failing the board
    try:
        return count_replies(db, note_id)
    except SQLAlchemyError:
        logger.exception("Error fetching reply count for note %s", note_id)
        db.rollback()
        return 0


def to_view(note: Note, post_number: int, replies_count: int, session_id: str) -> NoteView:
    return NoteView(
        **NoteResponse.model_validate(note).model_dump(),
        post_number=post_number,
        replies_count=replies_count,
        is_own=note.session_id == session_id,
    )


@router.get("/notes", response_model=BoardPage)
def list_notes(
    page: int = Query(0, ge=0),
    q: Optional[str] = Query(None, max_length=150),
    db: Session = Depends(get_db),
    context: BoardContext = Depends(get_context),
    session_id: str = Depends(get_session_id),
):
    """
    One page of the board, newest first

    Only top-level notes are listed; replies are reached through their parent.
    The search query filters the fetched page and post numbers count down from
    the total number of top-level notes.
    """
    page_size = context.page_size

    # A rolled-back reply count expires the notes; read them only inside this block
    with storage_errors(db, "load notes"):
        top_level = db.query(Note).filter(Note.replying_to_id.is_(None))
        total_count = top_level.count()
        notes = top_level.order_by(Note.created_at.desc()).offset(page * page_size).limit(page_size).all()

        replies_counts = {note.id: replies_count_or_zero(db, note.id) for note in notes}
        entries = derive_board(notes, q, page, page_size, total_count)
        views = [
            to_view(entry.note, entry.post_number, replies_counts[entry.note.id], session_id)
            for entry in entries
        ]

    return BoardPage(
        notes=views,
        page=page,
        page_size=page_size,
        total_count=total_count,
        has_next=has_next_page(page, page_size, len(entries), total_count),
        has_previous=has_previous_page(page),
    )


@router.get("/notes/{note_id}/replies", response_model=list[NoteView])
def list_replies(
    note_id: str,
    db: Session = Depends(get_db),
    session_id: str = Depends(get_session_id),
):
    """Direct replies to a note, oldest first"""
    with storage_errors(db, "load replies"):
        replies = db.query(Note).filter(
            Note.replying_to_id == note_id
        ).order_by(Note.created_at.asc()).all()

    return [to_view(entry.note, entry.post_number, 0, session_id) for entry in derive_thread(replies)]


@router.get("/notes/{note_id}/replies/count", response_model=ReplyCount)
def get_replies_count(note_id: str, db: Session = Depends(get_db)):
    with storage_errors(db, "count replies"):
        replies_count = count_replies(db, note_id)
    return ReplyCount(note_id=note_id, replies_count=replies_count)


@router.post("/notes", response_model=NoteResponse)
def create_note(
    note: NoteCreate,
    db: Session = Depends(get_db),
    context: BoardContext = Depends(get_context),
    session_id: str = Depends(get_session_id),
):
    """
    Post a note, or a reply when replying_to_id is set

    Replies are one level deep: a reply cannot itself be replied to.
    Images are uploaded beforehand through /images and passed as image_url.
    """
    with storage_errors(db, "create note"):
        if note.replying_to_id:
            parent = get_note_or_404(db, note.replying_to_id)
            if parent.replying_to_id:
                raise HTTPException(status_code=400, detail="Replies to replies are not supported")

        db_note = Note(
            short_id=generate_short_id(db),
            message=note.message,
            color=note.color.value,
            recipient=note.recipient,
            from_sender=note.from_sender,
            image_url=note.image_url,
            replying_to_id=note.replying_to_id,
            session_id=session_id,
        )
        db.add(db_note)
        db.commit()
        db.refresh(db_note)

    logger.info("Created note %s (reply to %s)", db_note.short_id, db_note.replying_to_id)
    context.feed.publish(NoteChange(INSERT, db_note.id, db_note.replying_to_id))
    return db_note


@router.delete("/notes/{note_id}", response_model=DeleteResponse)
def delete_note(
    note_id: str,
    db: Session = Depends(get_db),
    context: BoardContext = Depends(get_context),
    session_id: str = Depends(get_session_id),
):
    """
    Delete a note owned by the caller's session

    Notes that do not exist or belong to another session are left alone and
    the response is the same, so callers cannot tell the two apart.
    """
    with storage_errors(db, "delete note"):
        note = db.query(Note).filter(
            Note.id == note_id,
            Note.session_id == session_id
        ).first()
        if not note:
            return DeleteResponse()

        removed = [NoteChange(DELETE, note.id, note.replying_to_id)]
        removed.extend(NoteChange(DELETE, reply.id, note.id) for reply in note.replies)

        db.delete(note)
        db.commit()

    for change in removed:
        context.feed.publish(change)
    return DeleteResponse()


@router.post("/notes/{note_id}/like", response_model=LikeResponse)
def toggle_like(
    note_id: str,
    db: Session = Depends(get_db),
    context: BoardContext = Depends(get_context),
    session_id: str = Depends(get_session_id),
):
    """
    Like the note, or take the like back if this session already likes it

    The like row and likes_count change in one transaction, with the note row
    locked on databases that support it.
    """
    with storage_errors(db, "update like"):
        note = db.query(Note).filter(Note.id == note_id).with_for_update().first()
        if not note:
            raise HTTPException(status_code=404, detail="Note not found")

        existing = db.query(Like).filter(
            Like.note_id == note_id,
            Like.session_id == session_id
        ).first()

        if existing:
            db.delete(existing)
            delta = -1
        else:
            db.add(Like(note_id=note_id, session_id=session_id))
            delta = 1

        db.query(Note).filter(Note.id == note_id).update(
            {Note.likes_count: Note.likes_count + delta},
            synchronize_session=False
        )
        db.commit()
        db.refresh(note)

    context.feed.publish(NoteChange(UPDATE, note.id, note.replying_to_id))
    return LikeResponse(note_id=note.id, liked=delta > 0, likes_count=note.likes_count)


@router.post("/notes/{note_id}/report", response_model=ReportResponse)
def report_note(
    note_id: str,
    db: Session = Depends(get_db),
    session_id: str = Depends(get_session_id),
):
    """Record a report. Repeated reports from one session are all kept."""
    with storage_errors(db, "report note"):
        get_note_or_404(db, note_id)
        db.add(Report(note_id=note_id, session_id=session_id))
        db.commit()

    logger.info("Note %s reported", note_id)
    return ReportResponse()
