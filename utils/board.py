"""
Board and thread view derivation

Turns a fetched page of notes into the ordered, searchable list the board
shows, with post numbers that count down from the grand total. Pure
functions only: no database or request access, so the same rules apply to
any source of notes.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


@dataclass(frozen=True)
class BoardEntry:
    """A note placed on the board together with its display number"""
    note: Any
    post_number: int


def is_top_level(note) -> bool:
    return not getattr(note, "replying_to_id", None)


def matches_query(note, query: str) -> bool:
    """
    Case-insensitive substring match against recipient, short_id or message

    A note without a recipient never matches on recipient. The query is
    expected to be trimmed and non-empty.
    """
    needle = query.lower()
    for field in ("recipient", "short_id", "message"):
        value = getattr(note, field, None)
        if value and needle in value.lower():
            return True
    return False


def derive_board(
    notes: Iterable,
    search_query: Optional[str],
    page_index: int,
    page_size: int,
    total_count: int,
) -> List[BoardEntry]:
    """
    Derive the visible board for one fetched page

    Args:
        notes: Notes as fetched for the page (may contain replies; they are dropped)
        search_query: Free text, blank means no filtering
        page_index: Zero-based page being shown
        page_size: Notes per page
        total_count: Number of top-level notes across all pages

    Returns:
        Entries newest first; ties keep fetch order. The first entry of page 0
        is numbered total_count and the oldest note overall is numbered 1.
    """
    visible = [note for note in notes if is_top_level(note)]

    query = (search_query or "").strip()
    if query:
        visible = [note for note in visible if matches_query(note, query)]

    # sorted() is stable, reverse=True keeps equal timestamps in fetch order
    visible = sorted(visible, key=lambda note: note.created_at, reverse=True)

    offset = page_index * page_size
    return [
        BoardEntry(note=note, post_number=total_count - (offset + position))
        for position, note in enumerate(visible)
    ]


def derive_thread(replies: Iterable) -> List[BoardEntry]:
    """Replies oldest first, numbered from 1. No search applies to threads."""
    ordered = sorted(replies, key=lambda note: note.created_at)
    return [BoardEntry(note=note, post_number=position + 1) for position, note in enumerate(ordered)]


def has_next_page(page_index: int, page_size: int, visible_count: int, total_count: int) -> bool:
    return page_index * page_size + visible_count < total_count


def has_previous_page(page_index: int) -> bool:
    return page_index > 0
