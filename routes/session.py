from fastapi import APIRouter, Depends

from schemas.session import SessionResponse
from utils.session import get_session_id

router = APIRouter()


@router.get("/session", response_model=SessionResponse)
def get_session(session_id: str = Depends(get_session_id)):
    """Return the caller's session identifier, issuing one on first visit"""
    return SessionResponse(session_id=session_id)
