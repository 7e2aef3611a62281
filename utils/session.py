"""
Anonymous session identity

Each browser gets a random identifier stored in the secretboard_session
cookie. It only decides ownership (delete, "is this mine") and who liked or
reported a note. It is not authenticated: whoever presents the value is
treated as its owner.
"""
import uuid

from fastapi import Request, Response

SESSION_COOKIE = "secretboard_session"
# Ten years; the identifier never rotates
SESSION_MAX_AGE = 10 * 365 * 24 * 60 * 60


def new_session_id() -> str:
    return str(uuid.uuid4())


def is_valid_session_id(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (TypeError, ValueError):
        return False
    return True


def get_session_id(request: Request, response: Response) -> str:
    """
    Dependency returning the caller's session identifier

    Returns the cookie value when it holds a UUID. Otherwise generates a new
    identifier and sets the cookie on the response, which normally only
    happens on the first request from a browser profile. The value ends up
    in image file names, so anything that is not a UUID is replaced.
    """
    stored = request.cookies.get(SESSION_COOKIE)
    if stored and is_valid_session_id(stored):
        return stored

    session_id = new_session_id()
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_id,
        max_age=SESSION_MAX_AGE,
        samesite="lax",
    )
    return session_id
