"""
Application context shared by the routes

Built once when the app starts and kept on app.state, so the change feed
and image store are injected instead of living in module globals.
"""
from dataclasses import dataclass, field
import os

from fastapi import Request

from utils.changefeed import ChangeFeed
from utils.storage import ImageStore, image_store_from_env


@dataclass
class BoardContext:
    images: ImageStore
    page_size: int = 8
    feed: ChangeFeed = field(default_factory=ChangeFeed)


def create_context() -> BoardContext:
    return BoardContext(
        images=image_store_from_env(),
        page_size=int(os.getenv("NOTES_PER_PAGE", 8)),
    )


def get_context(request: Request) -> BoardContext:
    return request.app.state.context
