from .base import MAX_ROW_ID, MIN_ROW_ID, Base, is_row_id
from .post import Post, PostKind
from .message import Message
from .setting import Setting

__all__ = [
    "Base",
    "MAX_ROW_ID",
    "MIN_ROW_ID",
    "is_row_id",
    "Post",
    "PostKind",
    "Message",
    "Setting",
]
