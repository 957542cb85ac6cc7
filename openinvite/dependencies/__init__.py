from .permissions import get_current_user_id
from ..store import get_store

__all__ = [
    "get_current_user_id",
    "get_store",
]
