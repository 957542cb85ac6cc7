from . import plans
from . import discover
from . import social
from . import notifications

__all__ = [
    "plans",
    "discover",
    "social",
    "notifications",
]
