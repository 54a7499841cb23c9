"""Domain models"""

from .user import User
from .session import Session, SESSION_FIELDS

__all__ = ["User", "Session", "SESSION_FIELDS"]
