"""SQLAlchemy models."""
from models.account import Account
from models.base import Base
from models.bookmark import Bookmark

__all__ = [
    "Account",
    "Base",
    "Bookmark",
]
