"""
Client-side state containers.

- store: EntityStore, a single-entity store with partial updates and listeners
- user_store: the signed-in user's session
- session: AppSession, which owns one of each
"""

from .session import AppSession
from .store import EntityStore, shallow_merge
from .user_store import INITIAL_USER, UserState, UserStore

__all__ = [
    "AppSession",
    "EntityStore",
    "INITIAL_USER",
    "UserState",
    "UserStore",
    "shallow_merge",
]
