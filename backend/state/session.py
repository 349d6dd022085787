"""
Root composition point for client-side state.

Create one AppSession per running client and pass it (or its stores) to
whatever needs them.
"""

from dataclasses import dataclass, field

from backend.schemas.users import PgCommunity
from backend.state.store import EntityStore
from backend.state.user_store import UserStore


@dataclass
class AppSession:
    """Owns the user session and the currently opened PG community."""
    user_store: UserStore = field(default_factory=UserStore)
    pg_community_store: EntityStore[PgCommunity] = field(default_factory=EntityStore)

    def reset(self) -> None:
        """Forget everything tied to the signed-in user."""
        self.user_store.clear_user()
        self.pg_community_store.clear()
