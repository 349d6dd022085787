"""
Session state for the signed-in user.

Unlike a plain EntityStore, the user slot is never absent: logging out
resets it to INITIAL_USER. Authentication is derived from the user id.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from backend.schemas.users import RaisedIssue, RequestedService, User
from backend.state.store import EntityStore

INITIAL_USER = User(
    id="",
    name="",
    email="",
    profile_picture=None,
    role="RESIDENT",
    owned_pg_communities=[],
    pg_community=None,
    pg_community_id=None,
    raised_issues=[],
    requested_services=[],
)


@dataclass(frozen=True)
class UserState:
    user: User = field(default_factory=lambda: INITIAL_USER)
    is_loading: bool = False
    is_authenticated: bool = False


class UserStore:
    """User session built on EntityStore[UserState]."""

    def __init__(self) -> None:
        self._store: EntityStore[UserState] = EntityStore(UserState())

    @property
    def state(self) -> UserState:
        return self._store.current  # type: ignore[return-value]

    @property
    def user(self) -> User:
        return self.state.user

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def subscribe(
        self, listener: Callable[[Optional[UserState], Optional[UserState]], None]
    ) -> Callable[[], None]:
        return self._store.subscribe(listener)

    def set_loading(self, loading: bool) -> None:
        self._store.update({"is_loading": loading})

    def set_user(self, user: User) -> None:
        """Replace the user; loading stops and auth follows the user id."""
        self._store.set(UserState(
            user=user.model_copy(),
            is_loading=False,
            is_authenticated=bool(user.id),
        ))

    def update_user(self, changes: Mapping[str, Any]) -> None:
        """Merge fields into the current user and recompute authentication."""
        updated = self.user.model_copy(update=dict(changes))
        self._store.update({"user": updated, "is_authenticated": bool(updated.id)})

    def clear_user(self) -> None:
        """Reset to the initial (anonymous) user."""
        self._store.set(UserState())

    def add_raised_issue(self, issue: RaisedIssue) -> None:
        issues = list(self.user.raised_issues or [])
        self._set_user_field("raised_issues", issues + [issue])

    def remove_raised_issue(self, issue_id: str) -> None:
        issues = [i for i in (self.user.raised_issues or []) if i.id != issue_id]
        self._set_user_field("raised_issues", issues)

    def add_requested_service(self, service: RequestedService) -> None:
        services = list(self.user.requested_services or [])
        self._set_user_field("requested_services", services + [service])

    def remove_requested_service(self, service_id: str) -> None:
        services = [s for s in (self.user.requested_services or []) if s.id != service_id]
        self._set_user_field("requested_services", services)

    def _set_user_field(self, name: str, value: Any) -> None:
        self._store.update({"user": self.user.model_copy(update={name: value})})
