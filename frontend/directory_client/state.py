"""Directory State — the client's in-memory user list, view state and notification.

Invariants:
    - The view is exactly one of Viewing, Creating(form), Updating(selected, form);
      "updating with nothing selected" cannot be constructed
    - users always equals the last successful list snapshot plus successful local mutations
    - A failed create/update/delete leaves both users and view unchanged and raises a notification
    - Notifications expire a fixed number of seconds after they are shown (monotonic clock)
    - delete is only available while Viewing
    - on_change fires when a fetch or submit goes in flight, so loading and pending labels can be drawn
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol

from directory_api.schemas.user import UserRecord
from directory_client.api import APIError
from directory_client.form import UserForm

logger = logging.getLogger(__name__)


class UserAPILike(Protocol):
    """Structural contract for the data-fetch layer (UserAPI or a test fake)."""
    async def get_all_users(self) -> list[UserRecord]: ...
    async def create_user(self, fields: dict[str, Any]) -> UserRecord: ...
    async def update_user(self, user_id: str, fields: dict[str, Any]) -> UserRecord: ...
    async def delete_user(self, user_id: str) -> None: ...


# ─── View States ─────────────────────────────────────────────────

@dataclass(frozen=True)
class Viewing:
    pass


@dataclass(frozen=True)
class Creating:
    form: UserForm = field(default_factory=UserForm.for_create)


@dataclass(frozen=True)
class Updating:
    selected: UserRecord
    form: UserForm

    @classmethod
    def of(cls, user: UserRecord) -> "Updating":
        return cls(selected=user, form=UserForm.from_user(user))


ViewState = Viewing | Creating | Updating


# ─── Notifications ───────────────────────────────────────────────

class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    text: str
    kind: NotificationKind
    expires_at: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


class UserDirectory:
    """Container for the list, the current view and the transient notification."""

    def __init__(
        self,
        api: UserAPILike,
        notification_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        on_change: Callable[["UserDirectory"], None] | None = None,
    ):
        self._api = api
        self._on_change = on_change
        self._notification_seconds = notification_seconds
        self._clock = clock
        self._notification: Notification | None = None
        self.users: list[UserRecord] = []
        self.view: ViewState = Viewing()
        self.loading = False

    # ─── Notifications ───────────────────────────────────────────

    @property
    def notification(self) -> Notification | None:
        """The current notification, or None once it has expired."""
        if self._notification and self._notification.expired(self._clock()):
            self._notification = None
        return self._notification

    def notify(self, text: str, kind: NotificationKind = NotificationKind.INFO) -> None:
        self._notification = Notification(
            text, kind, self._clock() + self._notification_seconds,
        )

    def dismiss_notification(self) -> None:
        self._notification = None

    def _changed(self) -> None:
        """Let the screen redraw while a request is in flight."""
        if self._on_change is not None:
            self._on_change(self)

    def _fail(self, action: str, error: APIError) -> None:
        logger.info(f"{action} failed: {error.message}")
        self.notify(f"Error {action}: {error.message}", NotificationKind.ERROR)

    # ─── Navigation ──────────────────────────────────────────────

    def show_list(self) -> None:
        self.view = Viewing()

    def start_create(self) -> None:
        self.view = Creating()

    def start_edit(self, user: UserRecord) -> bool:
        if not isinstance(self.view, Viewing):
            return False
        self.view = Updating.of(user)
        return True

    def cancel_edit(self) -> None:
        if isinstance(self.view, Updating):
            self.view = Viewing()

    def find(self, user_id: str) -> UserRecord | None:
        return next((u for u in self.users if u.id == user_id), None)

    # ─── Data Actions ────────────────────────────────────────────

    async def load(self) -> None:
        """Fetch the list with the blocking loading flag set."""
        self.loading = True
        self._changed()
        try:
            self.users = await self._api.get_all_users()
        except APIError as e:
            self._fail("fetching users", e)
        finally:
            self.loading = False

    async def refresh(self) -> None:
        await self.load()

    async def submit_create(self) -> bool:
        view = self.view
        if not isinstance(view, Creating):
            return False
        form = view.form
        if form.submitting or not form.validate():
            return False

        form.submitting = True
        self._changed()
        try:
            user = await self._api.create_user(form.payload())
        except APIError as e:
            form.apply_server_errors(e.errors)
            self._fail("creating user", e)
            return False
        finally:
            form.submitting = False

        self.users = [user, *self.users]
        form.reset()
        self.notify("User created successfully!", NotificationKind.SUCCESS)
        self.view = Viewing()
        return True

    async def submit_update(self) -> bool:
        view = self.view
        if not isinstance(view, Updating):
            return False
        form = view.form
        if form.submitting or not form.validate():
            return False

        form.submitting = True
        self._changed()
        try:
            user = await self._api.update_user(view.selected.id, form.payload())
        except APIError as e:
            form.apply_server_errors(e.errors)
            self._fail("updating user", e)
            return False
        finally:
            form.submitting = False

        self.users = [user if u.id == user.id else u for u in self.users]
        self.notify("User updated successfully!", NotificationKind.SUCCESS)
        self.view = Viewing()
        return True

    async def delete(self, user_id: str) -> bool:
        if not isinstance(self.view, Viewing):
            return False
        try:
            await self._api.delete_user(user_id)
        except APIError as e:
            self._fail("deleting user", e)
            return False

        self.users = [u for u in self.users if u.id != user_id]
        self.notify("User deleted successfully!", NotificationKind.SUCCESS)
        return True
