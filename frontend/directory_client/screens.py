"""Screens — rich renderables for every part of the terminal client.

Invariants:
    - Pure: each function maps state to a renderable, nothing is printed here
    - Updated timestamp is shown only when it differs from the created timestamp
    - An unrecognised view renders the recovery panel, whose only action is returning to the list
"""

from datetime import datetime
from typing import Any

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from directory_api.schemas.user import UserRecord
from directory_client.form import FORM_FIELDS, UserForm
from directory_client.state import (
    Creating,
    Notification,
    NotificationKind,
    UserDirectory,
    Updating,
    Viewing,
)

_NOTIFICATION_STYLES = {
    NotificationKind.SUCCESS: "bold white on green",
    NotificationKind.ERROR: "bold white on red",
    NotificationKind.INFO: "bold white on blue",
}


def format_timestamp(value: datetime) -> str:
    """'Mar 4, 2024, 09:05 AM' in the terminal's local timezone."""
    local = value.astimezone()
    return f"{local:%b} {local.day}, {local:%Y}, {local:%I:%M %p}"


def user_count_label(count: int) -> str:
    if count == 0:
        return "No users found"
    return f"{count} user{'s' if count != 1 else ''} found"


def header() -> Panel:
    return Panel(
        Text.assemble(
            ("User Directory\n", "bold cyan"),
            ("Complete user management with create, read, update and delete", "dim"),
        ),
        border_style="cyan",
    )


def navigation(directory: UserDirectory) -> Text:
    view = directory.view
    text = Text()
    text.append(
        f" [v] View Users ({len(directory.users)}) ",
        style="reverse bold" if isinstance(view, Viewing) else "",
    )
    text.append("  ")
    text.append(
        " [c] Create User ",
        style="reverse bold" if isinstance(view, Creating) else "",
    )
    if isinstance(view, Updating):
        text.append("  ")
        text.append(f" Update User: {view.selected.name} ", style="reverse bold")
    return text


def notification_bar(notification: Notification | None) -> Text | None:
    if notification is None:
        return None
    text = Text(f" {notification.text} ", style=_NOTIFICATION_STYLES[notification.kind])
    text.append("  [x] dismiss", style="dim")
    return text


def loading_panel() -> Panel:
    return Panel(Text("Loading users...", style="italic"), border_style="dim")


def empty_state() -> Panel:
    return Panel(
        Text.assemble(
            ("No Users Found\n", "bold"),
            "Get started by creating your first user!",
        ),
        border_style="yellow",
    )


def user_card(user: UserRecord, index: int | None = None) -> Panel:
    details = Table.grid(padding=(0, 1))
    details.add_column(style="bold")
    details.add_column()
    details.add_row("Company:", user.company_name)
    details.add_row("Phone:", user.phone_number)
    details.add_row("Address:", user.address)

    stamps = Text(f"Created: {format_timestamp(user.created_at)}", style="dim")
    if user.updated_at != user.created_at:
        stamps.append(f"\nUpdated: {format_timestamp(user.updated_at)}")

    title = user.name if index is None else f"{index}. {user.name}"
    return Panel(Group(details, stamps), title=title, title_align="left")


def user_table(users: list[UserRecord]) -> Table:
    table = Table(title="User Directory", caption=user_count_label(len(users)))
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="green")
    table.add_column("Company", style="magenta")
    table.add_column("Phone", style="cyan")
    table.add_column("Address")
    table.add_column("Created", style="dim")
    table.add_column("Updated", style="dim")

    for i, user in enumerate(users, start=1):
        updated = "" if user.updated_at == user.created_at else format_timestamp(user.updated_at)
        table.add_row(
            str(i), user.name, user.company_name, user.phone_number, user.address,
            format_timestamp(user.created_at), updated,
        )
    return table


def user_list(users: list[UserRecord], loading: bool = False) -> RenderableType:
    if loading:
        return loading_panel()
    heading = Text.assemble(
        ("User Directory  ", "bold"), (user_count_label(len(users)), "dim"),
    )
    if not users:
        return Group(heading, empty_state())
    return Group(heading, *(user_card(u, i) for i, u in enumerate(users, start=1)))


def form_view(form: UserForm) -> Panel:
    rows = Table.grid(padding=(0, 1))
    rows.add_column(style="bold")
    rows.add_column()
    for f in FORM_FIELDS:
        value = form.values.get(f.key, "")
        shown = Text(value) if value else Text(f.placeholder, style="dim italic")
        error = form.errors.get(f.key)
        if error:
            shown.append(f"  {error}", style="red")
        rows.add_row(f"{f.label} *", shown)

    footer = Text(f"\n[s] {form.submit_label}", style="bold green")
    footer.append("   [b] Cancel" if form.is_edit else "   [b] Back")
    return Panel(Group(rows, footer), title=form.title, title_align="left",
                 border_style="green" if not form.errors else "red")


def delete_confirmation(user: UserRecord) -> Panel:
    return Panel(
        Text.assemble(
            "Are you sure you want to delete ", (user.name, "bold"), "?\n",
            ("This action cannot be undone.", "italic"),
        ),
        title="Confirm Delete",
        border_style="red",
    )


def recovery_panel() -> Panel:
    return Panel(
        Text.assemble(
            ("No user selected for editing.\n", "bold"),
            "[v] Return to User List",
        ),
        title="Error",
        border_style="red",
    )


def render_view(directory: UserDirectory, view: Any = None) -> RenderableType:
    """Main content for the current (or the given) view."""
    match directory.view if view is None else view:
        case Viewing():
            return user_list(directory.users, directory.loading)
        case Creating(form=form):
            return form_view(form)
        case Updating(form=form):
            return form_view(form)
        case _:
            return recovery_panel()


def screen(directory: UserDirectory) -> Group:
    parts: list[RenderableType] = [header(), navigation(directory)]
    bar = notification_bar(directory.notification)
    if bar is not None:
        parts.append(bar)
    parts.append(render_view(directory))
    return Group(*parts)
