"""Terminal client CLI — `run` for the interactive directory, `list` for a one-shot table."""

import asyncio
from typing import Callable

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from directory_client import screens
from directory_client.api import APIError, UserAPI
from directory_client.config import get_client_settings
from directory_client.form import FORM_FIELDS, UserForm
from directory_client.state import Creating, UserDirectory, Updating, Viewing

console = Console()

app = typer.Typer(
    help="User Directory terminal client",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

HELP_TEXT = (
    "v: view list  c: create  e N: edit #N  d N: delete #N  "
    "r: refresh  x: dismiss  s: submit  f: fill form  b: back  q: quit"
)

Ask = Callable[..., str]
ConfirmFn = Callable[..., bool]


def fill_form(form: UserForm, ask: Ask) -> None:
    """Prompt for each field, defaulting to its current value."""
    for f in FORM_FIELDS:
        value = ask(f"{f.label} (max {f.max_length})", default=form.values.get(f.key, ""))
        form.set_field(f.key, value)


def _pick(directory: UserDirectory, arg: str) -> int | None:
    try:
        index = int(arg) - 1
    except ValueError:
        return None
    return index if 0 <= index < len(directory.users) else None


async def dispatch(
    directory: UserDirectory,
    command: str,
    ask: Ask = Prompt.ask,
    confirm: ConfirmFn = Confirm.ask,
    out: Console = console,
) -> bool:
    """Apply one command to the directory. Returns False when the user quits."""
    verb, _, arg = command.strip().partition(" ")
    verb = verb.lower()
    view = directory.view

    if verb == "q":
        return False
    if verb == "x":
        directory.dismiss_notification()
    elif verb == "r":
        await directory.refresh()
    elif verb == "v":
        directory.show_list()
    elif verb == "c":
        directory.start_create()
        fill_form(directory.view.form, ask)
    elif verb in ("e", "d") and isinstance(view, Viewing):
        index = _pick(directory, arg.strip())
        if index is None:
            directory.notify(f"No user numbered '{arg.strip()}'")
            return True
        user = directory.users[index]
        if verb == "e":
            directory.start_edit(user)
            fill_form(directory.view.form, ask)
        else:
            out.print(screens.delete_confirmation(user))
            if confirm("Yes, delete?", default=False):
                with out.status("Deleting user..."):
                    await directory.delete(user.id)
    elif verb == "f" and isinstance(view, (Creating, Updating)):
        fill_form(view.form, ask)
    elif verb == "s" and isinstance(view, Creating):
        await directory.submit_create()
    elif verb == "s" and isinstance(view, Updating):
        await directory.submit_update()
    elif verb == "b":
        if isinstance(view, Updating):
            directory.cancel_edit()
        else:
            directory.show_list()
    else:
        directory.notify(f"Unknown command '{command.strip()}'. {HELP_TEXT}")
    return True


def render(directory: UserDirectory, out: Console | None = None) -> None:
    """Redraw the whole screen for the current state."""
    out = out or console
    out.clear()
    out.print(screens.screen(directory))
    out.print(HELP_TEXT, style="dim", highlight=False)


async def _interactive(api_url: str, timeout: float, notification_seconds: float) -> None:
    async with UserAPI(api_url, timeout=timeout) as api:
        directory = UserDirectory(
            api, notification_seconds=notification_seconds, on_change=render,
        )
        await directory.load()
        while True:
            render(directory)
            command = Prompt.ask("Command", default="v")
            if not await dispatch(directory, command):
                break


@app.command("run")
def run_client(
    api_url: str = typer.Option(None, "--api-url", "-u", help="Base URL of the User Directory API"),
) -> None:
    """Open the interactive user directory."""
    settings = get_client_settings()
    try:
        asyncio.run(_interactive(
            api_url or settings.api_url,
            settings.timeout_seconds,
            settings.notification_seconds,
        ))
    except KeyboardInterrupt:
        console.print("\n[yellow]Bye[/yellow]")


@app.command("list")
def list_users(
    api_url: str = typer.Option(None, "--api-url", "-u", help="Base URL of the User Directory API"),
) -> None:
    """Print every user as a table."""
    settings = get_client_settings()

    async def fetch():
        async with UserAPI(api_url or settings.api_url, timeout=settings.timeout_seconds) as api:
            return await api.get_all_users()

    try:
        users = asyncio.run(fetch())
    except APIError as e:
        console.print(f"[red]Failed to list users: {e.message}[/red]")
        raise typer.Exit(code=1) from e

    if not users:
        console.print(screens.empty_state())
        return
    console.print(screens.user_table(users))


def main() -> None:
    """Entry point for the directory-client script."""
    app()


if __name__ == "__main__":
    main()
