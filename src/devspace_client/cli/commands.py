# src/devspace_client/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..core.errors import DevSpaceError, friendly_error_message
from ..core.state import AppState
from ..tasks.task_models import Task, TaskDraft, TaskStatus

CommandEmitter = Callable[[str], None]
SecretPrompt = Callable[[str], Awaitable[str]]

logger = logging.getLogger(__name__)

COLUMN_TITLES = {
    TaskStatus.TODO: "To do",
    TaskStatus.IN_PROGRESS: "In progress",
    TaskStatus.COMPLETED: "Completed",
}


@dataclass(slots=True)
class CommandIO:
    """How a handler talks back to the user besides its return value."""

    emit: CommandEmitter | None = None
    prompt_secret: SecretPrompt | None = None


CommandHandler = Callable[[AppState, list[str], CommandIO], Awaitable[str]]


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /login, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str, io: CommandIO | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Client errors come back as friendly text, never as exceptions.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args, io or CommandIO())
        except DevSpaceError as e:
            logger.info("/%s failed: %s", name, e.__class__.__name__)
            return friendly_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_board(columns: dict[TaskStatus, list[Task]]) -> str:
    lines: list[str] = []
    for status, tasks in columns.items():
        lines.append(f"== {COLUMN_TITLES.get(status, status.value)} ({len(tasks)}) ==")
        for t in tasks:
            extra = []
            if t.assignee:
                extra.append(f"@{t.assignee}")
            if t.due_date:
                extra.append(f"due {t.due_date}")
            suffix = f" [{', '.join(extra)}]" if extra else ""
            lines.append(f"  {t.id[:8]}  {t.title}{suffix}")
            if t.description:
                lines.append(f"            {t.description}")
    return "\n".join(lines)


def _resolve_task(state: AppState, ref: str) -> Task | str:
    """Accept a full id or a unique id prefix; returns the Task or an error text."""
    matches = [t for t in state.tasks.tasks if t.id == ref or t.id.startswith(ref)]
    exact = [t for t in matches if t.id == ref]
    if exact:
        return exact[0]
    if not matches:
        return f"No task matches '{ref}'."
    if len(matches) > 1:
        return f"'{ref}' matches {len(matches)} tasks; use a longer id."
    return matches[0]


async def _credentials(args: list[str], io: CommandIO) -> tuple[str, str] | None:
    if not args:
        return None
    email = args[0]
    if len(args) > 1:
        return email, " ".join(args[1:])
    if io.prompt_secret is None:
        return None
    password = await io.prompt_secret("Password: ")
    return (email, password) if password else None


async def cmd_help(state: AppState, args: list[str], io: CommandIO) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], io: CommandIO) -> str:
    session = state.sessions.session
    error = f"\n  Last error: {session.last_error}" if session.last_error else ""
    renewal = "armed" if state.sessions.timer.armed else "off"
    return (
        "Status:\n"
        f"  Server: {state.transport.base_url}\n"
        f"  Session: {session.phase.value}{error}\n"
        f"  Renewal: {renewal} (every {state.sessions.timer.interval_seconds:.0f}s)\n"
        f"  Tasks: {len(state.tasks.tasks)} loaded, {len(state.tasks.outbox)} change(s) pending"
    )


async def _after_login(state: AppState) -> str:
    tasks = await state.tasks.load_all()
    return f"Logged in. {len(tasks)} task(s) on your board."


async def cmd_login(state: AppState, args: list[str], io: CommandIO) -> str:
    creds = await _credentials(args, io)
    if creds is None:
        return "Usage: /login <email>"
    await state.sessions.login(*creds)
    return await _after_login(state)


async def cmd_register(state: AppState, args: list[str], io: CommandIO) -> str:
    creds = await _credentials(args, io)
    if creds is None:
        return "Usage: /register <email>"
    if io.emit:
        io.emit("Creating account...")
    await state.sessions.register(*creds)
    return await _after_login(state)


async def cmd_logout(state: AppState, args: list[str], io: CommandIO) -> str:
    await state.sessions.logout()
    return "Logged out."


async def cmd_whoami(state: AppState, args: list[str], io: CommandIO) -> str:
    await state.sessions.verify()
    return "The server confirms your session is active."


async def cmd_board(state: AppState, args: list[str], io: CommandIO) -> str:
    if not state.sessions.is_session_active():
        return "You are not logged in. Use /login or /register."
    return render_board(state.tasks.columns())


async def cmd_sync(state: AppState, args: list[str], io: CommandIO) -> str:
    await state.tasks.load_all()
    return render_board(state.tasks.columns())


async def cmd_add(state: AppState, args: list[str], io: CommandIO) -> str:
    """
    /add title | description | assignee | due-date
    Only the title is required.
    """
    fields = [f.strip() for f in " ".join(args).split("|")]
    if not fields or not fields[0]:
        return "Usage: /add <title> [| description [| assignee [| due-date]]]"
    fields += [""] * (4 - len(fields))
    draft = TaskDraft(title=fields[0], description=fields[1], assignee=fields[2], due_date=fields[3])
    task = await state.tasks.create(draft)
    return f"Created {task.id[:8]} '{task.title}'."


async def cmd_move(state: AppState, args: list[str], io: CommandIO) -> str:
    if len(args) != 2:
        return "Usage: /move <task-id> <todo|in-progress|completed>"
    try:
        status = TaskStatus(args[1].lower())
    except ValueError:
        return f"Unknown status '{args[1]}'. Use todo, in-progress or completed."
    found = _resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    state.tasks.set_status(found.id, status)
    return f"Moved '{found.title}' to {status.value}."


async def cmd_rm(state: AppState, args: list[str], io: CommandIO) -> str:
    if len(args) != 1:
        return "Usage: /rm <task-id>"
    found = _resolve_task(state, args[0])
    if isinstance(found, str):
        return found
    state.tasks.remove(found.id)
    return f"Deleted '{found.title}'."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session and sync status.")
registry.register("register", cmd_register, help_text="Create an account: /register <email>.")
registry.register("login", cmd_login, help_text="Log in: /login <email>.")
registry.register("logout", cmd_logout, help_text="Log out and clear the board.")
registry.register("whoami", cmd_whoami, help_text="Ask the server whether the session is still valid.")
registry.register("board", cmd_board, help_text="Show the task board.", aliases=["b"])
registry.register("sync", cmd_sync, help_text="Reload all tasks from the server.")
registry.register("add", cmd_add, help_text="New task: /add title | description | assignee | due-date.")
registry.register("move", cmd_move, help_text="Change status: /move <id> <todo|in-progress|completed>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del"])
