"""Textual TUI for the interactive kanban board.

The app is a thin view over :class:`~taskboard_cli.services.board_controller.BoardController`:
it re-renders whenever the board store changes and forwards key presses to
controller operations. Network-bound operations run as workers so the UI
keeps responding while they are in flight.
"""

from __future__ import annotations

import asyncio

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, Label, Static

from taskboard_cli.models import STATUS_FILTERS, STATUSES, BoardLocation, Notification, Task
from taskboard_cli.services.board_controller import BoardController
from taskboard_cli.utils.ui.formatters import STATUS_STYLES

SEVERITIES = {
    "error": "error",
    "warning": "warning",
    "info": "information",
}


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog; dismisses with the answer."""

    DEFAULT_CSS = """
    ConfirmScreen {
        align: center middle;
    }
    ConfirmScreen > Vertical {
        width: 50;
        height: auto;
        border: thick $error;
        padding: 1 2;
        background: $surface;
    }
    ConfirmScreen Horizontal {
        height: auto;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("y", "answer(True)", "Yes"),
        Binding("n,escape", "answer(False)", "No"),
    ]

    def __init__(self, prompt: str):
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.prompt)
            with Horizontal():
                yield Button("Yes (y)", variant="error", id="yes")
                yield Button("No (n)", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class ColumnView(Static):
    """One board column rendered as a list of cards."""

    def __init__(self, status: str):
        super().__init__(classes="column")
        self.status = status

    def render_cards(self, tasks: list[Task], selected: int | None) -> None:
        text = Text()
        text.append(f"{self.status} ({len(tasks)})\n\n", style=f"bold {STATUS_STYLES[self.status]}")
        if not tasks:
            text.append("(empty)", style="dim")
        for index, task in enumerate(tasks):
            style = "reverse" if index == selected else ""
            text.append(f" {task.title} ", style=f"bold {style}")
            text.append("\n")
            if task.description:
                text.append(f"   {task.description[:60]}\n", style="dim")
            text.append("\n")
        self.update(text)


class BoardViewApp(App):
    """A Textual app for the kanban board."""

    TITLE = "Taskboard"
    AUTO_FOCUS = None

    DEFAULT_CSS = """
    #columns {
        height: 1fr;
    }
    .column {
        width: 1fr;
        height: 100%;
        border: round $primary;
        padding: 0 1;
    }
    .column.focused {
        border: round $accent;
    }
    #prompt {
        dock: bottom;
        display: none;
    }
    #prompt.visible {
        display: block;
    }
    #status-line {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $boost;
    }
    """

    BINDINGS = [
        Binding("left,h", "cursor(-1, 0)", "Left", show=False),
        Binding("right,l", "cursor(1, 0)", "Right", show=False),
        Binding("up,k", "cursor(0, -1)", "Up", show=False),
        Binding("down,j", "cursor(0, 1)", "Down", show=False),
        Binding("H,shift+h", "move(-1)", "Move left"),
        Binding("L,shift+l", "move(1)", "Move right"),
        Binding("slash", "search", "Search"),
        Binding("f", "cycle_filter", "Filter"),
        Binding("a", "add", "Add"),
        Binding("e", "edit", "Edit"),
        Binding("x", "delete", "Delete"),
        Binding("r", "reload", "Reload"),
        Binding("escape", "cancel_prompt", "Cancel", show=False),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        controller: BoardController,
        subtitle: str = "",
        confirm_delete: bool = True,
    ):
        super().__init__()
        self.controller = controller
        if confirm_delete:
            self.controller.confirm = self.confirm
        self.sub_title = subtitle
        self.column_index = 0
        self.row_index = 0
        self.prompt_mode: str | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="columns"):
            for status in STATUSES:
                yield ColumnView(status)
        yield Input(id="prompt")
        yield Static(id="status-line")
        yield Footer()

    async def on_mount(self) -> None:
        self.controller.store.subscribe(lambda _store: self.refresh_board())
        self.controller.subscribe_notifications(self.show_notification)
        self.refresh_board()
        self.run_worker(self.controller.start(), exclusive=False)

    async def on_unmount(self) -> None:
        await self.controller.stop()

    # -- rendering ----------------------------------------------------------

    @property
    def current_status(self) -> str:
        return STATUSES[self.column_index]

    def selected_task(self) -> Task | None:
        column = self.controller.columns[self.current_status]
        if 0 <= self.row_index < len(column):
            return column[self.row_index]
        return None

    def refresh_board(self) -> None:
        columns = self.controller.columns
        length = len(columns[self.current_status])
        self.row_index = max(0, min(self.row_index, length - 1))

        for index, view in enumerate(self.query(ColumnView)):
            selected = self.row_index if index == self.column_index else None
            view.render_cards(columns[view.status], selected)
            view.set_class(index == self.column_index, "focused")

        store = self.controller.store
        parts = [f"Filter: {store.status_filter}"]
        if store.query:
            parts.append(f"Search: {store.query!r}")
        if store.loading:
            parts.append("Loading…")
        channel = self.controller.channel
        if channel is not None:
            parts.append("Live" if channel.connected else "Offline")
        self.query_one("#status-line", Static).update("  |  ".join(parts))

    def show_notification(self, notification: Notification) -> None:
        message = notification.message
        if notification.requires_login:
            message += "\nRun 'taskboard login' and reopen the board."
        self.notify(message, severity=SEVERITIES[notification.level])

    # -- navigation and moves -----------------------------------------------

    def action_cursor(self, dx: int, dy: int) -> None:
        if dx:
            self.column_index = (self.column_index + dx) % len(STATUSES)
        self.row_index = max(0, self.row_index + dy)
        self.refresh_board()

    def action_move(self, direction: int) -> None:
        target = self.column_index + direction
        if self.selected_task() is None or not 0 <= target < len(STATUSES):
            return
        source = BoardLocation(status=self.current_status, index=self.row_index)
        destination = BoardLocation(status=STATUSES[target], index=0)
        self.column_index = target
        self.run_worker(self.controller.move_task(source, destination))

    def action_cycle_filter(self) -> None:
        current = STATUS_FILTERS.index(self.controller.store.status_filter)
        self.controller.set_status_filter(STATUS_FILTERS[(current + 1) % len(STATUS_FILTERS)])

    def action_reload(self) -> None:
        self.run_worker(self.controller.reload())

    # -- prompt-driven actions ----------------------------------------------

    def _open_prompt(self, mode: str, placeholder: str, value: str = "") -> None:
        prompt = self.query_one("#prompt", Input)
        self.prompt_mode = mode
        prompt.placeholder = placeholder
        prompt.value = value
        prompt.add_class("visible")
        prompt.focus()

    def _close_prompt(self) -> None:
        prompt = self.query_one("#prompt", Input)
        prompt.remove_class("visible")
        prompt.value = ""
        self.prompt_mode = None
        self.set_focus(None)

    def action_search(self) -> None:
        self._open_prompt("search", "Search title or description", self.controller.store.query)

    def action_add(self) -> None:
        self._open_prompt("add", f"New task title ({self.current_status})")

    def action_edit(self) -> None:
        task = self.selected_task()
        if task is None:
            return
        self.controller.begin_edit(task.id)
        self._open_prompt("edit", "Task title", task.title)

    def action_cancel_prompt(self) -> None:
        if self.prompt_mode == "edit":
            self.controller.cancel_edit()
        elif self.prompt_mode == "search":
            self.controller.flush_query()
        self._close_prompt()

    def on_input_changed(self, event: Input.Changed) -> None:
        if self.prompt_mode == "search":
            self.controller.set_query_debounced(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        mode, value = self.prompt_mode, event.value
        self._close_prompt()
        if mode == "search":
            self.controller.set_query(value)
        elif mode == "add" and value.strip():
            self.run_worker(self.controller.create_task(value, status=self.current_status))
        elif mode == "edit":
            self.controller.update_draft(title=value)
            self.run_worker(self.controller.save_edit())

    def action_delete(self) -> None:
        task = self.selected_task()
        if task is not None:
            self.run_worker(self.controller.delete_task(task.id))

    async def confirm(self, prompt: str) -> bool:
        """Ask through a modal dialog; used by the controller before deleting."""
        answer: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self.push_screen(ConfirmScreen(prompt), answer.set_result)
        return await answer

    def on_key(self, event: events.Key) -> None:
        if self.prompt_mode is None and event.key.isdigit():
            index = int(event.key) - 1
            if 0 <= index < len(STATUSES):
                self.column_index = index
                self.refresh_board()
                event.stop()


def run_board_view(
    controller: BoardController, subtitle: str = "", confirm_delete: bool = True
) -> None:
    """Run the board app until the user quits."""
    BoardViewApp(controller, subtitle=subtitle, confirm_delete=confirm_delete).run()
