import asyncio
from typing import List, Optional

from rich.text import Text
from textual import events
from textual.containers import VerticalScroll
from textual.message import Message
from textual.timer import Timer
from textual.widgets import Static

from catchview.core.api_client import MailboxClient
from catchview.core.models import MessageSummary, format_timestamp
from catchview.tui.state import ViewerState
from catchview.utils.errors import CatchViewError, ErrorHandler
from catchview.utils.logging import async_log_call, get_logger, log_event

logger = get_logger(__name__)

NO_EMAILS_PLACEHOLDER = "No emails received"
LIST_ERROR_PLACEHOLDER = "Error loading emails"


class MessageSelected(Message):
    """Posted when a message becomes the selection and should be shown."""

    def __init__(self, message_id: str) -> None:
        super().__init__()
        self.message_id = message_id


class InboxEmpty(Message):
    """Posted when a refresh finds no messages on the backend."""


class ListRefreshed(Message):
    """Posted after a successful refresh."""

    def __init__(self, count: int) -> None:
        super().__init__()
        self.count = count


class ListRefreshFailed(Message):
    """Posted when the summary collection could not be fetched."""

    def __init__(self, error: CatchViewError) -> None:
        super().__init__()
        self.error = error


def format_list_entry(summary: MessageSummary) -> Text:
    """Title, sender and receipt time of one list entry."""
    entry = Text()
    entry.append(summary.display_subject, style="bold")
    entry.append("\n")
    entry.append(f"From: {summary.sender}", style="dim")
    entry.append("  ")
    entry.append(format_timestamp(summary.received_at), style="dim")
    return entry


class MessageItem(Static):
    """One clickable entry of the message list."""

    class Selected(Message):
        def __init__(self, item: "MessageItem") -> None:
            super().__init__()
            self.item = item

    def __init__(self, summary: MessageSummary, index: int, active: bool = False):
        classes = "email-item active" if active else "email-item"
        super().__init__(format_list_entry(summary), id=f"item-{index}", classes=classes)
        self.summary = summary

    @property
    def message_id(self) -> str:
        return self.summary.id

    @property
    def is_active(self) -> bool:
        return self.has_class("active")

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(self.Selected(self))


class MessageList(VerticalScroll):
    """Keeps the list pane in sync with the backend's summary collection.

    Every refresh replaces the whole list. The list is the only writer of the
    selection apart from the clear action's reset.
    """

    def __init__(self, client: MailboxClient, state: ViewerState):
        super().__init__(id="message-list")
        self.client = client
        self.state = state
        self.summaries: List[MessageSummary] = []
        self.placeholder: Optional[str] = None
        self.poll_timer: Optional[Timer] = None
        self._render_lock = asyncio.Lock()

    @property
    def items(self) -> List[MessageItem]:
        return list(self.query(MessageItem))

    @property
    def active_items(self) -> List[MessageItem]:
        return [item for item in self.items if item.is_active]

    def start_polling(self, interval: float) -> None:
        """Refresh now, then every interval seconds until the list is unmounted."""
        self.stop_polling()
        self.request_refresh()
        self.poll_timer = self.set_interval(interval, self.request_refresh, name="poll-inbox")

    def stop_polling(self) -> None:
        if self.poll_timer is not None:
            self.poll_timer.stop()
            self.poll_timer = None

    def request_refresh(self) -> None:
        self.run_worker(self.refresh_list(), group="refresh")

    def on_unmount(self) -> None:
        self.stop_polling()

    @async_log_call
    async def refresh_list(self) -> None:
        """Fetch the summary collection and re-render the list."""
        try:
            summaries = await self.client.list_messages()
        except CatchViewError as e:
            ErrorHandler.handle(e, LIST_ERROR_PLACEHOLDER, log_traceback=False)
            async with self._render_lock:
                await self._show_placeholder(LIST_ERROR_PLACEHOLDER)
            self.post_message(ListRefreshFailed(e))
            return

        async with self._render_lock:
            self.summaries = summaries

            if not summaries:
                await self._show_placeholder(NO_EMAILS_PLACEHOLDER)
                log_event("refresh", "Inbox is empty", count=0)
                self.post_message(InboxEmpty())
                self.post_message(ListRefreshed(0))
                return

            self.placeholder = None
            await self.remove_children()
            await self.mount_all(
                MessageItem(summary, index, active=summary.id == self.state.selected_id)
                for index, summary in enumerate(summaries)
            )

            log_event("refresh", f"Listed {len(summaries)} emails", count=len(summaries))
            self.post_message(ListRefreshed(len(summaries)))

            if not self.state.has_selection:
                self.select_item(self.items[0])
            elif not self.active_items:
                # Selection kept even though the message is gone from the backend
                logger.debug(f"Selected email {self.state.selected_id} is no longer listed")

    async def _show_placeholder(self, text: str) -> None:
        self.placeholder = text
        await self.remove_children()
        await self.mount(Static(text, classes="placeholder"))

    def select_item(self, item: MessageItem) -> None:
        """Make an item the active selection and ask for its content."""
        for other in self.items:
            if other is not item:
                other.remove_class("active")
        item.add_class("active")
        item.scroll_visible()

        self.state.select(item.message_id)
        log_event("selection", f"Selected email {item.message_id}", message_id=item.message_id)
        self.post_message(MessageSelected(item.message_id))

    def select_offset(self, delta: int) -> None:
        """Move the selection up or down the list by delta entries."""
        items = self.items
        if not items:
            return

        ids = [item.message_id for item in items]
        if self.state.selected_id in ids:
            index = ids.index(self.state.selected_id) + delta
        else:
            index = 0

        index = max(0, min(index, len(items) - 1))
        if items[index].message_id != self.state.selected_id:
            self.select_item(items[index])

    def on_message_item_selected(self, event: MessageItem.Selected) -> None:
        event.stop()
        self.select_item(event.item)

